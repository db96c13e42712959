"""
Typed action pipeline: alias normalization, field validation, dangerous-pattern
checks and statement building for PostgreSQL actions.

Usage:
    from actions import ActionService, get_registry

    service = ActionService(get_registry(), executor=db)
    result = await service.handle("admin", "vacuum", {"target": "orders", "options": {"full": True}})
"""

from .catalog import build_default_registry, get_registry
from .errors import (
    ActionError,
    ExecutionError,
    NotFoundError,
    UnsafeFragmentError,
    UnsupportedCombinationError,
    ValidationError,
)
from .executor import ExecuteOptions, Executor, QueryResult
from .normalizer import normalize
from .outcome import ValidationOutcome
from .patterns import validate_fragment
from .registry import ActionRegistry
from .service import ActionService
from .specs import ActionRequest, ActionSpec, BuiltStatement, FieldConstraint, FieldDef
from .validators import validate_fields

__all__ = [
    'ActionError',
    'ActionRegistry',
    'ActionRequest',
    'ActionService',
    'ActionSpec',
    'BuiltStatement',
    'ExecuteOptions',
    'ExecutionError',
    'Executor',
    'FieldConstraint',
    'FieldDef',
    'NotFoundError',
    'QueryResult',
    'UnsafeFragmentError',
    'UnsupportedCombinationError',
    'ValidationError',
    'ValidationOutcome',
    'build_default_registry',
    'get_registry',
    'normalize',
    'validate_fields',
    'validate_fragment',
]
