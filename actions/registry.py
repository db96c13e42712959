"""
Action Registry - Maps (action_kind, sub_action) to spec, normalizer and builder

Every request goes through the same fixed pipeline:

    normalize -> validate fields -> pattern-check free text -> build

Any stage can stop the request. Nothing is built from input that has not
passed every earlier stage, and nothing partial ever leaves dispatch().

Usage:
    from actions.catalog import get_registry

    statement = get_registry().dispatch("admin", "vacuum", {"target": "orders"})
    # BuiltStatement(sql='VACUUM "orders"', params=())
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from .errors import NotFoundError, UnsafeFragmentError, ValidationError
from .normalizer import normalize
from .patterns import check_fragment
from .specs import ActionSpec, BuiltStatement
from .validators import validate_fields

logger = logging.getLogger(__name__)

Builder = Callable[[Mapping[str, Any]], BuiltStatement]
Normalizer = Callable[[Mapping[str, Any], Mapping[str, str]], dict]


@dataclass(frozen=True)
class RegisteredAction:
    spec: ActionSpec
    builder: Builder
    normalizer: Normalizer


class ActionRegistry:
    """Tagged-variant table of every action the server accepts."""

    def __init__(self):
        self._actions: dict[tuple[str, str], RegisteredAction] = {}
        self._frozen = False

    def register(self, spec: ActionSpec, builder: Builder, normalizer: Normalizer = normalize) -> None:
        if self._frozen:
            raise RuntimeError(f"Registry is frozen; cannot register {spec.action_kind}.{spec.sub_action}")
        if spec.key in self._actions:
            raise ValueError(f"Action {spec.action_kind}.{spec.sub_action} is already registered")
        self._actions[spec.key] = RegisteredAction(spec, builder, normalizer)

    def freeze(self) -> None:
        """No more registrations after this; lookups stay available."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def kinds(self) -> list[str]:
        return sorted({kind for kind, _ in self._actions})

    def describe(self, action_kind: str) -> list[str]:
        """Sub-actions registered for a kind, in registration order."""
        return [sub for kind, sub in self._actions if kind == action_kind]

    def get_spec(self, action_kind: str, sub_action: str) -> Optional[ActionSpec]:
        entry = self._actions.get((action_kind, sub_action))
        return entry.spec if entry else None

    def _lookup(self, action_kind: str, sub_action: str) -> RegisteredAction:
        entry = self._actions.get((action_kind, sub_action))
        if entry is not None:
            return entry

        valid = self.describe(action_kind)
        if not valid:
            raise NotFoundError(
                f"Unknown action kind '{action_kind}'. Valid kinds: {', '.join(self.kinds())}",
                field="action_kind",
            )
        raise NotFoundError(
            f"Unknown action '{sub_action}' for {action_kind}. Valid actions: {', '.join(valid)}",
            field="action",
            valid_actions=valid,
        )

    def dispatch(self, action_kind: str, sub_action: str, raw_fields: Optional[Mapping[str, Any]] = None) -> BuiltStatement:
        """
        Turn a raw request into a BuiltStatement.

        Raises:
            NotFoundError: (action_kind, sub_action) is not registered
            ValidationError: a field is missing, mistyped, unknown or breaks a constraint
            UnsafeFragmentError: a free-text field matched the blocklist
            UnsupportedCombinationError: the builder has no statement for this input
        """
        entry = self._lookup(action_kind, sub_action)
        spec = entry.spec

        fields = entry.normalizer(raw_fields or {}, spec.aliases)

        outcome = validate_fields(fields, spec)
        if not outcome:
            logger.warning(f"🚫 {action_kind}.{sub_action} rejected: {outcome.reason}")
            raise ValidationError(outcome.reason, field=outcome.field)

        for name in spec.free_text_fields:
            if fields.get(name) is not None:
                try:
                    check_fragment(fields[name], name)
                except UnsafeFragmentError as e:
                    logger.warning(f"🚫 {action_kind}.{sub_action} rejected unsafe '{name}': {e}")
                    raise

        statement = entry.builder(fields)
        logger.debug(f"{action_kind}.{sub_action} built with {len(statement.params)} param(s)")
        return statement


__all__ = [
    'ActionRegistry',
    'RegisteredAction',
]
