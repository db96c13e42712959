"""
Action Spec Definitions

Declarative description of each action: which fields it takes, their types,
cross-field constraints and accepted aliases. Specs are built once at import
time and are read-only afterwards.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

FIELD_TYPES = ("string", "identifier", "integer", "number", "boolean", "enum", "array")


@dataclass(frozen=True)
class FieldDef:
    """A single declared field of an action."""
    name: str
    type: str  # one of FIELD_TYPES
    choices: tuple = ()  # enum members
    item_type: Optional[str] = None  # element type for arrays
    free_text: bool = False  # placed inline in SQL, must pass the pattern blocklist
    description: str = ""

    def __post_init__(self):
        if self.type not in FIELD_TYPES:
            raise ValueError(f"Unknown field type '{self.type}' for field '{self.name}'")
        if self.type == "enum" and not self.choices:
            raise ValueError(f"Enum field '{self.name}' needs choices")


@dataclass(frozen=True)
class FieldConstraint:
    """Cross-field rule; `predicate(fields)` must return True for valid input."""
    field: str
    message: str
    predicate: Callable[[Mapping[str, Any]], bool]


@dataclass(frozen=True)
class ActionSpec:
    """Complete static declaration of one (action_kind, sub_action)."""
    action_kind: str
    sub_action: str
    required: tuple[FieldDef, ...] = ()
    optional: tuple[FieldDef, ...] = ()
    constraints: tuple[FieldConstraint, ...] = ()
    aliases: Mapping[str, str] = field(default_factory=dict)
    description: str = ""

    def __post_init__(self):
        # Freeze the alias table so a registered spec can't be changed later
        object.__setattr__(self, "aliases", MappingProxyType(dict(self.aliases)))
        names = [f.name for f in self.required + self.optional]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate field declared in {self.key}")
        for alias, canonical in self.aliases.items():
            if canonical not in names:
                raise ValueError(f"Alias '{alias}' in {self.key} points at undeclared field '{canonical}'")

    @property
    def key(self) -> tuple[str, str]:
        return (self.action_kind, self.sub_action)

    @property
    def free_text_fields(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.required + self.optional if f.free_text)

    def field_def(self, name: str) -> Optional[FieldDef]:
        for f in self.required + self.optional:
            if f.name == name:
                return f
        return None

    def field_names(self) -> list[str]:
        return [f.name for f in self.required + self.optional]


@dataclass(frozen=True)
class ActionRequest:
    """One inbound request, after the transport has split out kind and sub-action."""
    action_kind: str
    sub_action: str
    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields or {})))


@dataclass(frozen=True)
class BuiltStatement:
    """Finished SQL text plus positional parameters, ready for the executor."""
    sql: str
    params: tuple = ()
    timeout_ms: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "params", tuple(self.params))
