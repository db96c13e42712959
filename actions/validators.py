"""
Action Schema Validation

Checks normalized fields against an ActionSpec and reports the first problem
with the field name and what was expected, so callers can fix their input
without guessing.
"""

from typing import Any, Mapping, Optional

from .identifiers import identifier_problem
from .outcome import ValidationOutcome
from .specs import ActionSpec, FieldDef


def _type_problem(field_def: FieldDef, value: Any) -> Optional[str]:
    """Return a description of the type mismatch, or None if `value` fits."""
    t = field_def.type

    if t == "string":
        if not isinstance(value, str):
            return "must be a string"
    elif t == "identifier":
        problem = identifier_problem(value)
        if problem:
            return f"must be a valid identifier ({problem})"
    elif t == "integer":
        # bool is an int subclass; true/false is never a count or a pid
        if isinstance(value, bool) or not isinstance(value, int):
            return "must be an integer"
    elif t == "number":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return "must be a number"
    elif t == "boolean":
        if not isinstance(value, bool):
            return "must be a boolean"
    elif t == "enum":
        if value not in field_def.choices:
            return f"must be one of: {', '.join(field_def.choices)}"
    elif t == "array":
        if not isinstance(value, (list, tuple)):
            return "must be an array"
        if field_def.item_type:
            item_def = FieldDef(name=field_def.name, type=field_def.item_type)
            for index, item in enumerate(value):
                problem = _type_problem(item_def, item)
                if problem:
                    return f"item {index} {problem}"

    return None


def _present(fields: Mapping[str, Any], name: str) -> bool:
    return fields.get(name) is not None


def validate_fields(fields: Mapping[str, Any], spec: ActionSpec) -> ValidationOutcome:
    """
    Validate normalized fields against a spec.

    Order:
    1. required fields present and type-correct
    2. every present field declared and type-correct
    3. cross-field constraints

    Returns the first failure as ValidationOutcome.invalid(reason, field).
    """
    label = f"{spec.action_kind}.{spec.sub_action}"

    for field_def in spec.required:
        if not _present(fields, field_def.name):
            return ValidationOutcome.invalid(
                f"'{field_def.name}' is required for {label}", field_def.name
            )
        problem = _type_problem(field_def, fields[field_def.name])
        if problem:
            return ValidationOutcome.invalid(f"'{field_def.name}' {problem}", field_def.name)

    for name, value in fields.items():
        field_def = spec.field_def(name)
        if field_def is None:
            return ValidationOutcome.invalid(
                f"Unknown field '{name}' for {label}. Valid fields: {', '.join(spec.field_names()) or '(none)'}",
                name,
            )
        if value is None:
            continue
        problem = _type_problem(field_def, value)
        if problem:
            return ValidationOutcome.invalid(f"'{name}' {problem}", name)

    for constraint in spec.constraints:
        if not constraint.predicate(fields):
            return ValidationOutcome.invalid(constraint.message, constraint.field)

    return ValidationOutcome.valid()
