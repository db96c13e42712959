"""
Validation outcome shared by the pattern validator and schema validation.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ValidationOutcome:
    """Valid, or Invalid with a reason (and the field it concerns, when known)."""

    ok: bool
    reason: Optional[str] = None
    field: Optional[str] = None

    @classmethod
    def valid(cls) -> "ValidationOutcome":
        return _VALID

    @classmethod
    def invalid(cls, reason: str, field: Optional[str] = None) -> "ValidationOutcome":
        return cls(ok=False, reason=reason, field=field)

    def __bool__(self) -> bool:
        return self.ok


_VALID = ValidationOutcome(ok=True)
