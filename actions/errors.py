"""
Action Errors

Every failure an action request can produce, with a stable code and a
human-readable reason that points at the offending field or pattern.

The first four are raised before any SQL reaches the database and are never
retried. ExecutionError wraps whatever the executor reports and is passed
back to the caller as-is.
"""

from typing import Any, Optional


class ActionError(Exception):
    """Base class for action pipeline errors."""

    code = "ACTION_ERROR"

    def __init__(self, reason: str, field: Optional[str] = None, **extra: Any):
        super().__init__(reason)
        self.reason = reason
        self.field = field
        self.extra = extra

    def to_dict(self) -> dict:
        """Structured error payload returned to tool callers."""
        err = {"error": True, "code": self.code, "message": self.reason}
        if self.field:
            err["path"] = self.field
        err.update(self.extra)
        return err

    def __str__(self) -> str:
        return self.reason


class NotFoundError(ActionError):
    """Unknown action kind or sub-action."""

    code = "NOT_FOUND"


class ValidationError(ActionError):
    """Missing, mistyped, undeclared or constraint-violating field."""

    code = "VALIDATION_ERROR"


class UnsafeFragmentError(ActionError):
    """A free-text fragment matched the dangerous-pattern blocklist."""

    code = "UNSAFE_FRAGMENT"

    def __init__(self, reason: str, field: Optional[str] = None, **extra: Any):
        message = f"Unsafe {field}: {reason}" if field else f"Unsafe fragment: {reason}"
        super().__init__(message, field=field, **extra)
        self.pattern_reason = reason


class UnsupportedCombinationError(ActionError):
    """A builder has no statement for the requested action and target."""

    code = "UNSUPPORTED_COMBINATION"


class ExecutionError(ActionError):
    """Database-side failure reported by the executor (syntax, constraint, timeout, connection)."""

    code = "EXECUTION_ERROR"


__all__ = [
    'ActionError',
    'NotFoundError',
    'ValidationError',
    'UnsafeFragmentError',
    'UnsupportedCombinationError',
    'ExecutionError',
]
