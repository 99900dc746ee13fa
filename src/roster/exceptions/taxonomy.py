"""Error taxonomy with error codes for the request and persistence paths.

Error Code Convention:
    RS1xx - Request payload errors
    RS2xx - Conflict errors
    RS3xx - Lookup errors
    RS9xx - Persistence errors (logged, never surfaced to API callers)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Structured error codes for logs and API envelopes."""

    # Request payload errors (RS1xx)
    RS100 = "RS100"  # Required field missing
    RS101 = "RS101"  # Field validation failed

    # Conflict errors (RS2xx)
    RS200 = "RS200"  # Duplicate user name

    # Lookup errors (RS3xx)
    RS300 = "RS300"  # User not found

    # Persistence errors (RS9xx)
    RS900 = "RS900"  # Data file load failed
    RS901 = "RS901"  # Data file save failed
    RS902 = "RS902"  # Backup copy failed
    RS903 = "RS903"  # Operation log write failed


# HTTP status for each request-path code
STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.RS100: 400,
    ErrorCode.RS101: 422,
    ErrorCode.RS200: 409,
    ErrorCode.RS300: 404,
}


@dataclass
class RosterFault(Exception):
    """Base exception with structured context for logging.

    Attributes:
        message: Human-readable error description
        code: Structured error code for categorization
        context: Additional context (user id, file path, ...)
        recoverable: Whether the service keeps working after this fault
        recovery_hint: Suggested fix for the operator
    """

    message: str
    code: ErrorCode
    context: dict[str, Any] = field(default_factory=dict)
    recoverable: bool = True
    recovery_hint: str | None = None

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __post_init__(self) -> None:
        super().__init__(str(self))

    def to_json(self) -> dict[str, Any]:
        """Structured logging format."""
        return {
            "error_code": self.code.value,
            "message": self.message,
            "context": self.context,
            "recoverable": self.recoverable,
            "recovery_hint": self.recovery_hint,
        }


class RequestFault(RosterFault):
    """A rejected request. Raised before any state is mutated."""

    @property
    def status_code(self) -> int:
        return STATUS_CODES.get(self.code, 500)

    def envelope(self) -> dict[str, Any]:
        """Response body for this fault."""
        return {"success": False, "message": self.message}


class MissingFieldsError(RequestFault):
    """``name`` or ``age`` absent from the request body (RS100)."""

    def __init__(self, message: str = "All fields are required", **context: Any):
        super().__init__(message=message, code=ErrorCode.RS100, context=context)


class UserValidationError(RequestFault):
    """One or more field violations (RS101)."""

    def __init__(self, errors: list[str]):
        super().__init__(
            message="User data failed validation",
            code=ErrorCode.RS101,
            context={"errors": list(errors)},
        )
        self.errors = list(errors)

    def envelope(self) -> dict[str, Any]:
        return {"success": False, "errors": self.errors}


class DuplicateNameError(RequestFault):
    """A user with the same name already exists (RS200)."""

    def __init__(self, name: str):
        super().__init__(
            message="User name already exists",
            code=ErrorCode.RS200,
            context={"name": name},
        )
        self.name = name


class UserNotFoundError(RequestFault):
    """No user with the requested id (RS300)."""

    def __init__(self, user_id: Any):
        super().__init__(
            message="User not found",
            code=ErrorCode.RS300,
            context={"user_id": user_id},
        )
        self.user_id = user_id


class PersistenceError(RosterFault):
    """File I/O failures (RS9xx). Logged, never propagated to HTTP callers."""

    pass
