"""Error Hierarchy - typed exceptions for every failure the API reports.

Invariants:
    - Every error has a code (str), severity (ErrorSeverity) and http_status
    - Domain errors (400-level) are warnings; infrastructure errors (500-level) are critical
    - to_response() produces the RealWorld envelope {"errors": {field: [message]}}
    - Errors without a field are reported under the "body" key
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with ConduitError base: FastAPI global handler catches all
    - Handlers never raise these; routes convert failed Results via unwrap()
    - Correlation (request id, command) is carried by log records, not by the exception
"""

from enum import Enum
from typing import TypeVar

from conduit.core.domain_types import ErrorKind
from conduit.core.result import Failure, Result

T = TypeVar("T")


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ConduitError(Exception):
    """Base exception for all Conduit errors."""

    def __init__(
        self,
        message: str,
        code: str,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
        field: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.severity = severity
        self.http_status = http_status
        self.field = field

    def to_response(self) -> dict:
        """Convert to the RealWorld error envelope."""
        return {"errors": {self.field or "body": [self.message]}}


# ─── Domain Errors (400-level) ──────────────────────────────────

class NotFoundError(ConduitError):
    """Requested resource does not exist."""
    def __init__(self, message: str):
        super().__init__(message, "NOT_FOUND", ErrorSeverity.WARNING, 404)


class MissingEntityError(ConduitError):
    """An entity referenced by the request (not the target) does not exist."""
    def __init__(self, message: str):
        super().__init__(message, "MISSING_ENTITY", ErrorSeverity.WARNING, 404)


class InvalidStateError(ConduitError):
    """Operation not allowed in the current relationship state."""
    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message, "INVALID_STATE", ErrorSeverity.WARNING, 422, field,
        )


class ValidationFailedError(ConduitError):
    """Input rejected by a domain rule (uniqueness, entity invariant)."""
    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorSeverity.WARNING, 422, field,
        )


class ForbiddenError(ConduitError):
    """Caller is authenticated but does not own the resource."""
    def __init__(self, message: str):
        super().__init__(message, "FORBIDDEN", ErrorSeverity.WARNING, 403)


class UnauthorizedError(ConduitError):
    """Missing, malformed or rejected credentials."""
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, "UNAUTHORIZED", ErrorSeverity.WARNING, 401)


# ─── Infrastructure Errors (500-level) ──────────────────────────

class UnexpectedError(ConduitError):
    """Unanticipated failure surfaced through a Result."""
    def __init__(self, message: str):
        super().__init__(message, "UNEXPECTED", ErrorSeverity.CRITICAL, 500)


class DatabaseError(ConduitError):
    """Database operation failed outside a handler (session teardown, commit)."""
    def __init__(self, message: str, operation: str):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorSeverity.CRITICAL, 503,
        )


# ─── Result → exception ─────────────────────────────────────────

def error_from_failure(failure: Failure) -> ConduitError:
    """Map a handler Failure to the exception the transport reports."""
    kind = failure.kind
    if kind is ErrorKind.NOT_FOUND:
        return NotFoundError(failure.message)
    if kind is ErrorKind.MISSING_ENTITY:
        return MissingEntityError(failure.message)
    if kind is ErrorKind.INVALID_STATE:
        return InvalidStateError(failure.message, failure.field)
    if kind is ErrorKind.VALIDATION:
        return ValidationFailedError(failure.message, failure.field)
    if kind is ErrorKind.FORBIDDEN:
        return ForbiddenError(failure.message)
    if kind is ErrorKind.UNAUTHORIZED:
        return UnauthorizedError(failure.message)
    return UnexpectedError(failure.message)


def unwrap(result: Result[T]) -> T:
    """Return the value of a successful Result or raise its ConduitError."""
    if result.error is not None:
        raise error_from_failure(result.error)
    return result.value  # type: ignore[return-value]
