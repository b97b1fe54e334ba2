"""Result & errors - handler outcomes and their HTTP exceptions.

Tests:
    - ok/fail construction and is_ok
    - unwrap returns the value or raises the matching ConduitError subclass
    - to_response builds the RealWorld {"errors": {...}} envelope
    - every error carries its code and severity; 500-level errors are critical
"""

import pytest

from conduit.core.domain_types import ErrorKind
from conduit.core.errors import (
    unwrap, error_from_failure,
    NotFoundError, InvalidStateError, ValidationFailedError, MissingEntityError,
    ForbiddenError, UnauthorizedError, UnexpectedError, DatabaseError,
    ErrorSeverity,
)
from conduit.core.result import (
    Result, Failure, not_found, missing_entity, forbidden, invalid,
)


def test_ok_result_carries_value():
    result = Result.ok(42)
    assert result.is_ok
    assert result.value == 42
    assert result.error is None


def test_ok_without_value():
    assert Result.ok().is_ok


def test_fail_result_carries_failure():
    result = Result.fail(ErrorKind.INVALID_STATE, "is not being followed", field="username")
    assert not result.is_ok
    assert result.error == Failure(
        ErrorKind.INVALID_STATE, "is not being followed", "username",
    )


def test_shorthands():
    assert not_found("x").error.kind is ErrorKind.NOT_FOUND
    assert forbidden("x").error.kind is ErrorKind.FORBIDDEN
    assert invalid("slug", "has already been taken").error.field == "slug"
    missing = missing_entity("User", "abc")
    assert missing.error.kind is ErrorKind.MISSING_ENTITY
    assert missing.error.message == "User 'abc' does not exist"


def test_from_failure_keeps_failure():
    failure = Failure(ErrorKind.FORBIDDEN, "nope")
    assert Result.from_failure(failure).error is failure


def test_unwrap_returns_value():
    assert unwrap(Result.ok("value")) == "value"


@pytest.mark.parametrize("kind, exc_type, status", [
    (ErrorKind.NOT_FOUND, NotFoundError, 404),
    (ErrorKind.MISSING_ENTITY, MissingEntityError, 404),
    (ErrorKind.INVALID_STATE, InvalidStateError, 422),
    (ErrorKind.VALIDATION, ValidationFailedError, 422),
    (ErrorKind.FORBIDDEN, ForbiddenError, 403),
    (ErrorKind.UNAUTHORIZED, UnauthorizedError, 401),
    (ErrorKind.UNEXPECTED, UnexpectedError, 500),
])
def test_unwrap_raises_matching_error(kind, exc_type, status):
    with pytest.raises(exc_type) as info:
        unwrap(Result.fail(kind, "boom"))
    assert info.value.http_status == status


def test_field_error_response_uses_field_key():
    error = error_from_failure(
        Failure(ErrorKind.VALIDATION, "has already been taken", "email"),
    )
    assert error.to_response() == {"errors": {"email": ["has already been taken"]}}


def test_unscoped_error_response_uses_body_key():
    error = error_from_failure(Failure(ErrorKind.NOT_FOUND, "Article 'x' not found"))
    assert error.to_response() == {"errors": {"body": ["Article 'x' not found"]}}


def test_database_error_is_critical_503():
    error = DatabaseError("Integrity constraint violated", "commit")
    assert error.http_status == 503
    assert error.message == "Database commit failed: Integrity constraint violated"
    assert error.code == "DATABASE_ERROR"
    assert error.severity is ErrorSeverity.CRITICAL


@pytest.mark.parametrize("kind, code, severity", [
    (ErrorKind.NOT_FOUND, "NOT_FOUND", ErrorSeverity.WARNING),
    (ErrorKind.INVALID_STATE, "INVALID_STATE", ErrorSeverity.WARNING),
    (ErrorKind.FORBIDDEN, "FORBIDDEN", ErrorSeverity.WARNING),
    (ErrorKind.UNEXPECTED, "UNEXPECTED", ErrorSeverity.CRITICAL),
])
def test_error_code_and_severity(kind, code, severity):
    error = error_from_failure(Failure(kind, "boom"))
    assert error.code == code
    assert error.severity is severity
    assert error.field is None
