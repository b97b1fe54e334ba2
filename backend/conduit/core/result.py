"""Result - explicit success/failure values returned at every handler boundary.

Invariants:
    - A Result is either ok (value set, error None) or failed (error set)
    - Failures carry an ErrorKind, a message and an optional field name
    - Handlers return Results for anticipated outcomes; they never raise for them

Design Decisions:
    - Frozen dataclasses: results are passed through the dispatcher unchanged
    - field is kept separate from message so transport can build
      {"errors": {field: [message]}} without parsing strings
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from conduit.core.domain_types import ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class Failure:
    """Why a command or query did not succeed."""
    kind: ErrorKind
    message: str
    field: str | None = None


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a handler: a value or a Failure."""
    value: T | None = None
    error: Failure | None = None

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @classmethod
    def ok(cls, value: T | None = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def fail(
        cls, kind: ErrorKind, message: str, field: str | None = None,
    ) -> "Result[T]":
        return cls(error=Failure(kind=kind, message=message, field=field))

    @classmethod
    def from_failure(cls, failure: Failure) -> "Result[T]":
        return cls(error=failure)


# ─── Shorthands ──────────────────────────────────────────────────

def not_found(message: str) -> Result:
    return Result.fail(ErrorKind.NOT_FOUND, message)


def missing_entity(entity: str, key: object) -> Result:
    return Result.fail(
        ErrorKind.MISSING_ENTITY, f"{entity} '{key}' does not exist",
    )


def forbidden(message: str) -> Result:
    return Result.fail(ErrorKind.FORBIDDEN, message)


def invalid(field: str, message: str) -> Result:
    return Result.fail(ErrorKind.VALIDATION, message, field=field)
