"""Error Handlers - global exception handlers for the Conduit API.

Invariants:
    - ConduitError -> its http_status with {"errors": {field|"body": [message]}}
    - RequestValidationError -> 422 with one key per offending field
    - Exception (catch-all) -> 500, never leaks internal details

Design Decisions:
    - Three-layer handler: domain (ConduitError), validation (Pydantic), catch-all (Exception)
    - Extracted from main.py to keep the entry point's import fan-out small
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from conduit.core.errors import ConduitError, ErrorSeverity

logger = logging.getLogger(__name__)

_LOCATION_PREFIXES = {"body", "query", "path", "header", "user", "article", "comment"}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_conduit_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_conduit_error_handler(app: FastAPI) -> None:
    """Register Conduit domain/infrastructure error handler."""

    @app.exception_handler(ConduitError)
    async def conduit_error_handler(request: Request, exc: ConduitError):
        log = logger.error if exc.severity is ErrorSeverity.CRITICAL else logger.info
        log(
            f"ConduitError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=422,
            content=build_validation_error_response(exc.errors()),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all - never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"errors": {"body": ["An unexpected error occurred"]}},
        )


def _field_name(loc: tuple) -> str:
    """Innermost named location: ("body", "user", "email") -> "email"."""
    names = [str(part) for part in loc if not isinstance(part, int)]
    for name in reversed(names):
        if name not in _LOCATION_PREFIXES:
            return name
    return names[-1] if names else "body"


def build_validation_error_response(errors) -> dict:
    """Build the RealWorld {"errors": {field: [messages]}} body."""
    grouped: dict[str, list[str]] = {}
    for e in errors:
        grouped.setdefault(_field_name(tuple(e["loc"])), []).append(e["msg"])
    return {"errors": grouped}
