"""API Dependencies - store, dispatcher and token authentication for routes.

Invariants:
    - One SqlStore (one AsyncSession) and one Dispatcher per request
    - Authorization accepts "Token <jwt>" (RealWorld) and "Bearer <jwt>"
    - A present but malformed, expired or forged token is always 401, even on
      endpoints where authentication is optional
"""

from functools import lru_cache

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.config import get_settings
from conduit.core.domain_types import UserId
from conduit.core.errors import UnauthorizedError
from conduit.infrastructure.database import get_db
from conduit.infrastructure.security import SecurityService
from conduit.infrastructure.sql_store import SqlStore
from conduit.services.dispatch import Dispatcher

_SCHEMES = ("token", "bearer")


@lru_cache
def get_security() -> SecurityService:
    return SecurityService.from_settings(get_settings())


async def get_store(db: AsyncSession = Depends(get_db)) -> SqlStore:
    return SqlStore(db)


async def get_dispatcher(
    store: SqlStore = Depends(get_store),
    security: SecurityService = Depends(get_security),
) -> Dispatcher:
    settings = get_settings()
    return Dispatcher(
        store, security, settings.default_page_size, settings.max_page_size,
    )


def _parse_authorization(header: str) -> str | None:
    scheme, _, token = header.strip().partition(" ")
    token = token.strip()
    if scheme.lower() not in _SCHEMES or not token:
        return None
    return token


async def get_optional_user_id(
    authorization: str | None = Header(default=None),
    security: SecurityService = Depends(get_security),
) -> UserId | None:
    """Viewer id when a token is sent, None for anonymous requests."""
    if authorization is None:
        return None
    token = _parse_authorization(authorization)
    user_id = security.decode_access_token(token) if token else None
    if user_id is None:
        raise UnauthorizedError("Invalid or expired token")
    return user_id


async def get_current_user_id(
    user_id: UserId | None = Depends(get_optional_user_id),
) -> UserId:
    if user_id is None:
        raise UnauthorizedError("Missing authorization token")
    return user_id
