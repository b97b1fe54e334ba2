"""Security - password hashing (passlib bcrypt) and JWT access tokens (python-jose).

Invariants:
    - Plain passwords never leave this module; only bcrypt hashes are persisted
    - Tokens carry the user id as "sub" and expire after access_token_expire_minutes
    - decode_access_token never raises: an invalid, expired or malformed token is None

Design Decisions:
    - One SecurityService instance per process built from Settings; tests build
      their own with low bcrypt rounds
"""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext

from conduit.config import Settings
from conduit.core.domain_types import UserId

logger = logging.getLogger(__name__)


class SecurityService:
    """Hashes passwords and issues/validates access tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60 * 24 * 7,
        bcrypt_rounds: int = 12,
    ):
        self._secret = secret
        self._algorithm = algorithm
        self._expire = timedelta(minutes=expire_minutes)
        self._pwd_context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=bcrypt_rounds,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "SecurityService":
        return cls(
            settings.jwt_secret,
            settings.jwt_algorithm,
            settings.access_token_expire_minutes,
        )

    def hash_password(self, password: str) -> str:
        return self._pwd_context.hash(password)

    def verify_password(self, password: str, password_hash: str) -> bool:
        try:
            return self._pwd_context.verify(password, password_hash)
        except ValueError:
            # Malformed stored hash
            return False

    def create_access_token(self, user_id: UserId, username: str) -> str:
        expire = datetime.now(timezone.utc) + self._expire
        claims = {"sub": str(user_id), "username": username, "exp": expire}
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def decode_access_token(self, token: str) -> UserId | None:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as e:
            logger.info(f"Rejected access token: {e}")
            return None
        sub = payload.get("sub")
        if not sub:
            return None
        try:
            return UserId(UUID(sub))
        except ValueError:
            return None
