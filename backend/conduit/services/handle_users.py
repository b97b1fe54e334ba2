"""Identity Handlers - register, login, current user, update and invite (5 methods).

Invariants:
    - Email and username are unique; a clash fails on that field ("has already been taken")
    - Passwords are hashed before they reach an entity; plain text is never stored
    - Login failure never reveals which of email/password was wrong
    - Every user view carries a freshly issued access token
    - Invited users get their email as username and the default bio

Design Decisions:
    - Credentials (hashing, tokens) injected as a Protocol so service tests can
      run with cheap bcrypt rounds
"""

from conduit.core.commands import (
    RegisterUser, LoginUser, GetCurrentUser, UpdateUser, InviteUser,
)
from conduit.core.domain_types import ErrorKind, PASSWORD_MIN_LENGTH
from conduit.core.entities import User, EntityInvariantError
from conduit.core.repository_protocols import Credentials, Store
from conduit.core.result import Result, not_found, missing_entity, invalid
from conduit.core.view_assembly import map_user
from conduit.schemas.views import UserView

_TAKEN = "has already been taken"


def _check_password(password: str) -> Result | None:
    if not password or len(password) < PASSWORD_MIN_LENGTH:
        return invalid(
            "password", f"must be at least {PASSWORD_MIN_LENGTH} characters",
        )
    return None


class UserHandlers:
    """Identity flows over the user repository."""

    def __init__(self, store: Store, credentials: Credentials):
        self.store = store
        self.credentials = credentials

    async def register_user(self, command: RegisterUser) -> Result[UserView]:
        error = _check_password(command.password)
        if error:
            return error
        if await self.store.users.get_by_email(command.email):
            return invalid("email", _TAKEN)
        if await self.store.users.get_by_username(command.username):
            return invalid("username", _TAKEN)
        try:
            user = User(
                username=command.username,
                email=command.email,
                password_hash=self.credentials.hash_password(command.password),
            )
        except EntityInvariantError as e:
            return invalid(e.field, e.message)

        await self.store.users.add(user)
        return Result.ok(self._view(user))

    async def login_user(self, query: LoginUser) -> Result[UserView]:
        user = await self.store.users.get_by_email(query.email)
        if user is None or not self.credentials.verify_password(
            query.password, user.password_hash,
        ):
            return Result.fail(ErrorKind.UNAUTHORIZED, "email or password is invalid")
        return Result.ok(self._view(user))

    async def get_current_user(self, query: GetCurrentUser) -> Result[UserView]:
        user = await self.store.users.get(query.user_id)
        if user is None:
            return not_found("Current user not found")
        return Result.ok(self._view(user))

    async def update_user(self, command: UpdateUser) -> Result[UserView]:
        user = await self.store.users.get(command.user_id)
        if user is None:
            return not_found("Current user not found")

        if command.email is not None and command.email != user.email:
            if await self.store.users.get_by_email(command.email):
                return invalid("email", _TAKEN)
        if command.username is not None and command.username != user.username:
            if await self.store.users.get_by_username(command.username):
                return invalid("username", _TAKEN)
        password_hash = None
        if command.password is not None:
            error = _check_password(command.password)
            if error:
                return error
            password_hash = self.credentials.hash_password(command.password)

        try:
            user.update(
                email=command.email,
                username=command.username,
                password_hash=password_hash,
                bio=command.bio,
                image=command.image,
            )
        except EntityInvariantError as e:
            return invalid(e.field, e.message)

        await self.store.users.update(user)
        return Result.ok(self._view(user))

    async def invite_user(self, command: InviteUser) -> Result[None]:
        inviter = await self.store.users.get(command.inviter_id)
        if inviter is None:
            return missing_entity("User", command.inviter_id)
        error = _check_password(command.password)
        if error:
            return error
        if await self.store.users.get_by_email(command.email):
            return invalid(
                "email", "A user has already been registered with that email",
            )
        if await self.store.users.get_by_username(command.email):
            return invalid("username", _TAKEN)
        try:
            user = User(
                username=command.email,
                email=command.email,
                password_hash=self.credentials.hash_password(command.password),
            )
        except EntityInvariantError as e:
            return invalid(e.field, e.message)

        await self.store.users.add(user)
        return Result.ok()

    def _view(self, user: User) -> UserView:
        return map_user(user, self.credentials.create_access_token(user.id, user.username))
