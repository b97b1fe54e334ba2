"""Identity Handlers - register, login, current user, update and invite.

Tests cover:
    - registration hashes the password and returns a decodable token
    - duplicate email/username fail on that field
    - login failure is UNAUTHORIZED with a single generic message
    - update checks uniqueness and re-hashes passwords
    - invite requires an existing inviter and an unused email
"""

from uuid import uuid4

from conduit.core.commands import (
    RegisterUser, LoginUser, GetCurrentUser, UpdateUser, InviteUser,
)
from conduit.core.domain_types import ErrorKind, UserId, DEFAULT_BIO


async def _register(dispatcher, username="jake", email="jake@jake.jake", password="jakejake"):
    return await dispatcher.send(
        RegisterUser(email=email, username=username, password=password),
    )


async def test_register_returns_user_with_token(dispatcher, store, security):
    result = await _register(dispatcher)

    assert result.is_ok
    view = result.value
    assert view.username == "jake"
    assert view.bio == DEFAULT_BIO
    user_id = security.decode_access_token(view.token)
    stored = store.tables.users[user_id]
    assert stored.password_hash != "jakejake"
    assert security.verify_password("jakejake", stored.password_hash)


async def test_register_duplicate_email(dispatcher):
    await _register(dispatcher)
    result = await _register(dispatcher, username="other")
    assert result.error.kind is ErrorKind.VALIDATION
    assert result.error.field == "email"
    assert result.error.message == "has already been taken"


async def test_register_duplicate_username(dispatcher):
    await _register(dispatcher)
    result = await _register(dispatcher, email="other@example.com")
    assert result.error.field == "username"


async def test_register_short_password(dispatcher):
    result = await _register(dispatcher, password="abc")
    assert result.error.field == "password"


async def test_login(dispatcher):
    await _register(dispatcher)
    ok = await dispatcher.send(LoginUser(email="jake@jake.jake", password="jakejake"))
    assert ok.value.email == "jake@jake.jake"

    wrong = await dispatcher.send(LoginUser(email="jake@jake.jake", password="nope"))
    unknown = await dispatcher.send(LoginUser(email="nobody@example.com", password="jakejake"))
    for result in (wrong, unknown):
        assert result.error.kind is ErrorKind.UNAUTHORIZED
        assert result.error.message == "email or password is invalid"


async def test_get_current_user(dispatcher, make_user):
    jake = await make_user("jake")
    found = await dispatcher.send(GetCurrentUser(user_id=jake.id))
    assert found.value.username == "jake"
    missing = await dispatcher.send(GetCurrentUser(user_id=UserId(uuid4())))
    assert missing.error.kind is ErrorKind.NOT_FOUND


async def test_update_user_fields_and_password(dispatcher, store, security, make_user):
    jake = await make_user("jake")
    result = await dispatcher.send(UpdateUser(
        user_id=jake.id, bio="I like to skateboard", password="newpassword",
    ))
    assert result.value.bio == "I like to skateboard"
    assert security.verify_password("newpassword", store.tables.users[jake.id].password_hash)


async def test_update_user_rejects_taken_username(dispatcher, make_user):
    jake = await make_user("jake")
    await make_user("alice")
    result = await dispatcher.send(UpdateUser(user_id=jake.id, username="alice"))
    assert result.error.field == "username"


async def test_update_user_keeping_own_email_is_allowed(dispatcher, make_user):
    jake = await make_user("jake")
    result = await dispatcher.send(UpdateUser(user_id=jake.id, email=jake.email))
    assert result.is_ok


async def test_invite_creates_user_named_after_email(dispatcher, store, make_user):
    admin = await make_user("admin")
    result = await dispatcher.send(InviteUser(
        email="new@example.com", password="welcome1", inviter_id=admin.id,
    ))
    assert result.is_ok
    invited = [u for u in store.tables.users.values() if u.email == "new@example.com"]
    assert len(invited) == 1
    assert invited[0].username == "new@example.com"


async def test_invite_duplicate_email(dispatcher, make_user):
    admin = await make_user("admin")
    result = await dispatcher.send(InviteUser(
        email=admin.email, password="welcome1", inviter_id=admin.id,
    ))
    assert result.error.field == "email"
    assert result.error.message == "A user has already been registered with that email"


async def test_invite_requires_existing_inviter(dispatcher):
    result = await dispatcher.send(InviteUser(
        email="new@example.com", password="welcome1", inviter_id=UserId(uuid4()),
    ))
    assert result.error.kind is ErrorKind.MISSING_ENTITY
