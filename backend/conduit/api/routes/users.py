"""Identity Routes - registration, login, current user and invitations.

Invariants:
    - Registration returns 201; invitation returns 204 with no body
    - A valid token whose user no longer exists is 401 on /api/user
"""

from fastapi import APIRouter, Depends, Response, status

from conduit.api.dependencies import get_current_user_id, get_dispatcher
from conduit.core.commands import (
    RegisterUser, LoginUser, GetCurrentUser, UpdateUser, InviteUser,
)
from conduit.core.domain_types import ErrorKind, UserId
from conduit.core.errors import UnauthorizedError, unwrap
from conduit.schemas.requests import (
    RegisterUserRequest, LoginUserRequest, UpdateUserRequest, InviteUserRequest,
)
from conduit.schemas.views import UserEnvelope
from conduit.services.dispatch import Dispatcher

router = APIRouter(prefix="/api", tags=["users"])


@router.post(
    "/users", status_code=status.HTTP_201_CREATED, response_model=UserEnvelope,
)
async def register(
    body: RegisterUserRequest,
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    data = body.user
    result = await dispatcher.send(RegisterUser(
        email=data.email, username=data.username, password=data.password,
    ))
    return UserEnvelope(user=unwrap(result))


@router.post("/users/login", response_model=UserEnvelope)
async def login(
    body: LoginUserRequest,
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    result = await dispatcher.send(
        LoginUser(email=body.user.email, password=body.user.password),
    )
    return UserEnvelope(user=unwrap(result))


@router.get("/user", response_model=UserEnvelope)
async def current_user(
    user_id: UserId = Depends(get_current_user_id),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    result = await dispatcher.send(GetCurrentUser(user_id=user_id))
    if result.error is not None and result.error.kind is ErrorKind.NOT_FOUND:
        raise UnauthorizedError("User no longer exists")
    return UserEnvelope(user=unwrap(result))


@router.put("/user", response_model=UserEnvelope)
async def update_user(
    body: UpdateUserRequest,
    user_id: UserId = Depends(get_current_user_id),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    data = body.user
    result = await dispatcher.send(UpdateUser(
        user_id=user_id,
        email=data.email,
        username=data.username,
        password=data.password,
        bio=data.bio,
        image=data.image,
    ))
    if result.error is not None and result.error.kind is ErrorKind.NOT_FOUND:
        raise UnauthorizedError("User no longer exists")
    return UserEnvelope(user=unwrap(result))


@router.post(
    "/identity/invite",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def invite(
    body: InviteUserRequest,
    user_id: UserId = Depends(get_current_user_id),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    unwrap(await dispatcher.send(InviteUser(
        email=body.email, password=body.password, inviter_id=user_id,
    )))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
