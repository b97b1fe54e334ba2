"""Profile Routes - view, follow and unfollow a user profile."""

from fastapi import APIRouter, Depends

from conduit.api.dependencies import (
    get_current_user_id, get_dispatcher, get_optional_user_id,
)
from conduit.core.commands import GetProfile, FollowUser, UnfollowUser
from conduit.core.domain_types import UserId
from conduit.core.errors import unwrap
from conduit.schemas.views import ProfileEnvelope
from conduit.services.dispatch import Dispatcher

router = APIRouter(prefix="/api/profiles", tags=["profiles"])


@router.get("/{username}", response_model=ProfileEnvelope)
async def get_profile(
    username: str,
    viewer_id: UserId | None = Depends(get_optional_user_id),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    result = await dispatcher.send(GetProfile(username=username, viewer_id=viewer_id))
    return ProfileEnvelope(profile=unwrap(result))


@router.post("/{username}/follow", response_model=ProfileEnvelope)
async def follow(
    username: str,
    viewer_id: UserId = Depends(get_current_user_id),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    result = await dispatcher.send(FollowUser(username=username, viewer_id=viewer_id))
    return ProfileEnvelope(profile=unwrap(result))


@router.delete("/{username}/follow", response_model=ProfileEnvelope)
async def unfollow(
    username: str,
    viewer_id: UserId = Depends(get_current_user_id),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    result = await dispatcher.send(UnfollowUser(username=username, viewer_id=viewer_id))
    return ProfileEnvelope(profile=unwrap(result))
