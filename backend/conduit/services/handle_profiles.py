"""Profile Handlers - get, follow and unfollow user profiles (3 methods).

Invariants:
    - Target is resolved by username before the viewer; either missing is NOT_FOUND
    - Following an already-followed user succeeds without a second edge
    - The returned profile reflects the edge state after the mutation
"""

from conduit.core.commands import GetProfile, FollowUser, UnfollowUser
from conduit.core.repository_protocols import Store
from conduit.core.result import Result, not_found
from conduit.core.view_assembly import map_profile
from conduit.schemas.views import ProfileView
from conduit.services.relationship_registry import RelationshipRegistry


class ProfileHandlers:
    """Profiles: read and follow-graph mutations."""

    def __init__(self, store: Store, registry: RelationshipRegistry):
        self.store = store
        self.registry = registry

    async def get_profile(self, query: GetProfile) -> Result[ProfileView]:
        user = await self.store.users.get_by_username(query.username)
        if user is None:
            return not_found(f"Profile '{query.username}' not found")
        ctx = await self.registry.view_context(query.viewer_id, [user.id])
        return Result.ok(map_profile(user, ctx))

    async def follow_user(self, command: FollowUser) -> Result[ProfileView]:
        target = await self.store.users.get_by_username(command.username)
        if target is None:
            return not_found(f"Profile '{command.username}' not found")
        viewer = await self.store.users.get(command.viewer_id)
        if viewer is None:
            return not_found("Current user not found")

        outcome = await self.registry.follow(viewer.id, target.id)
        if not outcome.is_ok:
            return Result.from_failure(outcome.error)

        ctx = await self.registry.view_context(viewer.id, [target.id])
        return Result.ok(map_profile(target, ctx))

    async def unfollow_user(self, command: UnfollowUser) -> Result[ProfileView]:
        target = await self.store.users.get_by_username(command.username)
        if target is None:
            return not_found(f"Profile '{command.username}' not found")
        viewer = await self.store.users.get(command.viewer_id)
        if viewer is None:
            return not_found("Current user not found")

        outcome = await self.registry.unfollow(viewer.id, target.id)
        if not outcome.is_ok:
            return Result.from_failure(outcome.error)

        ctx = await self.registry.view_context(viewer.id, [target.id])
        return Result.ok(map_profile(target, ctx))
