"""Admin service: platform-wide operations that bypass ownership rules."""

from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID

import structlog

from core.exceptions import AdminRequiredError, ProfileNotFoundError, SwapRequestNotFoundError
from domain.entities.change_event import PROFILES_TABLE, ChangeEvent, ChangeType
from domain.entities.profile import Profile
from domain.entities.session import ActorSession
from domain.entities.swap_request import SwapRequest
from domain.repositories.change_feed import IChangeFeed
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.directory_service import sort_profiles

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class PlatformStats:
    """Headline counts for the admin dashboard."""

    total_users: int
    total_requests: int
    public_profiles: int


class AdminService:
    """Service layer for admin-capability actors.

    Every method checks the session's admin capability first.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        change_feed: IChangeFeed | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._change_feed = change_feed

    async def list_profiles(self, session: ActorSession) -> list[Profile]:
        """Every profile, public or not."""
        self._require_admin(session)
        async with self._uow_factory() as uow:
            return sort_profiles(await uow.profiles.list_profiles())

    async def list_requests(self, session: ActorSession) -> list[SwapRequest]:
        """Every swap request, newest first."""
        self._require_admin(session)
        async with self._uow_factory() as uow:
            requests = await uow.swap_requests.list_all()
        return sorted(requests, key=lambda r: r.created_at, reverse=True)

    async def get_stats(self, session: ActorSession) -> PlatformStats:
        """Count users, requests and public profiles."""
        self._require_admin(session)
        async with self._uow_factory() as uow:
            return PlatformStats(
                total_users=await uow.profiles.count(),
                total_requests=await uow.swap_requests.count(),
                public_profiles=await uow.profiles.count(is_public=True),
            )

    async def delete_request(self, session: ActorSession, request_id: UUID) -> None:
        """Delete any swap request regardless of status or ownership."""
        self._require_admin(session)
        async with self._uow_factory() as uow:
            if not await uow.swap_requests.delete(request_id):
                raise SwapRequestNotFoundError(str(request_id))
            await uow.commit()

        logger.info(
            "admin_swap_request_deleted",
            request_id=str(request_id),
            admin_id=str(session.user_id),
        )

    async def delete_profile(self, session: ActorSession, user_id: UUID) -> int:
        """Remove a user's profile and every swap request they take part in.

        Returns:
            Number of swap requests removed alongside the profile.
        """
        self._require_admin(session)
        async with self._uow_factory() as uow:
            if not await uow.profiles.get(user_id):
                raise ProfileNotFoundError(str(user_id))
            removed = await uow.swap_requests.delete_for_user(user_id)
            await uow.profiles.delete(user_id)
            await uow.commit()

        logger.info(
            "admin_profile_deleted",
            user_id=str(user_id),
            admin_id=str(session.user_id),
            requests_removed=removed,
        )
        if self._change_feed:
            self._change_feed.publish(
                ChangeEvent(table=PROFILES_TABLE, change_type=ChangeType.DELETE, record_id=user_id)
            )
        return removed

    @staticmethod
    def _require_admin(session: ActorSession) -> None:
        if not session.is_admin:
            raise AdminRequiredError()
