"""Profile service layer with business logic."""

import time
from collections.abc import Callable
from uuid import UUID

import structlog

from core.exceptions import (
    InvalidImageError,
    ProfileNotFoundError,
    ProfileValidationError,
    UpstreamUnavailableError,
)
from domain.entities.change_event import PROFILES_TABLE, ChangeEvent, ChangeType
from domain.entities.profile import AVAILABILITY_SLOTS, Profile, ProfileDraft
from domain.entities.session import ActorSession
from domain.repositories.change_feed import IChangeFeed
from domain.repositories.file_storage import IFileStorage
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

MAX_PICTURE_BYTES = 5 * 1024 * 1024
PICTURE_PREFIX = "profile-pictures"

_SLOT_LOOKUP = {slot.casefold(): slot for slot in AVAILABILITY_SLOTS}


def _clean_skills(skills: list[str], field: str) -> list[str]:
    cleaned = [s.strip() for s in skills]
    if any(not s for s in cleaned):
        raise ProfileValidationError("Skills cannot be blank", field=field)
    return cleaned


def _clean_availability(slots: list[str]) -> list[str]:
    result: list[str] = []
    for raw in slots:
        slot = _SLOT_LOOKUP.get(raw.strip().casefold())
        if slot is None:
            raise ProfileValidationError(f"Unknown availability slot: {raw}", field="availability")
        if slot not in result:
            result.append(slot)
    return result


def validate_draft(draft: ProfileDraft) -> ProfileDraft:
    """Normalize a draft, raising ProfileValidationError on bad input."""
    name = draft.name.strip()
    if not name:
        raise ProfileValidationError("Name is required", field="name")

    location = (draft.location or "").strip() or None
    picture = (draft.profile_picture or "").strip() or None

    return ProfileDraft(
        name=name,
        location=location,
        skills_offered=_clean_skills(draft.skills_offered, "skills_offered"),
        skills_wanted=_clean_skills(draft.skills_wanted, "skills_wanted"),
        availability=_clean_availability(draft.availability),
        is_public=draft.is_public,
        profile_picture=picture,
    )


class ProfileService:
    """Service layer for the actor's own profile."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        storage: IFileStorage | None = None,
        change_feed: IChangeFeed | None = None,
        max_picture_bytes: int = MAX_PICTURE_BYTES,
    ) -> None:
        self._uow_factory = uow_factory
        self._storage = storage
        self._change_feed = change_feed
        self._max_picture_bytes = max_picture_bytes

    async def get_my_profile(self, session: ActorSession) -> Profile | None:
        """Get the actor's profile, or None before the first save."""
        async with self._uow_factory() as uow:
            return await uow.profiles.get(session.user_id)

    async def get_profile(self, user_id: UUID, session: ActorSession) -> Profile:
        """Get a profile the actor may see: public, their own, or any for admins.

        Raises:
            ProfileNotFoundError: If missing or private to someone else.
        """
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user_id)

        if not profile:
            raise ProfileNotFoundError(str(user_id))
        if not profile.is_public and profile.user_id != session.user_id and not session.is_admin:
            raise ProfileNotFoundError(str(user_id))
        return profile

    async def save_profile(self, session: ActorSession, draft: ProfileDraft) -> Profile:
        """Create or update the actor's profile.

        A draft without a picture keeps the one already on the profile.

        Raises:
            ProfileValidationError: If the name is blank, a skill is blank,
                or an availability slot is unknown.
        """
        clean = validate_draft(draft)

        async with self._uow_factory() as uow:
            existing = await uow.profiles.get(session.user_id)
            profile = Profile(
                user_id=session.user_id,
                name=clean.name,
                email=session.email,
                location=clean.location,
                skills_offered=clean.skills_offered,
                skills_wanted=clean.skills_wanted,
                availability=clean.availability,
                is_public=clean.is_public,
                profile_picture=clean.profile_picture,
            )
            if existing:
                profile.created_at = existing.created_at
                if profile.profile_picture is None:
                    profile.profile_picture = existing.profile_picture
            saved = await uow.profiles.upsert(profile)
            await uow.commit()

        change = ChangeType.UPDATE if existing else ChangeType.INSERT
        logger.info("profile_saved", user_id=str(session.user_id), change=change.value)
        self._publish(change, session.user_id)
        return saved

    @property
    def max_picture_bytes(self) -> int:
        return self._max_picture_bytes

    def check_picture_size(self, size: int | None) -> None:
        """Reject an upload over the size limit. An unknown size passes."""
        if size is not None and size > self._max_picture_bytes:
            raise InvalidImageError(
                "Image must be 5MB or smaller",
                details={"size": size, "max_size": self._max_picture_bytes},
            )

    async def upload_profile_picture(
        self,
        session: ActorSession,
        filename: str,
        content_type: str | None,
        data: bytes,
    ) -> str:
        """Store a profile picture and return its public URI.

        If the actor already has a profile, the URI is recorded on it.

        Raises:
            InvalidImageError: If the upload is not an image or exceeds the size limit.
            UpstreamUnavailableError: If no file storage is configured.
        """
        if not content_type or not content_type.startswith("image/"):
            raise InvalidImageError(
                "Please select an image file", details={"content_type": content_type}
            )
        self.check_picture_size(len(data))
        if self._storage is None:
            raise UpstreamUnavailableError("storage", "File storage is not configured")

        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "png"
        path = f"{PICTURE_PREFIX}/{session.user_id}-{int(time.time() * 1000)}.{ext}"
        uri = await self._storage.upload(path, data, content_type)

        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(session.user_id)
            if profile:
                profile.profile_picture = uri
                await uow.profiles.upsert(profile)
                await uow.commit()

        logger.info("profile_picture_uploaded", user_id=str(session.user_id), path=path)
        if profile:
            self._publish(ChangeType.UPDATE, session.user_id)
        return uri

    def _publish(self, change: ChangeType, user_id: UUID) -> None:
        if self._change_feed:
            self._change_feed.publish(
                ChangeEvent(table=PROFILES_TABLE, change_type=change, record_id=user_id)
            )
