"""SQLAlchemy implementation of Profile repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import Profile
from infrastructure.database.models import ProfileModel


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: UUID) -> Profile | None:
        """Get a profile by its owner's user id."""
        model = await self._session.get(ProfileModel, user_id)
        return self._to_entity(model) if model else None

    async def list_profiles(
        self,
        is_public: bool | None = None,
        exclude_user_id: UUID | None = None,
    ) -> list[Profile]:
        """Read profiles, optionally filtered by visibility and excluding one user."""
        stmt = select(ProfileModel)
        if is_public is not None:
            stmt = stmt.where(ProfileModel.is_public == is_public)
        if exclude_user_id is not None:
            stmt = stmt.where(ProfileModel.user_id != exclude_user_id)
        stmt = stmt.order_by(ProfileModel.name, ProfileModel.user_id)

        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def upsert(self, profile: Profile) -> Profile:
        """Insert the profile, or update it if one exists for the user."""
        model = await self._session.get(ProfileModel, profile.user_id)
        if model is None:
            model = self._to_model(profile)
            self._session.add(model)
        else:
            model.name = profile.name
            model.email = profile.email
            model.location = profile.location
            model.skills_offered = list(profile.skills_offered)
            model.skills_wanted = list(profile.skills_wanted)
            model.availability = list(profile.availability)
            model.is_public = profile.is_public
            model.profile_picture = profile.profile_picture
            model.updated_at = datetime.utcnow()

        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def delete(self, user_id: UUID) -> bool:
        """Delete a profile. Returns False when none existed."""
        model = await self._session.get(ProfileModel, user_id)
        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def count(self, is_public: bool | None = None) -> int:
        """Count profiles, optionally only public ones."""
        stmt = select(func.count()).select_from(ProfileModel)
        if is_public is not None:
            stmt = stmt.where(ProfileModel.is_public == is_public)
        result = await self._session.execute(stmt)
        return int(result.scalar_one())

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            user_id=model.user_id,
            name=model.name,
            email=model.email,
            location=model.location,
            skills_offered=[str(s) for s in model.skills_offered or []],
            skills_wanted=[str(s) for s in model.skills_wanted or []],
            availability=[str(a) for a in model.availability or []],
            is_public=bool(model.is_public),
            profile_picture=model.profile_picture,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Profile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            user_id=entity.user_id,
            name=entity.name,
            email=entity.email,
            location=entity.location,
            skills_offered=list(entity.skills_offered),
            skills_wanted=list(entity.skills_wanted),
            availability=list(entity.availability),
            is_public=entity.is_public,
            profile_picture=entity.profile_picture,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
