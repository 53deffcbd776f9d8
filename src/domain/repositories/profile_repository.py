"""Profile repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile entities."""

    async def get(self, user_id: UUID) -> Profile | None:
        """Get a profile by its owner's user id."""
        ...

    async def list_profiles(
        self,
        is_public: bool | None = None,
        exclude_user_id: UUID | None = None,
    ) -> list[Profile]:
        """Read profiles, optionally filtered by visibility and excluding one user."""
        ...

    async def upsert(self, profile: Profile) -> Profile:
        """Insert the profile, or update it if one exists for the user."""
        ...

    async def delete(self, user_id: UUID) -> bool:
        """Delete a profile. Returns False when none existed."""
        ...

    async def count(self, is_public: bool | None = None) -> int:
        """Count profiles, optionally only public ones."""
        ...
