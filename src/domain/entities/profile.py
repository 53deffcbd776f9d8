"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

# Predefined availability slots offered by the profile editor.
AVAILABILITY_SLOTS: tuple[str, ...] = (
    "Weekday Mornings",
    "Weekday Afternoons",
    "Weekday Evenings",
    "Weekend Mornings",
    "Weekend Afternoons",
    "Weekend Evenings",
)


@dataclass
class Profile:
    """Domain entity for a user's skill-exchange listing.

    Keyed by the identity account's user id; there is exactly one per user.
    Skill lists keep insertion order (it is the display order) and may
    contain duplicates. ``availability`` behaves as a set of slot labels.
    """

    user_id: UUID
    name: str
    email: str | None = None
    location: str | None = None
    skills_offered: list[str] = field(default_factory=list)
    skills_wanted: list[str] = field(default_factory=list)
    availability: list[str] = field(default_factory=list)
    is_public: bool = True
    profile_picture: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    def is_visible_to(self, actor_id: UUID) -> bool:
        """A profile is browsable by anyone but its owner while public."""
        return self.is_public and self.user_id != actor_id

    def searchable_text(self) -> list[str]:
        """Fields matched by directory search."""
        return [self.name, self.location or "", *self.skills_offered, *self.skills_wanted]


@dataclass
class ProfileDraft:
    """Owner-supplied profile fields, before validation and upsert."""

    name: str
    location: str | None = None
    skills_offered: list[str] = field(default_factory=list)
    skills_wanted: list[str] = field(default_factory=list)
    availability: list[str] = field(default_factory=list)
    is_public: bool = True
    profile_picture: str | None = None
