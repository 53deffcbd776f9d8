"""Actor session entity."""

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID


class ActorRole(StrEnum):
    """Role flag supplied by the identity provider."""

    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True, slots=True)
class ActorSession:
    """The authenticated actor, passed explicitly into every domain operation."""

    user_id: UUID
    email: str
    display_name: str | None = None
    role: ActorRole = ActorRole.USER
    access_token: str | None = None

    @property
    def is_admin(self) -> bool:
        """Whether the actor holds the admin capability."""
        return self.role == ActorRole.ADMIN

    @property
    def label(self) -> str:
        """Human-readable name, falling back to the email."""
        return self.display_name or self.email


@dataclass(frozen=True, slots=True)
class AuthResult:
    """Outcome of a sign-in or sign-up against the identity provider."""

    session: ActorSession | None
    access_token: str | None = None
    refresh_token: str | None = None
    confirmation_required: bool = False
