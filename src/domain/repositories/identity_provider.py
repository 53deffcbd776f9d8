"""Identity provider protocol."""

from typing import Protocol

from domain.entities.session import ActorSession, AuthResult


class IIdentityProvider(Protocol):
    """Hosted authentication service."""

    async def get_session(self, access_token: str) -> ActorSession | None:
        """Resolve a bearer token into a session, or None if invalid."""
        ...

    async def sign_in(self, email: str, password: str) -> AuthResult:
        """Authenticate with email and password."""
        ...

    async def sign_up(self, email: str, password: str, display_name: str) -> AuthResult:
        """Register a new account."""
        ...

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session behind the token."""
        ...
