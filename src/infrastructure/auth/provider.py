"""Token validator protocol."""

from typing import Any, Optional, Protocol

from domain.entities.session import ActorSession


class IAuthProvider(Protocol):
    """Turns bearer tokens, or verified identity claims, into sessions."""

    async def validate_token(self, token: str) -> Optional[ActorSession]:
        """
        Validate a bearer token.

        Args:
            token: Encoded token from the Authorization header

        Returns:
            ActorSession if valid, None if invalid or expired
        """
        ...

    def session_from_claims(
        self, claims: dict[str, Any], access_token: str | None = None
    ) -> Optional[ActorSession]:
        """Map claims already verified upstream to a session, or None if incomplete."""
        ...
