"""Auth service: explicit session lifecycle over the identity provider."""

from collections.abc import Callable
from typing import Literal

import structlog

from core.exceptions import AuthenticationError, ErrorCode
from domain.entities.session import ActorSession, AuthResult
from domain.repositories.identity_provider import IIdentityProvider

logger = structlog.get_logger()

SessionEvent = Literal["signed_in", "signed_out"]
SessionListener = Callable[[SessionEvent, ActorSession], None]


class AuthService:
    """Signs actors in and out and tells listeners about it.

    No session is held here; callers keep the returned ``ActorSession`` and
    pass it to every domain operation.
    """

    def __init__(self, identity_provider: IIdentityProvider) -> None:
        self._identity = identity_provider
        self._listeners: list[SessionListener] = []

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        """Register a listener. Returns a function that removes it."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    async def current_session(self, access_token: str) -> ActorSession | None:
        """Resolve a bearer token into a session."""
        return await self._identity.get_session(access_token)

    async def sign_in(self, email: str, password: str) -> AuthResult:
        """Authenticate with email and password.

        Raises:
            AuthenticationError: If the credentials are rejected.
        """
        result = await self._identity.sign_in(email.strip().lower(), password)
        if result.session is None:
            raise AuthenticationError(
                message="Invalid email or password",
                error_code=ErrorCode.INVALID_CREDENTIALS,
            )
        self._emit("signed_in", result.session)
        return result

    async def sign_up(self, email: str, password: str, display_name: str) -> AuthResult:
        """Register a new account.

        When the provider requires email confirmation no session is returned
        and no listener fires.
        """
        result = await self._identity.sign_up(email.strip().lower(), password, display_name.strip())
        if result.session is not None:
            self._emit("signed_in", result.session)
        return result

    async def sign_out(self, session: ActorSession) -> None:
        """Revoke the session at the provider and notify listeners."""
        if session.access_token:
            await self._identity.sign_out(session.access_token)
        self._emit("signed_out", session)

    def _emit(self, event: SessionEvent, session: ActorSession) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, session)
            except Exception:
                logger.exception("session_listener_failed", session_event=event)
