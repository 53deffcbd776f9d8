"""Supabase Auth (GoTrue) identity provider."""

from typing import Any

import httpx
import structlog

from core.config import settings
from core.exceptions import AppException, ErrorCode, UpstreamUnavailableError
from domain.entities.session import ActorSession, AuthResult
from infrastructure.auth.provider import IAuthProvider

logger = structlog.get_logger()


class SupabaseIdentityProvider:
    """Talks to the Supabase Auth REST API; token validation is local."""

    def __init__(
        self,
        token_validator: IAuthProvider,
        base_url: str = settings.supabase_url,
        api_key: str = settings.supabase_anon_key,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._validator = token_validator
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._transport = transport
        self._timeout = timeout

    async def get_session(self, access_token: str) -> ActorSession | None:
        """Resolve a bearer token into a session, or None if invalid."""
        return await self._validator.validate_token(access_token)

    async def sign_in(self, email: str, password: str) -> AuthResult:
        """Password grant. Rejected credentials yield a result without session."""
        response = await self._post(
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if response.status_code in (400, 401, 422):
            logger.info("sign_in_rejected", status_code=response.status_code)
            return AuthResult(session=None)
        self._raise_for_upstream(response)
        return self._result_from(response.json())

    async def sign_up(self, email: str, password: str, display_name: str) -> AuthResult:
        """Register an account, storing the display name in user metadata."""
        response = await self._post(
            "/auth/v1/signup",
            json={
                "email": email,
                "password": password,
                "data": {"display_name": display_name},
            },
        )
        if response.status_code in (400, 422, 429):
            body = self._safe_json(response)
            message = body.get("msg") or body.get("error_description") or "Sign-up rejected"
            raise AppException(
                error_code=ErrorCode.VALIDATION_ERROR,
                message=str(message),
                status_code=400,
            )
        self._raise_for_upstream(response)
        return self._result_from(response.json())

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session. An already-invalid token is not an error."""
        response = await self._post(
            "/auth/v1/logout",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        if response.status_code in (401, 403, 404):
            return
        self._raise_for_upstream(response)

    # --- Internal helpers ---

    async def _post(self, path: str, **kwargs: Any) -> httpx.Response:
        headers = {"apikey": self._api_key, **kwargs.pop("headers", {})}
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                transport=self._transport,
                timeout=self._timeout,
            ) as client:
                return await client.post(path, headers=headers, **kwargs)
        except httpx.TransportError as e:
            logger.error("identity_provider_unreachable", path=path, error=str(e))
            raise UpstreamUnavailableError("identity") from e

    def _raise_for_upstream(self, response: httpx.Response) -> None:
        if response.status_code >= 500 or response.is_error:
            logger.error(
                "identity_provider_error",
                status_code=response.status_code,
                path=response.request.url.path,
            )
            raise UpstreamUnavailableError("identity")

    def _result_from(self, body: dict[str, Any]) -> AuthResult:
        # Confirmation-pending sign-ups return the bare user object.
        access_token = body.get("access_token")
        session = None
        if access_token:
            session = self._validator.session_from_claims(
                body.get("user") or {}, access_token=access_token
            )
        return AuthResult(
            session=session,
            access_token=access_token,
            refresh_token=body.get("refresh_token"),
            confirmation_required=access_token is None,
        )

    @staticmethod
    def _safe_json(response: httpx.Response) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}
