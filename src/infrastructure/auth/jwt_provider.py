"""JWT validation for Supabase access tokens.

Supabase signs access tokens with ES256 and publishes the public keys at
``/auth/v1/.well-known/jwks.json``. Tokens signed with the shared secret
(HS256) are accepted too; the tests mint those with ``create_token``.

Claims read from a token::

    sub                      -> ActorSession.user_id
    email                    -> ActorSession.email
    user_metadata.display_name (or name / full_name)
                             -> ActorSession.display_name
    app_metadata.role        -> "admin" grants the admin capability

Addresses listed in ``ADMIN_EMAILS`` are admins as well.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from uuid import UUID

import httpx
import structlog
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from domain.entities.session import ActorRole, ActorSession

logger = structlog.get_logger()

# kid -> JWK, shared by every provider in the process
_jwks_cache: dict[str, Any] | None = None

_DISPLAY_NAME_KEYS = ("display_name", "name", "full_name")


async def _get_jwks_keys(refresh: bool = False) -> dict[str, Any]:
    """Signing keys published by the project, keyed by ``kid``.

    Fetched on first use and then served from memory. An unreachable
    endpoint yields an empty mapping and is retried on the next call.
    """
    global _jwks_cache
    if _jwks_cache is not None and not refresh:
        return _jwks_cache

    url = settings.supabase_jwks_url
    if not url:
        return {}

    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.get(url)
            response.raise_for_status()
            published = response.json().get("keys", [])
    except httpx.HTTPError as e:
        logger.error("jwks_fetch_failed", url=url, error=str(e))
        return {}

    _jwks_cache = {key["kid"]: key for key in published if key.get("kid")}
    logger.info("jwks_fetched", url=url, key_count=len(_jwks_cache))
    return _jwks_cache


def _display_name(claims: dict[str, Any]) -> str | None:
    metadata = claims.get("user_metadata") or {}
    for key in _DISPLAY_NAME_KEYS:
        if metadata.get(key):
            return metadata[key]
    return claims.get("name")


class JWTAuthProvider:
    """Turns bearer tokens into ActorSessions."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
        admin_emails: list[str] | None = None,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes
        if admin_emails is None:
            admin_emails = settings.admin_emails_list
        self._admin_emails = {email.lower() for email in admin_emails}

    async def validate_token(self, token: str) -> Optional[ActorSession]:
        """
        Verify a token and build the actor session.

        Args:
            token: Encoded JWT from the Authorization header

        Returns:
            ActorSession if the token verifies, None otherwise
        """
        try:
            claims = await self._decode(token)
        except JWTError as e:
            logger.debug("token_rejected", reason=str(e))
            return None
        if claims is None:
            return None
        return self.session_from_claims(claims, access_token=token)

    def session_from_claims(
        self, claims: dict[str, Any], access_token: str | None = None
    ) -> Optional[ActorSession]:
        """Map verified claims, or a Supabase user object, to an ActorSession.

        User objects carry ``id`` where tokens carry ``sub``.
        """
        raw_id = claims.get("sub") or claims.get("id")
        email = claims.get("email")
        if not raw_id or not email:
            return None
        try:
            user_id = UUID(str(raw_id))
        except ValueError:
            return None

        return ActorSession(
            user_id=user_id,
            email=email,
            display_name=_display_name(claims),
            role=ActorRole.ADMIN if self._is_admin(claims, email) else ActorRole.USER,
            access_token=access_token,
        )

    def create_token(self, session: ActorSession) -> str:
        """Mint a token for ``session`` signed with the shared secret."""
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=self._expire_minutes)
        claims: dict[str, Any] = {
            "sub": str(session.user_id),
            "email": session.email,
            "aud": "authenticated",
            "role": "authenticated",
            "exp": expires_at,
            "app_metadata": {"role": session.role.value},
            "user_metadata": {"display_name": session.display_name},
        }
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    # --- Internal helpers ---

    def _is_admin(self, claims: dict[str, Any], email: str) -> bool:
        app_metadata = claims.get("app_metadata") or {}
        if app_metadata.get("role") == ActorRole.ADMIN.value:
            return True
        return email.lower() in self._admin_emails

    async def _decode(self, token: str) -> dict[str, Any] | None:
        header = jwt.get_unverified_header(token)
        if header.get("alg", self._algorithm) != "ES256":
            return jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_aud": False},
            )

        key = await self._signing_key(header.get("kid"))
        if key is None:
            return None
        return jwt.decode(
            token,
            ECKey(key, algorithm="ES256"),
            algorithms=["ES256"],
            options={"verify_aud": False},
        )

    async def _signing_key(self, kid: str | None) -> dict[str, Any] | None:
        if not kid:
            return None
        key = (await _get_jwks_keys()).get(kid)
        if key is None:
            # Keys may have rotated since the last fetch.
            key = (await _get_jwks_keys(refresh=True)).get(kid)
        if key is None:
            logger.warning("jwks_key_not_found", kid=kid)
        return key
