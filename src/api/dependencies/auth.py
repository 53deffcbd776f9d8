"""Authentication dependencies for FastAPI."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.exceptions import AdminRequiredError, AuthenticationError, ErrorCode
from domain.entities.session import ActorSession
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import IAuthProvider

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)

# Singleton auth provider
_auth_provider: IAuthProvider | None = None


def get_auth_provider() -> IAuthProvider:
    """Get or create the auth provider singleton."""
    global _auth_provider
    if _auth_provider is None:
        _auth_provider = JWTAuthProvider()
    return _auth_provider


async def get_current_session(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    auth_provider: IAuthProvider = Depends(get_auth_provider),
) -> ActorSession:
    """
    Dependency to get the session of the authenticated actor.

    Raises:
        AuthenticationError: If no token provided or token is invalid
    """
    if not credentials:
        raise AuthenticationError(
            message="Authorization header required",
            error_code=ErrorCode.UNAUTHORIZED,
        )

    session = await auth_provider.validate_token(credentials.credentials)

    if not session:
        raise AuthenticationError(
            message="Invalid or expired token",
            error_code=ErrorCode.INVALID_TOKEN,
        )

    return session


async def require_admin(
    session: Annotated[ActorSession, Depends(get_current_session)],
) -> ActorSession:
    """Dependency that only lets admin-capability actors through."""
    if not session.is_admin:
        raise AdminRequiredError()
    return session


# Type aliases for convenience in route handlers
CurrentSession = Annotated[ActorSession, Depends(get_current_session)]
AdminSession = Annotated[ActorSession, Depends(require_admin)]
