"""Auth API routes."""

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentSession
from api.v1.dependencies import get_auth_service
from api.v1.schemas.auth import AuthResponse, SessionResponse, SignInRequest, SignUpRequest
from api.v1.schemas.common import ERROR_RESPONSES
from core.rate_limit import AUTH_LIMIT, READ_LIMIT, limiter
from domain.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"], responses=ERROR_RESPONSES)


@router.post(
    "/sign-up",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register an account",
    responses={
        201: {"description": "Account created (session is null until email is confirmed)"},
        400: {"description": "Sign-up rejected by the identity provider"},
        503: {"description": "Identity provider unavailable"},
    },
)
@limiter.limit(AUTH_LIMIT)  # type: ignore[untyped-decorator]
async def sign_up(
    request: Request,
    body: SignUpRequest,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Create an account with email, password and display name."""
    result = await service.sign_up(body.email, body.password, body.display_name)
    return AuthResponse.from_result(result)


@router.post(
    "/sign-in",
    response_model=AuthResponse,
    summary="Sign in with email and password",
    responses={
        200: {"description": "Signed in"},
        401: {"description": "Invalid credentials"},
        503: {"description": "Identity provider unavailable"},
    },
)
@limiter.limit(AUTH_LIMIT)  # type: ignore[untyped-decorator]
async def sign_in(
    request: Request,
    body: SignInRequest,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Exchange credentials for an access token."""
    result = await service.sign_in(body.email, body.password)
    return AuthResponse.from_result(result)


@router.post(
    "/sign-out",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Sign out",
    responses={
        204: {"description": "Session revoked"},
        401: {"description": "Missing or invalid token"},
    },
)
@limiter.limit(AUTH_LIMIT)  # type: ignore[untyped-decorator]
async def sign_out(
    request: Request,
    session: CurrentSession,
    service: AuthService = Depends(get_auth_service),
) -> None:
    """Revoke the caller's session."""
    await service.sign_out(session)


@router.get(
    "/me",
    response_model=SessionResponse,
    summary="Current session",
    responses={
        200: {"description": "The authenticated actor"},
        401: {"description": "Missing or invalid token"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_me(request: Request, session: CurrentSession) -> SessionResponse:
    """Describe the authenticated actor, including admin capability."""
    return SessionResponse.from_session(session)
