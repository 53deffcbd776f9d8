"""Pydantic schemas for Auth API."""

from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from domain.entities.session import ActorSession, AuthResult


def _normalize_email(v: str) -> str:
    v = v.strip().lower()
    if "@" not in v or "." not in v.split("@")[-1]:
        raise ValueError("Invalid email address")
    return v


class SignInRequest(BaseModel):
    """Schema for signing in with email and password."""

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Basic email validation."""
        return _normalize_email(v)


class SignUpRequest(SignInRequest):
    """Schema for registering a new account."""

    password: str = Field(..., min_length=6, max_length=128)
    display_name: str = Field(..., min_length=1, max_length=100)


class SessionResponse(BaseModel):
    """Schema describing the authenticated actor."""

    user_id: UUID
    email: str
    display_name: str | None = None
    role: str
    is_admin: bool

    @classmethod
    def from_session(cls, session: ActorSession) -> "SessionResponse":
        return cls(
            user_id=session.user_id,
            email=session.email,
            display_name=session.display_name,
            role=session.role.value,
            is_admin=session.is_admin,
        )


class AuthResponse(BaseModel):
    """Schema for sign-in and sign-up responses."""

    access_token: str | None = None
    refresh_token: str | None = None
    token_type: str = "bearer"
    user: SessionResponse | None = None
    confirmation_required: bool = False

    @classmethod
    def from_result(cls, result: AuthResult) -> "AuthResponse":
        return cls(
            access_token=result.access_token,
            refresh_token=result.refresh_token,
            user=SessionResponse.from_session(result.session) if result.session else None,
            confirmation_required=result.confirmation_required,
        )
