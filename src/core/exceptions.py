"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    NOT_AUTHORIZED = "NOT_AUTHORIZED"
    ADMIN_REQUIRED = "ADMIN_REQUIRED"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    SWAP_REQUEST_NOT_FOUND = "SWAP_REQUEST_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    SELF_REQUEST = "SELF_REQUEST"

    # Conflict errors (409)
    INVALID_TRANSITION = "INVALID_TRANSITION"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Upstream errors (503)
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class NotAuthorizedError(AppException):
    """The actor does not own the side of the request this operation needs."""

    def __init__(self, message: str = "You are not allowed to perform this action") -> None:
        super().__init__(
            error_code=ErrorCode.NOT_AUTHORIZED,
            message=message,
            status_code=403,
        )


class AdminRequiredError(AppException):
    """Operation needs the admin capability."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.ADMIN_REQUIRED,
            message="Admin privileges required",
            status_code=403,
        )


class ProfileNotFoundError(AppException):
    """Profile not found (or not visible to the actor)."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {user_id}",
            status_code=404,
            details={"user_id": user_id},
        )


class SwapRequestNotFoundError(AppException):
    """Swap request not found."""

    def __init__(self, request_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.SWAP_REQUEST_NOT_FOUND,
            message=f"Swap request not found: {request_id}",
            status_code=404,
            details={"request_id": request_id},
        )


class SelfRequestError(AppException):
    """A user tried to send a swap request to themselves."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.SELF_REQUEST,
            message="You cannot send a swap request to yourself",
            status_code=400,
        )


class InvalidTransitionError(AppException):
    """Swap request is not in a state that allows the operation."""

    def __init__(self, current_status: str, action: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_TRANSITION,
            message=f"Cannot {action} a request that is {current_status}",
            status_code=409,
            details={"status": current_status, "action": action},
        )


class ProfileValidationError(AppException):
    """Profile data failed validation."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details={"field": field} if field else None,
        )


class InvalidImageError(AppException):
    """Uploaded profile picture is not an image or is too large."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details=details,
        )


class UpstreamUnavailableError(AppException):
    """The hosted store, storage or identity service could not be reached."""

    def __init__(self, service: str, message: str = "Upstream service unavailable") -> None:
        super().__init__(
            error_code=ErrorCode.UPSTREAM_UNAVAILABLE,
            message=message,
            status_code=503,
            details={"service": service},
        )
