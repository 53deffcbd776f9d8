"""Notification domain entities and event constants."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID

from domain.entities.swap_request import SwapRequest


class NotificationEvent(StrEnum):
    """Swap request lifecycle events that trigger a notification."""

    REQUEST_SENT = "request_sent"
    REQUEST_ACCEPTED = "request_accepted"
    REQUEST_REJECTED = "request_rejected"


class DispatchStatus(StrEnum):
    """Result of a single dispatch attempt."""

    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class RequestSnapshot:
    """Read-only copy of the request fields a notification needs."""

    request_id: UUID
    from_user_name: str
    to_user_name: str
    message: str
    status: str

    @classmethod
    def of(cls, request: SwapRequest) -> "RequestSnapshot":
        return cls(
            request_id=request.id,
            from_user_name=request.from_user_name,
            to_user_name=request.to_user_name,
            message=request.message,
            status=request.status.value,
        )

    def as_payload(self) -> dict[str, Any]:
        """Shape expected by the notification endpoint (``requestData``)."""
        return {
            "fromUserName": self.from_user_name,
            "toUserName": self.to_user_name,
            "message": self.message,
        }


@dataclass
class DispatchOutcome:
    """What the dispatcher did with a notification."""

    status: DispatchStatus
    event: NotificationEvent
    recipient: str | None = None
    subject: str | None = None
    html: str | None = None
    error: str | None = None
    dispatched_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def ok(self) -> bool:
        return self.status != DispatchStatus.FAILED
