"""Notification dispatcher protocol."""

from typing import Protocol

from domain.entities.notification import DispatchOutcome, NotificationEvent, RequestSnapshot


class INotificationDispatcher(Protocol):
    """Turns a lifecycle event into a delivered (or logged) message."""

    async def notify(
        self,
        event: NotificationEvent,
        recipient_contact: str | None,
        snapshot: RequestSnapshot,
    ) -> DispatchOutcome:
        """Render and hand off a notification."""
        ...
