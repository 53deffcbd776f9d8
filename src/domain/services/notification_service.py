"""Notification service: best-effort hand-off of swap request events."""

import structlog

from domain.entities.notification import (
    DispatchOutcome,
    DispatchStatus,
    NotificationEvent,
    RequestSnapshot,
)
from domain.entities.swap_request import SwapRequest
from domain.repositories.notification_dispatcher import INotificationDispatcher

logger = structlog.get_logger()


class NotificationService:
    """Wraps a dispatcher so that delivery never affects request state.

    Callers invoke ``notify`` only after their transaction has committed.
    Dispatcher exceptions and failed outcomes are logged and swallowed.
    """

    def __init__(self, dispatcher: INotificationDispatcher) -> None:
        self._dispatcher = dispatcher

    async def notify(
        self,
        event: NotificationEvent,
        request: SwapRequest,
        recipient_contact: str | None,
    ) -> DispatchOutcome:
        """Dispatch a notification for a swap request event.

        Args:
            event: The lifecycle event that just happened.
            request: The request after the state change.
            recipient_contact: Email of the user being told, if known.

        Returns:
            The dispatcher outcome, or a FAILED outcome if it raised.
        """
        snapshot = RequestSnapshot.of(request)
        try:
            outcome = await self._dispatcher.notify(event, recipient_contact, snapshot)
        except Exception as e:
            logger.exception(
                "notification_dispatch_failed",
                event=event.value,
                request_id=str(request.id),
            )
            return DispatchOutcome(
                status=DispatchStatus.FAILED,
                event=event,
                recipient=recipient_contact,
                error=str(e),
            )

        if outcome.status == DispatchStatus.FAILED:
            logger.warning(
                "notification_dispatch_failed",
                event=event.value,
                request_id=str(request.id),
                error=outcome.error,
            )
        else:
            logger.info(
                "notification_dispatched",
                event=event.value,
                request_id=str(request.id),
                status=outcome.status.value,
            )
        return outcome
