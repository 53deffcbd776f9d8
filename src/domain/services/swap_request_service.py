"""Swap request service layer: the request state machine and its ownership rules."""

from collections.abc import Callable
from typing import Optional
from uuid import UUID

import structlog

from core.exceptions import (
    InvalidTransitionError,
    NotAuthorizedError,
    ProfileNotFoundError,
    SelfRequestError,
    SwapRequestNotFoundError,
)
from domain.entities.notification import NotificationEvent
from domain.entities.session import ActorSession
from domain.entities.swap_request import SwapRequest, SwapRequestStatus, default_message
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.notification_service import NotificationService

logger = structlog.get_logger()


class SwapRequestService:
    """Service layer for swap request business logic.

    Every status change is a conditional update at the store, so a retried
    accept/reject finds the row no longer pending and fails with
    ``InvalidTransitionError`` instead of notifying twice. Notifications go
    out after commit and can never undo a transition.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        notification_service: Optional["NotificationService"] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._notification = notification_service

    async def create_request(
        self,
        session: ActorSession,
        to_user_id: UUID,
        message: str | None = None,
    ) -> SwapRequest:
        """Send a swap request from the actor to another user.

        Args:
            session: The sending actor.
            to_user_id: The recipient's user id.
            message: Optional message; defaults to a greeting naming the recipient.

        Returns:
            The created request, status ``pending``.

        Raises:
            SelfRequestError: If the actor targets themselves.
            ProfileNotFoundError: If the recipient has no profile.
        """
        if session.user_id == to_user_id:
            raise SelfRequestError()

        async with self._uow_factory() as uow:
            recipient = await uow.profiles.get(to_user_id)
            if not recipient:
                raise ProfileNotFoundError(str(to_user_id))

            sender = await uow.profiles.get(session.user_id)
            from_name = sender.name if sender else session.label

            text = (message or "").strip() or default_message(recipient.name)
            request = SwapRequest(
                from_user_id=session.user_id,
                from_user_name=from_name,
                to_user_id=to_user_id,
                to_user_name=recipient.name,
                message=text,
            )
            created = await uow.swap_requests.create(request)
            await uow.commit()

        logger.info(
            "swap_request_created",
            request_id=str(created.id),
            from_user_id=str(created.from_user_id),
            to_user_id=str(created.to_user_id),
        )
        await self._notify(NotificationEvent.REQUEST_SENT, created, recipient.email)
        return created

    async def accept_request(self, request_id: UUID, session: ActorSession) -> SwapRequest:
        """Accept a pending request. Only the recipient may do this.

        Raises:
            SwapRequestNotFoundError: If the request does not exist.
            NotAuthorizedError: If the actor is not the recipient.
            InvalidTransitionError: If the request is no longer pending.
        """
        return await self._answer(
            request_id, session, SwapRequestStatus.ACCEPTED, NotificationEvent.REQUEST_ACCEPTED
        )

    async def reject_request(self, request_id: UUID, session: ActorSession) -> SwapRequest:
        """Reject a pending request. Only the recipient may do this.

        Raises:
            SwapRequestNotFoundError: If the request does not exist.
            NotAuthorizedError: If the actor is not the recipient.
            InvalidTransitionError: If the request is no longer pending.
        """
        return await self._answer(
            request_id, session, SwapRequestStatus.REJECTED, NotificationEvent.REQUEST_REJECTED
        )

    async def delete_request(self, request_id: UUID, session: ActorSession) -> None:
        """Withdraw a pending request. Only the sender may do this.

        Raises:
            SwapRequestNotFoundError: If the request does not exist.
            NotAuthorizedError: If the actor is not the sender.
            InvalidTransitionError: If the request was already answered.
        """
        async with self._uow_factory() as uow:
            request = await uow.swap_requests.get(request_id)
            if not request:
                raise SwapRequestNotFoundError(str(request_id))
            if request.from_user_id != session.user_id:
                raise NotAuthorizedError("Only the sender can withdraw a swap request")
            if not request.is_pending:
                raise InvalidTransitionError(request.status.value, "delete")

            deleted = await uow.swap_requests.delete(
                request_id, only_status=SwapRequestStatus.PENDING
            )
            if not deleted:
                # Answered between the read and the delete.
                current = await uow.swap_requests.get(request_id)
                if not current:
                    raise SwapRequestNotFoundError(str(request_id))
                raise InvalidTransitionError(current.status.value, "delete")
            await uow.commit()

        logger.info("swap_request_deleted", request_id=str(request_id))

    async def get_request(self, request_id: UUID, session: ActorSession) -> SwapRequest:
        """Get a request the actor takes part in (admins see all)."""
        async with self._uow_factory() as uow:
            request = await uow.swap_requests.get(request_id)

        if not request or not (session.is_admin or request.involves(session.user_id)):
            raise SwapRequestNotFoundError(str(request_id))
        return request

    async def list_for(
        self,
        user_id: UUID,
        status: SwapRequestStatus | None = None,
    ) -> tuple[list[SwapRequest], list[SwapRequest]]:
        """Partition the user's requests into (sent, received), newest first."""
        async with self._uow_factory() as uow:
            requests = await uow.swap_requests.list_for_user(user_id, status=status)

        ordered = sorted(requests, key=lambda r: r.created_at, reverse=True)
        sent = [r for r in ordered if r.from_user_id == user_id]
        received = [r for r in ordered if r.to_user_id == user_id and r.from_user_id != user_id]
        return sent, received

    # --- Internal helpers ---

    async def _answer(
        self,
        request_id: UUID,
        session: ActorSession,
        new_status: SwapRequestStatus,
        event: NotificationEvent,
    ) -> SwapRequest:
        """Shared recipient-side transition for accept and reject."""
        action = "accept" if new_status == SwapRequestStatus.ACCEPTED else "reject"

        async with self._uow_factory() as uow:
            request = await uow.swap_requests.get(request_id)
            if not request:
                raise SwapRequestNotFoundError(str(request_id))
            if request.to_user_id != session.user_id:
                raise NotAuthorizedError(f"Only the recipient can {action} a swap request")
            if not request.is_pending:
                raise InvalidTransitionError(request.status.value, action)

            updated = await uow.swap_requests.transition_status(
                request_id, SwapRequestStatus.PENDING, new_status
            )
            if not updated:
                # Another attempt got there first.
                current = await uow.swap_requests.get(request_id)
                if not current:
                    raise SwapRequestNotFoundError(str(request_id))
                raise InvalidTransitionError(current.status.value, action)

            sender = await uow.profiles.get(updated.from_user_id)
            await uow.commit()

        logger.info(
            "swap_request_answered",
            request_id=str(request_id),
            status=updated.status.value,
        )
        await self._notify(event, updated, sender.email if sender else None)
        return updated

    async def _notify(
        self,
        event: NotificationEvent,
        request: SwapRequest,
        recipient_contact: str | None,
    ) -> None:
        if self._notification:
            await self._notification.notify(event, request, recipient_contact)
