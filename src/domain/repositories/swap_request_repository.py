"""Swap request repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.swap_request import SwapRequest, SwapRequestStatus


class ISwapRequestRepository(Protocol):
    """Repository interface for SwapRequest entities."""

    async def create(self, request: SwapRequest) -> SwapRequest:
        """Insert a new swap request."""
        ...

    async def get(self, id: UUID) -> SwapRequest | None:
        """Get a swap request by id."""
        ...

    async def list_for_user(
        self,
        user_id: UUID,
        status: SwapRequestStatus | None = None,
    ) -> list[SwapRequest]:
        """Get requests where the user is sender or recipient, newest first."""
        ...

    async def list_all(self) -> list[SwapRequest]:
        """Get every request, newest first."""
        ...

    async def transition_status(
        self,
        id: UUID,
        from_status: SwapRequestStatus,
        to_status: SwapRequestStatus,
    ) -> SwapRequest | None:
        """Change status only if the row is still in ``from_status``.

        Returns the updated request, or None if the row was missing or had
        already moved on.
        """
        ...

    async def delete(self, id: UUID, only_status: SwapRequestStatus | None = None) -> bool:
        """Delete a request, optionally only while it has ``only_status``."""
        ...

    async def delete_for_user(self, user_id: UUID) -> int:
        """Delete every request referencing the user on either side."""
        ...

    async def count(self) -> int:
        """Count all requests."""
        ...
