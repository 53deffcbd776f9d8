"""Swap request domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


class SwapRequestStatus(StrEnum):
    """Status of a swap request.

    ``pending`` is the only non-terminal state.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


DEFAULT_MESSAGE_TEMPLATE = "Hi {name}! I'd love to connect for a skill exchange."


def default_message(to_user_name: str) -> str:
    """Message used when the sender does not write one."""
    return DEFAULT_MESSAGE_TEMPLATE.format(name=to_user_name)


@dataclass
class SwapRequest:
    """Domain entity for a directed skill-swap proposal between two users."""

    from_user_id: UUID
    from_user_name: str
    to_user_id: UUID
    to_user_name: str
    message: str
    id: UUID = field(default_factory=uuid4)
    status: SwapRequestStatus = SwapRequestStatus.PENDING
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_pending(self) -> bool:
        """Check if the request is still awaiting an answer."""
        return self.status == SwapRequestStatus.PENDING

    @property
    def is_terminal(self) -> bool:
        """Accepted and rejected requests never change again."""
        return not self.is_pending

    def involves(self, user_id: UUID) -> bool:
        """Check if the user is the sender or the recipient."""
        return user_id in (self.from_user_id, self.to_user_id)
