"""Change feed protocol for table change notifications."""

from collections.abc import Callable
from typing import Protocol

from domain.entities.change_event import ChangeEvent

ChangeCallback = Callable[[ChangeEvent], None]


class IChangeFeed(Protocol):
    """Publishes row change cues to subscribers of a table."""

    def subscribe(self, table: str, callback: ChangeCallback) -> Callable[[], None]:
        """Register a callback for a table. Returns an unsubscribe function."""
        ...

    def publish(self, event: ChangeEvent) -> None:
        """Deliver an event to every subscriber of its table."""
        ...
