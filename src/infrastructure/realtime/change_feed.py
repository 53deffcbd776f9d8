"""In-process change feed for table change cues."""

from collections import defaultdict
from collections.abc import Callable

import structlog

from domain.entities.change_event import ChangeEvent
from domain.repositories.change_feed import ChangeCallback

logger = structlog.get_logger()


class InMemoryChangeFeed:
    """Synchronous fan-out of change events to per-table subscribers.

    A failing subscriber is logged and does not stop delivery to the rest.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[ChangeCallback]] = defaultdict(list)

    def subscribe(self, table: str, callback: ChangeCallback) -> Callable[[], None]:
        """Register a callback for a table. Returns an unsubscribe function."""
        self._subscribers[table].append(callback)

        def unsubscribe() -> None:
            callbacks = self._subscribers.get(table, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def publish(self, event: ChangeEvent) -> None:
        """Deliver an event to every subscriber of its table."""
        for callback in list(self._subscribers.get(event.table, [])):
            try:
                callback(event)
            except Exception:
                logger.exception(
                    "change_subscriber_failed",
                    table=event.table,
                    change_type=event.change_type.value,
                )

    def subscriber_count(self, table: str) -> int:
        return len(self._subscribers.get(table, []))
