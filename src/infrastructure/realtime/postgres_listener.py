"""Postgres LISTEN bridge into the in-process change feed.

The ``profiles_notify_change`` trigger sends a ``pg_notify`` on every row
change, whoever made it: this worker, another worker or a Supabase client
talking to the database directly. Each worker holds one LISTEN connection
and republishes what it hears on its own feed.

Payload sent by the trigger::

    {"table": "profiles", "type": "INSERT" | "UPDATE" | "DELETE", "id": "<uuid>"}
"""

from typing import Any
from uuid import UUID

import asyncpg
import orjson
import structlog

from domain.entities.change_event import PROFILES_TABLE, ChangeEvent, ChangeType
from domain.repositories.change_feed import IChangeFeed

logger = structlog.get_logger()

PROFILE_CHANGES_CHANNEL = "profile_changes"


class PostgresChangeListener:
    """Relays notifications on one channel to a change feed."""

    def __init__(
        self,
        dsn: str,
        feed: IChangeFeed,
        channel: str = PROFILE_CHANGES_CHANNEL,
        table: str = PROFILES_TABLE,
    ) -> None:
        self._dsn = dsn
        self._feed = feed
        self._channel = channel
        self._table = table
        self._connection: Any | None = None

    @property
    def listening(self) -> bool:
        return self._connection is not None

    async def start(self) -> bool:
        """Open the LISTEN connection.

        Returns:
            False if the database could not be reached; the caller keeps
            running on in-process events and cache expiry alone.
        """
        if self._connection is not None:
            return True
        try:
            connection = await asyncpg.connect(self._dsn)
        except (OSError, TimeoutError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            logger.warning("change_listener_unavailable", channel=self._channel, error=str(e))
            return False

        try:
            await connection.add_listener(self._channel, self.handle_notification)
        except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            logger.warning("change_listener_unavailable", channel=self._channel, error=str(e))
            await connection.close()
            return False

        connection.add_termination_listener(self._on_terminated)
        self._connection = connection
        logger.info("change_listener_started", channel=self._channel)
        return True

    async def stop(self) -> None:
        """Stop listening and close the connection."""
        connection, self._connection = self._connection, None
        if connection is None:
            return
        try:
            await connection.remove_listener(self._channel, self.handle_notification)
        finally:
            await connection.close()
        logger.info("change_listener_stopped", channel=self._channel)

    def handle_notification(
        self, connection: Any, pid: int, channel: str, payload: str
    ) -> None:
        """asyncpg listener callback: publish the change on the feed.

        A payload that cannot be parsed still invalidates, as an UPDATE with
        no record id.
        """
        try:
            body = orjson.loads(payload)
            raw_id = body.get("id")
            event = ChangeEvent(
                table=body.get("table") or self._table,
                change_type=ChangeType(body["type"]),
                record_id=UUID(str(raw_id)) if raw_id else None,
            )
        except (ValueError, KeyError, TypeError, AttributeError):
            logger.warning("change_notification_malformed", channel=channel, payload=payload)
            event = ChangeEvent(table=self._table, change_type=ChangeType.UPDATE)
        self._feed.publish(event)

    def _on_terminated(self, connection: Any) -> None:
        # TODO: reconnect with backoff; until then freshness rests on cache expiry.
        logger.warning("change_listener_disconnected", channel=self._channel)
        self._connection = None
