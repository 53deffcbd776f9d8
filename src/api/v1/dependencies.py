"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

import structlog

from api.dependencies.auth import get_auth_provider
from core.config import settings
from domain.entities.session import ActorSession
from domain.services.admin_service import AdminService
from domain.services.auth_service import AuthService, SessionEvent
from domain.services.directory_service import DirectoryService
from domain.services.notification_service import NotificationService
from domain.services.profile_service import ProfileService
from domain.services.swap_request_service import SwapRequestService
from infrastructure.auth.supabase_identity import SupabaseIdentityProvider
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.notifications.email_dispatcher import EmailNotificationDispatcher
from infrastructure.realtime.change_feed import InMemoryChangeFeed
from infrastructure.realtime.postgres_listener import PostgresChangeListener
from infrastructure.storage.supabase_storage import SupabaseStorage

logger = structlog.get_logger()


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_change_feed() -> InMemoryChangeFeed:
    """Get the process-wide profile change feed."""
    return InMemoryChangeFeed()


@lru_cache
def get_change_listener() -> PostgresChangeListener:
    """Get the Postgres bridge that feeds profile changes into the change feed."""
    return PostgresChangeListener(settings.listen_dsn, get_change_feed())


@lru_cache
def get_notification_service() -> NotificationService:
    """Get Notification service instance."""
    return NotificationService(EmailNotificationDispatcher())


@lru_cache
def get_directory_service() -> DirectoryService:
    """Get Directory service instance (subscribed to profile changes)."""
    return DirectoryService(
        get_uow_factory(),
        change_feed=get_change_feed(),
        cache_ttl=settings.directory_cache_ttl_seconds,
        max_cached_actors=settings.directory_cache_max_actors,
    )


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(
        get_uow_factory(),
        storage=SupabaseStorage(),
        change_feed=get_change_feed(),
        max_picture_bytes=settings.max_upload_bytes,
    )


@lru_cache
def get_swap_request_service() -> SwapRequestService:
    """Get SwapRequest service instance."""
    return SwapRequestService(
        get_uow_factory(),
        notification_service=get_notification_service(),
    )


@lru_cache
def get_admin_service() -> AdminService:
    """Get Admin service instance."""
    return AdminService(get_uow_factory(), change_feed=get_change_feed())


def _log_session_change(event: SessionEvent, session: ActorSession) -> None:
    logger.info("session_changed", session_event=event, user_id=str(session.user_id))


@lru_cache
def get_auth_service() -> AuthService:
    """Get Auth service instance."""
    service = AuthService(SupabaseIdentityProvider(get_auth_provider()))
    service.on_session_change(_log_session_change)
    return service
