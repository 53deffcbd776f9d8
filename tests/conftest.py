"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any
from uuid import UUID, uuid4

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["REALTIME_LISTEN_ENABLED"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.entities.notification import (
    DispatchOutcome,
    DispatchStatus,
    NotificationEvent,
    RequestSnapshot,
)
from domain.entities.profile import Profile
from domain.entities.session import ActorRole, ActorSession
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.realtime.change_feed import InMemoryChangeFeed


# Compile JSONB as JSON for SQLite (used in tests)
@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_: Any, compiler: Any, **kw: Any) -> str:
    return "JSON"


# Test database URL (SQLite in memory, one connection shared per test)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_SECRET = "test-secret-key"
ADMIN_EMAIL = "admin@skillswap.test"


class RecordingDispatcher:
    """Notification dispatcher that remembers what it was asked to send."""

    def __init__(self) -> None:
        self.sent: list[tuple[NotificationEvent, str | None, RequestSnapshot]] = []

    async def notify(
        self,
        event: NotificationEvent,
        recipient_contact: str | None,
        snapshot: RequestSnapshot,
    ) -> DispatchOutcome:
        self.sent.append((event, recipient_contact, snapshot))
        return DispatchOutcome(
            status=DispatchStatus.SENT if recipient_contact else DispatchStatus.SKIPPED,
            event=event,
            recipient=recipient_contact,
        )

    def events(self) -> list[NotificationEvent]:
        return [event for event, _, _ in self.sent]


def make_session(
    name: str = "Test User",
    email: str | None = None,
    role: ActorRole = ActorRole.USER,
    user_id: UUID | None = None,
) -> ActorSession:
    """Build an actor session for tests."""
    return ActorSession(
        user_id=user_id or uuid4(),
        email=email or f"{name.split()[0].lower()}@example.com",
        display_name=name,
        role=role,
    )


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Unit of Work factory bound to the test database."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
def change_feed() -> InMemoryChangeFeed:
    return InMemoryChangeFeed()


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key=TEST_SECRET,
        algorithm="HS256",
        expire_minutes=30,
        admin_emails=[ADMIN_EMAIL],
    )


@pytest.fixture
def alice() -> ActorSession:
    return make_session("Alice Smith")


@pytest.fixture
def bob() -> ActorSession:
    return make_session("Bob Jones")


@pytest.fixture
def admin() -> ActorSession:
    return make_session("Site Admin", email=ADMIN_EMAIL, role=ActorRole.ADMIN)


@pytest.fixture
def headers_for(auth_provider: JWTAuthProvider) -> Callable[[ActorSession], dict[str, str]]:
    """Build authorization headers for a session."""

    def build(session: ActorSession) -> dict[str, str]:
        return {"Authorization": f"Bearer {auth_provider.create_token(session)}"}

    return build


@pytest.fixture
def save_profile(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
) -> Callable[..., Any]:
    """Insert a profile directly into the test database."""

    async def save(session: ActorSession, **fields: Any) -> Profile:
        fields.setdefault("name", session.display_name or session.email)
        fields.setdefault("email", session.email)
        profile = Profile(user_id=session.user_id, **fields)
        async with uow_factory() as uow:
            saved = await uow.profiles.upsert(profile)
            await uow.commit()
        return saved

    return save


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client with no overrides."""
    from main import create_app

    transport = ASGITransport(app=create_app())
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def app_client(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    auth_provider: JWTAuthProvider,
    change_feed: InMemoryChangeFeed,
    dispatcher: RecordingDispatcher,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client wired to the in-memory database.

    This client:
    - Validates real HS256 tokens issued by ``auth_provider``
    - Uses SQLite services sharing one change feed
    - Records notifications instead of sending them
    """
    from api.dependencies.auth import get_auth_provider
    from api.v1.dependencies import (
        get_admin_service,
        get_directory_service,
        get_profile_service,
        get_swap_request_service,
    )
    from domain.services.admin_service import AdminService
    from domain.services.directory_service import DirectoryService
    from domain.services.notification_service import NotificationService
    from domain.services.profile_service import ProfileService
    from domain.services.swap_request_service import SwapRequestService
    from main import create_app

    app = create_app()

    directory = DirectoryService(uow_factory, change_feed=change_feed)
    profiles = ProfileService(uow_factory, change_feed=change_feed)
    swaps = SwapRequestService(
        uow_factory, notification_service=NotificationService(dispatcher)
    )
    admin_service = AdminService(uow_factory, change_feed=change_feed)

    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_directory_service] = lambda: directory
    app.dependency_overrides[get_profile_service] = lambda: profiles
    app.dependency_overrides[get_swap_request_service] = lambda: swaps
    app.dependency_overrides[get_admin_service] = lambda: admin_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    directory.close()
    app.dependency_overrides.clear()
