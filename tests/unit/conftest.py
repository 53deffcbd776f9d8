"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from domain.entities.profile import Profile
from domain.entities.swap_request import SwapRequest, SwapRequestStatus


class FakeUnitOfWork:
    """Fake Unit of Work with repository mocks for unit testing."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.swap_requests = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


def make_profile(user_id: UUID | None = None, name: str = "Someone", **fields: Any) -> Profile:
    """Build a profile with sensible defaults."""
    fields.setdefault("email", f"{name.split()[0].lower()}@example.com")
    return Profile(user_id=user_id or uuid4(), name=name, **fields)


def make_request(
    from_user_id: UUID,
    to_user_id: UUID,
    status: SwapRequestStatus = SwapRequestStatus.PENDING,
    **fields: Any,
) -> SwapRequest:
    """Build a swap request between two users."""
    fields.setdefault("from_user_name", "Sender")
    fields.setdefault("to_user_name", "Recipient")
    fields.setdefault("message", "Hi!")
    return SwapRequest(from_user_id=from_user_id, to_user_id=to_user_id, status=status, **fields)


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def user_id() -> UUID:
    """A random user ID."""
    return uuid4()


@pytest.fixture
def actor_id() -> UUID:
    """A random actor ID (distinct from user_id)."""
    return uuid4()
