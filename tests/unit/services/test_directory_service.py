"""Unit tests for DirectoryService and the directory helpers."""

from uuid import UUID, uuid4

import pytest

from domain.entities.change_event import PROFILES_TABLE, ChangeEvent, ChangeType
from domain.entities.profile import Profile
from domain.entities.session import ActorSession
from domain.services.directory_service import (
    DirectoryService,
    filter_by_availability,
    is_visible,
    search,
    sort_profiles,
)
from infrastructure.realtime.change_feed import InMemoryChangeFeed
from tests.unit.conftest import FakeUnitOfWork, make_profile


@pytest.fixture
def marc() -> Profile:
    return make_profile(
        name="Marc Demo",
        location="Lisbon",
        skills_offered=["JavaScript", "Python"],
        skills_wanted=["Photoshop"],
        availability=["Weekend Mornings"],
    )


@pytest.fixture
def joe() -> Profile:
    return make_profile(
        name="Joe Wills",
        location="Porto",
        skills_offered=["Photoshop"],
        skills_wanted=["Cooking"],
        availability=["Weekday Evenings", "Weekend Afternoons"],
    )


@pytest.fixture
def anna() -> Profile:
    return make_profile(name="anna Lee", skills_offered=["Guitar"], availability=[])


# --- pure helpers ---


class TestVisibility:
    def test_public_profile_of_someone_else_is_visible(self, marc: Profile) -> None:
        assert is_visible(marc, uuid4())

    def test_own_profile_is_not_visible(self, marc: Profile) -> None:
        assert not is_visible(marc, marc.user_id)

    def test_private_profile_is_not_visible(self, marc: Profile) -> None:
        marc.is_public = False
        assert not is_visible(marc, uuid4())


class TestSortProfiles:
    def test_orders_by_case_folded_name(self, marc: Profile, joe: Profile, anna: Profile) -> None:
        assert sort_profiles([marc, joe, anna]) == [anna, joe, marc]

    def test_ties_broken_by_user_id(self) -> None:
        a = make_profile(UUID(int=2), name="Sam")
        b = make_profile(UUID(int=1), name="sam")
        assert sort_profiles([a, b]) == [b, a]


class TestSearch:
    def test_blank_term_is_identity(self, marc: Profile, joe: Profile) -> None:
        assert search([marc, joe], "") == [marc, joe]
        assert search([marc, joe], "   ") == [marc, joe]
        assert search([marc, joe], None) == [marc, joe]

    def test_matches_skill_case_insensitively(self, marc: Profile, joe: Profile) -> None:
        assert search([marc, joe], "photo") == [marc, joe]
        assert search([marc, joe], "PYTHON") == [marc]

    def test_matches_name_and_location(self, marc: Profile, joe: Profile) -> None:
        assert search([marc, joe], "wills") == [joe]
        assert search([marc, joe], "lisb") == [marc]

    def test_no_match_returns_empty(self, marc: Profile, joe: Profile) -> None:
        assert search([marc, joe], "haskell") == []

    def test_result_is_subset_in_input_order(
        self, marc: Profile, joe: Profile, anna: Profile
    ) -> None:
        profiles = [joe, anna, marc]
        result = search(profiles, "o")
        assert all(p in profiles for p in result)
        assert result == [p for p in profiles if p in result]


class TestFilterByAvailability:
    def test_all_is_a_no_op(self, marc: Profile, joe: Profile, anna: Profile) -> None:
        assert filter_by_availability([marc, joe, anna], "all") == [marc, joe, anna]
        assert filter_by_availability([marc, joe, anna], "") == [marc, joe, anna]

    def test_exact_slot(self, marc: Profile, joe: Profile, anna: Profile) -> None:
        assert filter_by_availability([marc, joe, anna], "Weekend Mornings") == [marc]

    def test_partial_slot_matches_substring(
        self, marc: Profile, joe: Profile, anna: Profile
    ) -> None:
        assert filter_by_availability([marc, joe, anna], "weekend") == [marc, joe]


# --- DirectoryService ---


def _actor(user_id: UUID | None = None) -> ActorSession:
    return ActorSession(user_id=user_id or uuid4(), email="actor@example.com")


class TestDirectoryService:
    @pytest.mark.asyncio
    async def test_lists_sorted_visible_profiles(
        self, uow: FakeUnitOfWork, marc: Profile, joe: Profile
    ) -> None:
        actor_id = uuid4()
        uow.profiles.list_profiles.return_value = [marc, joe]
        service = DirectoryService(lambda: uow)

        result = await service.list_visible_profiles(actor_id)

        assert result == [joe, marc]
        uow.profiles.list_profiles.assert_awaited_once_with(
            is_public=True, exclude_user_id=actor_id
        )

    @pytest.mark.asyncio
    async def test_drops_own_and_private_even_if_store_returns_them(
        self, uow: FakeUnitOfWork, marc: Profile, joe: Profile, anna: Profile
    ) -> None:
        anna.is_public = False
        uow.profiles.list_profiles.return_value = [marc, joe, anna]
        service = DirectoryService(lambda: uow)

        result = await service.list_visible_profiles(marc.user_id)

        assert result == [joe]

    @pytest.mark.asyncio
    async def test_caches_per_actor(self, uow: FakeUnitOfWork, marc: Profile) -> None:
        actor_id = uuid4()
        uow.profiles.list_profiles.return_value = [marc]
        service = DirectoryService(lambda: uow)

        await service.list_visible_profiles(actor_id)
        await service.list_visible_profiles(actor_id)
        await service.list_visible_profiles(uuid4())

        assert uow.profiles.list_profiles.await_count == 2

    @pytest.mark.asyncio
    async def test_change_event_invalidates_cache(
        self, uow: FakeUnitOfWork, marc: Profile, joe: Profile
    ) -> None:
        actor_id = uuid4()
        feed = InMemoryChangeFeed()
        service = DirectoryService(lambda: uow, change_feed=feed)
        uow.profiles.list_profiles.return_value = [marc]
        assert await service.list_visible_profiles(actor_id) == [marc]

        uow.profiles.list_profiles.return_value = [marc, joe]
        feed.publish(ChangeEvent(table=PROFILES_TABLE, change_type=ChangeType.INSERT))

        assert await service.list_visible_profiles(actor_id) == [joe, marc]

    @pytest.mark.asyncio
    async def test_close_unsubscribes(self, uow: FakeUnitOfWork) -> None:
        feed = InMemoryChangeFeed()
        service = DirectoryService(lambda: uow, change_feed=feed)
        assert feed.subscriber_count(PROFILES_TABLE) == 1

        service.close()

        assert feed.subscriber_count(PROFILES_TABLE) == 0

    @pytest.mark.asyncio
    async def test_cached_list_is_a_copy(self, uow: FakeUnitOfWork, marc: Profile) -> None:
        actor_id = uuid4()
        uow.profiles.list_profiles.return_value = [marc]
        service = DirectoryService(lambda: uow)

        first = await service.list_visible_profiles(actor_id)
        first.clear()

        assert await service.list_visible_profiles(actor_id) == [marc]

    @pytest.mark.asyncio
    async def test_browse_combines_search_filter_and_paging(
        self, uow: FakeUnitOfWork, marc: Profile, joe: Profile, anna: Profile
    ) -> None:
        uow.profiles.list_profiles.return_value = [marc, joe, anna]
        service = DirectoryService(lambda: uow)

        page = await service.browse(_actor(), term="photoshop", slot="weekend", limit=1, offset=1)

        assert page.total == 2
        assert page.profiles == [marc]
        assert page.limit == 1
        assert page.offset == 1

    @pytest.mark.asyncio
    async def test_browse_without_filters_returns_everything(
        self, uow: FakeUnitOfWork, marc: Profile, joe: Profile
    ) -> None:
        uow.profiles.list_profiles.return_value = [marc, joe]
        service = DirectoryService(lambda: uow)

        page = await service.browse(_actor(), term="", slot="all")

        assert page.profiles == [joe, marc]
        assert page.total == 2


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestDirectoryCacheBounds:
    @pytest.mark.asyncio
    async def test_entry_expires_after_ttl(
        self, uow: FakeUnitOfWork, marc: Profile, joe: Profile
    ) -> None:
        actor_id = uuid4()
        clock = FakeClock()
        service = DirectoryService(lambda: uow, cache_ttl=5.0, clock=clock)
        uow.profiles.list_profiles.return_value = [marc, joe]
        await service.list_visible_profiles(actor_id)

        # Changed behind the service's back, with no event.
        uow.profiles.list_profiles.return_value = [joe]
        clock.now += 4.9
        assert await service.list_visible_profiles(actor_id) == [joe, marc]

        clock.now += 1.0
        assert await service.list_visible_profiles(actor_id) == [joe]
        assert uow.profiles.list_profiles.await_count == 2

    @pytest.mark.asyncio
    async def test_zero_ttl_disables_caching(self, uow: FakeUnitOfWork, marc: Profile) -> None:
        actor_id = uuid4()
        uow.profiles.list_profiles.return_value = [marc]
        service = DirectoryService(lambda: uow, cache_ttl=0)

        await service.list_visible_profiles(actor_id)
        await service.list_visible_profiles(actor_id)

        assert uow.profiles.list_profiles.await_count == 2

    @pytest.mark.asyncio
    async def test_least_recently_used_actor_is_evicted(
        self, uow: FakeUnitOfWork, marc: Profile
    ) -> None:
        first, second, third = uuid4(), uuid4(), uuid4()
        uow.profiles.list_profiles.return_value = [marc]
        service = DirectoryService(lambda: uow, max_cached_actors=2)

        await service.list_visible_profiles(first)
        await service.list_visible_profiles(second)
        await service.list_visible_profiles(first)
        await service.list_visible_profiles(third)
        assert uow.profiles.list_profiles.await_count == 3

        # first was touched more recently than second
        await service.list_visible_profiles(first)
        assert uow.profiles.list_profiles.await_count == 3
        await service.list_visible_profiles(second)
        assert uow.profiles.list_profiles.await_count == 4

    @pytest.mark.asyncio
    async def test_change_during_fetch_is_not_cached(
        self, uow: FakeUnitOfWork, marc: Profile, joe: Profile
    ) -> None:
        actor_id = uuid4()
        feed = InMemoryChangeFeed()
        service = DirectoryService(lambda: uow, change_feed=feed)

        async def fetch_while_changing(**kwargs: object) -> list[Profile]:
            feed.publish(ChangeEvent(table=PROFILES_TABLE, change_type=ChangeType.UPDATE))
            return [marc]

        uow.profiles.list_profiles.side_effect = fetch_while_changing
        assert await service.list_visible_profiles(actor_id) == [marc]

        uow.profiles.list_profiles.side_effect = None
        uow.profiles.list_profiles.return_value = [marc, joe]
        assert await service.list_visible_profiles(actor_id) == [joe, marc]
