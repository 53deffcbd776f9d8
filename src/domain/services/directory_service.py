"""Profile directory: which profiles an actor may browse, and how to narrow them."""

import time
from collections import OrderedDict
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from uuid import UUID

import structlog

from domain.entities.change_event import PROFILES_TABLE, ChangeEvent
from domain.entities.profile import Profile
from domain.entities.session import ActorSession
from domain.repositories.change_feed import IChangeFeed
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

ALL_SLOTS = "all"
DEFAULT_CACHE_TTL_SECONDS = 30.0
DEFAULT_MAX_CACHED_ACTORS = 1000


def is_visible(profile: Profile, actor_id: UUID) -> bool:
    """Check if ``actor_id`` may see ``profile`` in the directory."""
    return profile.is_visible_to(actor_id)


def sort_profiles(profiles: Sequence[Profile]) -> list[Profile]:
    """Order by case-folded name, ties broken by user id."""
    return sorted(profiles, key=lambda p: (p.name.casefold(), str(p.user_id)))


def search(profiles: Sequence[Profile], term: str | None) -> list[Profile]:
    """Case-insensitive substring match on name, location and skills.

    A blank term returns the input unchanged.
    """
    if not term or not term.strip():
        return list(profiles)
    needle = term.strip().casefold()
    return [
        p for p in profiles if any(needle in text.casefold() for text in p.searchable_text())
    ]


def filter_by_availability(profiles: Sequence[Profile], slot: str | None) -> list[Profile]:
    """Keep profiles with an availability label containing ``slot``.

    ``"all"`` (or nothing) keeps everything.
    """
    if not slot or slot.strip().lower() == ALL_SLOTS:
        return list(profiles)
    needle = slot.strip().casefold()
    return [p for p in profiles if any(needle in a.casefold() for a in p.availability)]


@dataclass(frozen=True, slots=True)
class DirectoryPage:
    """A page of browse results."""

    profiles: list[Profile]
    total: int
    limit: int | None
    offset: int


class DirectoryService:
    """Lists visible profiles, caching per actor until any profile changes.

    The cache is dropped wholesale on each change event and rebuilt from the
    store on the next read. Change events only arrive for writes the feed
    hears about, so every entry also expires after ``cache_ttl`` seconds.
    At most ``max_cached_actors`` listings are kept, least recently used
    first out. A ``cache_ttl`` of 0 disables caching.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        change_feed: IChangeFeed | None = None,
        cache_ttl: float = DEFAULT_CACHE_TTL_SECONDS,
        max_cached_actors: int = DEFAULT_MAX_CACHED_ACTORS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._uow_factory = uow_factory
        self._cache_ttl = cache_ttl
        self._max_cached_actors = max_cached_actors
        self._clock = clock
        self._cache: OrderedDict[UUID, tuple[float, list[Profile]]] = OrderedDict()
        self._generation = 0
        self._unsubscribe: Callable[[], None] | None = None
        if change_feed is not None:
            self._unsubscribe = change_feed.subscribe(PROFILES_TABLE, self._on_profile_change)

    async def list_visible_profiles(self, actor_id: UUID) -> list[Profile]:
        """Every public profile except the actor's own, in stable order."""
        cached = self._cached(actor_id)
        if cached is not None:
            return list(cached)

        generation = self._generation
        async with self._uow_factory() as uow:
            records = await uow.profiles.list_profiles(is_public=True, exclude_user_id=actor_id)

        profiles = sort_profiles([p for p in records if is_visible(p, actor_id)])
        # A change that arrived during the fetch may not be reflected in it.
        if generation == self._generation:
            self._store(actor_id, profiles)
        return list(profiles)

    async def browse(
        self,
        session: ActorSession,
        term: str | None = None,
        slot: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> DirectoryPage:
        """Visible profiles narrowed by search term and availability, paged."""
        profiles = await self.list_visible_profiles(session.user_id)
        matched = filter_by_availability(search(profiles, term), slot)
        window = matched[offset : offset + limit] if limit is not None else matched[offset:]
        return DirectoryPage(profiles=window, total=len(matched), limit=limit, offset=offset)

    def invalidate(self) -> None:
        """Forget every cached listing."""
        self._generation += 1
        self._cache.clear()

    def close(self) -> None:
        """Stop listening for profile changes."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _cached(self, actor_id: UUID) -> list[Profile] | None:
        entry = self._cache.get(actor_id)
        if entry is None:
            return None
        stored_at, profiles = entry
        if self._clock() - stored_at >= self._cache_ttl:
            del self._cache[actor_id]
            return None
        self._cache.move_to_end(actor_id)
        return profiles

    def _store(self, actor_id: UUID, profiles: list[Profile]) -> None:
        if self._cache_ttl <= 0 or self._max_cached_actors <= 0:
            return
        self._cache[actor_id] = (self._clock(), profiles)
        self._cache.move_to_end(actor_id)
        while len(self._cache) > self._max_cached_actors:
            self._cache.popitem(last=False)

    def _on_profile_change(self, event: ChangeEvent) -> None:
        logger.debug(
            "directory_invalidated",
            change_type=event.change_type.value,
            record_id=str(event.record_id) if event.record_id else None,
        )
        self.invalidate()
