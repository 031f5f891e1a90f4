"""
BileMo API — Tag-Aware Response Cache
=======================================

What:  In-memory keyed store for serialized list pages, with a tag index
       that lets a write evict every page of an entity kind in one call.
Why:   List endpoints are read far more often than the catalogue changes.
       Serving the stored JSON skips the query and the serialization.
How:   Cache-aside. Readers call `ListCache.get(kind, page, limit, loader)`;
       on a miss the loader queries and serializes, and the result is stored
       under `getAll<Kind>-<page>-<limit>` tagged `<kind>Cache`. Writers call
       `ListCache.invalidate(kind)` after their commit succeeds.
Who:   One `ListCache` per application instance (`app.state.list_cache`),
       injected into routes through `get_list_cache`.

Data structures:
    _entries:  key → CacheEntry(value, tags, expires_at)
    _tag_index: tag → set of keys

    Both dicts are updated together; `invalidate_tags` walks the tag index,
    so eviction costs O(entries under the tag), not O(all entries).

Consistency model:
    A hit returns the stored bytes without checking the database. A page
    stays stale until a write on its kind (or on a kind it embeds)
    invalidates the tag. A reader racing an invalidation may repopulate
    with data read just before the commit; the next write fixes it.

Production Upgrade Path:
    Single-process only, like the rest of the in-memory state. For several
    workers, back `TagAwareCache` with Redis (SET + SADD per tag, SMEMBERS
    + DEL on invalidation) behind the same methods.
"""

import logging
import time
from collections import defaultdict
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, FrozenSet, Iterable, Mapping, Optional, Set

from fastapi import Request

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    value: str
    tags: FrozenSet[str]
    expires_at: Optional[float] = None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class TagAwareCache:
    """
    Keyed string store with tag-based bulk invalidation.

    Args:
        default_ttl: Seconds before an entry expires. 0 or None keeps entries
                     until they are invalidated.
        clock:       Monotonic time source; tests inject a fake one.
    """

    def __init__(
        self,
        default_ttl: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.default_ttl = default_ttl or None
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._tag_index: Dict[str, Set[str]] = defaultdict(set)
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and not entry.is_expired(self._clock())

    def get(self, key: str) -> Optional[str]:
        """Returns the stored value, or None on a miss or an expired entry."""
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return None
        if entry.is_expired(self._clock()):
            self._delete(key)
            self.misses += 1
            return None
        self.hits += 1
        return entry.value

    def set(
        self,
        key: str,
        value: str,
        tags: Iterable[str] = (),
        ttl: Optional[int] = None,
    ) -> None:
        """Stores `value` under `key`, replacing any previous entry and its tags."""
        if key in self._entries:
            self._delete(key)
        ttl = ttl if ttl is not None else self.default_ttl
        expires_at = self._clock() + ttl if ttl else None
        entry = CacheEntry(value=value, tags=frozenset(tags), expires_at=expires_at)
        self._entries[key] = entry
        for tag in entry.tags:
            self._tag_index[tag].add(key)

    async def get_or_set(
        self,
        key: str,
        compute: Callable[[], Awaitable[str]],
        tags: Iterable[str] = (),
    ) -> str:
        """
        Cache-aside read.

        `compute` runs only on a miss; its result is stored with `tags`.
        Exceptions from `compute` propagate and nothing is stored.
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug("Cache hit: %s", key)
            return cached

        logger.debug("Cache miss: %s", key)
        value = await compute()
        self.set(key, value, tags)
        return value

    def invalidate_tags(self, tags: Iterable[str]) -> int:
        """Deletes every entry carrying any of `tags`. Returns how many were removed."""
        removed = 0
        for tag in tags:
            for key in list(self._tag_index.pop(tag, ())):
                if key in self._entries:
                    self._delete(key)
                    removed += 1
        return removed

    def clear(self) -> None:
        self._entries.clear()
        self._tag_index.clear()

    def _delete(self, key: str) -> None:
        entry = self._entries.pop(key)
        for tag in entry.tags:
            keys = self._tag_index.get(tag)
            if keys is None:
                continue
            keys.discard(key)
            if not keys:
                del self._tag_index[tag]


class ListCache:
    """
    Paginated-list view over a TagAwareCache.

    `embeds` maps each entity kind to the kinds its read view embeds
    (customers embed their users). A write on kind K evicts K's tag and the
    tag of every kind whose view embeds K, directly or transitively.
    """

    def __init__(self, store: TagAwareCache, embeds: Mapping[str, Iterable[str]]):
        self.store = store
        self.embeds = {kind: frozenset(embedded) for kind, embedded in embeds.items()}

    @staticmethod
    def key(kind: str, page: int, limit: int) -> str:
        return f"getAll{kind.capitalize()}-{page}-{limit}"

    @staticmethod
    def tag(kind: str) -> str:
        return f"{kind}Cache"

    async def get(
        self,
        kind: str,
        page: int,
        limit: int,
        loader: Callable[[], Awaitable[str]],
    ) -> str:
        return await self.store.get_or_set(
            self.key(kind, page, limit),
            loader,
            tags=[self.tag(kind)],
        )

    def dependent_kinds(self, kind: str) -> Set[str]:
        """`kind` plus every kind whose read view embeds it."""
        affected = {kind}
        frontier = [kind]
        while frontier:
            current = frontier.pop()
            for owner, embedded in self.embeds.items():
                if current in embedded and owner not in affected:
                    affected.add(owner)
                    frontier.append(owner)
        return affected

    def invalidate(self, kind: str) -> Set[str]:
        tags = {self.tag(k) for k in self.dependent_kinds(kind)}
        removed = self.store.invalidate_tags(tags)
        logger.info("Invalidated %d cached page(s) for tags %s", removed, sorted(tags))
        return tags


def get_list_cache(request: Request) -> ListCache:
    """FastAPI dependency returning the application's list cache."""
    return request.app.state.list_cache
