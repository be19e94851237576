"""
Tag-keyed read-through cache.

Reads from the persistence layer are memoized under a key and a set of tags.
Mutations invalidate by tag, dropping every entry that carries any of them.
"""

import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from threading import Lock
from typing import TYPE_CHECKING, Any, TypeVar

from bytescart.core.logging import logger

if TYPE_CHECKING:
    from bytescart.infrastructure.repositories.store_repository import Store

T = TypeVar("T")


class CacheTags:
    """Builders for cache tag names."""

    @staticmethod
    def store(slug: str) -> str:
        return f"store:{slug}"

    @staticmethod
    def store_by_id(store_id: str) -> str:
        return f"store-id:{store_id}"

    @staticmethod
    def products(store_id: str) -> str:
        return f"products:{store_id}"

    @staticmethod
    def categories(store_id: str) -> str:
        return f"categories:{store_id}"

    @staticmethod
    def orders(store_id: str) -> str:
        return f"orders:{store_id}"

    @staticmethod
    def sections(store_id: str) -> str:
        return f"sections:{store_id}"

    @staticmethod
    def shipping_locations(store_id: str) -> str:
        return f"shipping-locations:{store_id}"

    @staticmethod
    def domain(domain: str) -> str:
        return f"domain:{domain}"


@dataclass
class CacheEntry:
    value: Any
    tags: frozenset[str]
    expires_at: float = field(default=0.0)

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class TagCache:
    """
    In-memory read-through cache with TTL and tag invalidation.

    Loaders run outside the lock; two concurrent misses for the same key both
    load and the last write wins.
    """

    def __init__(
        self,
        ttl_seconds: int = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = Lock()

    async def get_or_load(
        self,
        key: str,
        tags: Iterable[str],
        loader: Callable[[], Awaitable[T]],
    ) -> T:
        """
        Return the cached value for ``key`` or load and cache it.

        Args:
            key: Cache key, unique per query and arguments
            tags: Tags the value depends on
            loader: Coroutine function producing the value on a miss

        Returns:
            Cached or freshly loaded value
        """
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry and not entry.is_expired(now):
                return entry.value
            if entry:
                del self._entries[key]

        value = await loader()

        with self._lock:
            self._entries[key] = CacheEntry(
                value=value,
                tags=frozenset(tags),
                expires_at=self._clock() + self.ttl_seconds,
            )
        return value

    def invalidate_tags(self, *tags: str) -> int:
        """
        Drop every entry carrying any of ``tags``.

        Returns:
            Number of entries removed
        """
        targets = set(tags)
        with self._lock:
            stale = [key for key, entry in self._entries.items() if entry.tags & targets]
            for key in stale:
                del self._entries[key]

        if stale:
            logger.debug(f"Invalidated {len(stale)} cache entries for tags {sorted(targets)}")
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def store_cache_tags(store: "Store") -> list[str]:
    """Tags covering every cached read of a store row."""
    tags = [CacheTags.store(store.subdomain_slug), CacheTags.store_by_id(store.id)]
    if store.domain:
        tags.append(CacheTags.domain(store.domain))
    return tags
