"""Process-local read-through query cache with tag-based invalidation.

Entries expire after a TTL and carry a set of tags. Writes elsewhere in the
application invalidate the tags of the reads they affect, e.g. creating an
entry invalidates ``entries:{user_id}`` and ``dashboard:{user_id}``.

There is no locking: a stale read only means temporarily outdated data, the
database stays the source of truth.
"""

import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

import structlog

from core.config import settings

logger = structlog.get_logger()


class CacheTTL:
    """TTL presets in seconds."""

    SHORT = 30.0
    MEDIUM = 5 * 60.0
    LONG = 30 * 60.0


@dataclass(slots=True)
class CacheEntry:
    """A cached value with its expiry and tags."""

    value: Any
    created_at: float
    expires_at: float
    tags: frozenset[str] = frozenset()


@dataclass
class CacheStats:
    """Counters for the debug cache view."""

    entries: int = 0
    hits: int = 0
    misses: int = 0
    writes: int = 0
    evictions: int = 0
    expirations: int = 0
    invalidations: int = 0
    tags: list[str] = field(default_factory=list)

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class QueryCache:
    """In-memory key/value cache with expiry and invalidation tags."""

    def __init__(
        self,
        default_ttl: float = CacheTTL.MEDIUM,
        max_entries: int = 200,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._default_ttl = default_ttl
        self._max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._tag_index: dict[str, set[str]] = {}
        self._hits = 0
        self._misses = 0
        self._writes = 0
        self._evictions = 0
        self._expirations = 0
        self._invalidations = 0

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and entry.expires_at > self._clock()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the cached value, or ``default`` on a miss.

        An expired entry is dropped on access and counted as a miss.
        """
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return default

        if entry.expires_at <= self._clock():
            self._remove(key)
            self._expirations += 1
            self._misses += 1
            return default

        self._hits += 1
        return entry.value

    def set(
        self,
        key: str,
        value: Any,
        ttl: float | None = None,
        tags: Iterable[str] = (),
    ) -> None:
        """Store ``value`` under ``key``, replacing any previous entry."""
        ttl = self._default_ttl if ttl is None else ttl
        if ttl <= 0:
            raise ValueError("ttl must be positive")

        if key in self._entries:
            self._remove(key)
        elif len(self._entries) >= self._max_entries:
            self._evict_oldest(len(self._entries) - self._max_entries + 1)

        now = self._clock()
        entry = CacheEntry(
            value=value,
            created_at=now,
            expires_at=now + ttl,
            tags=frozenset(tags),
        )
        self._entries[key] = entry
        for tag in entry.tags:
            self._tag_index.setdefault(tag, set()).add(key)
        self._writes += 1

    def delete(self, key: str) -> bool:
        """Remove a single key. Returns whether it was present."""
        if key not in self._entries:
            return False
        self._remove(key)
        return True

    def invalidate(self, tag: str) -> int:
        """Remove every entry tagged with ``tag``; returns the count removed."""
        keys = self._tag_index.pop(tag, set())
        removed = 0
        for key in list(keys):
            if key in self._entries:
                self._remove(key)
                removed += 1
        self._invalidations += removed
        if removed:
            logger.debug("cache_invalidated", tag=tag, removed=removed)
        return removed

    def invalidate_many(self, tags: Iterable[str]) -> int:
        return sum(self.invalidate(tag) for tag in tags)

    def clear(self) -> None:
        self._entries.clear()
        self._tag_index.clear()

    def cleanup(self) -> int:
        """Drop all expired entries."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            self._remove(key)
        self._expirations += len(expired)
        return len(expired)

    async def get_or_load(
        self,
        key: str,
        loader: Callable[[], Awaitable[Any]],
        ttl: float | None = None,
        tags: Iterable[str] = (),
    ) -> Any:
        """Read-through lookup: await ``loader`` on a miss and cache its result."""
        sentinel = _MISSING
        value = self.get(key, sentinel)
        if value is not sentinel:
            return value

        value = await loader()
        self.set(key, value, ttl=ttl, tags=tags)
        return value

    def stats(self) -> CacheStats:
        return CacheStats(
            entries=len(self._entries),
            hits=self._hits,
            misses=self._misses,
            writes=self._writes,
            evictions=self._evictions,
            expirations=self._expirations,
            invalidations=self._invalidations,
            tags=sorted(self._tag_index),
        )

    def _remove(self, key: str) -> None:
        entry = self._entries.pop(key)
        for tag in entry.tags:
            keys = self._tag_index.get(tag)
            if keys is None:
                continue
            keys.discard(key)
            if not keys:
                del self._tag_index[tag]

    def _evict_oldest(self, count: int) -> None:
        # dicts keep insertion order and set() re-inserts on overwrite,
        # so the first keys are the oldest writes.
        for key in list(self._entries)[:count]:
            self._remove(key)
            self._evictions += 1


_MISSING = object()


def user_tag(resource: str, user_id: object) -> str:
    """Build the per-user invalidation tag for a resource."""
    return f"{resource}:{user_id}"


query_cache = QueryCache(
    default_ttl=settings.cache_default_ttl_seconds,
    max_entries=settings.cache_max_entries,
)
