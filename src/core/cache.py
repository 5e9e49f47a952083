"""In-memory response cache with TTL expiry, bounded size and auto-pruning.

Entries are stored under the SHA-256 digest of the caller's logical key
and expire on a monotonic clock. When the store is full the least
recently accessed entry is evicted before a new key is inserted. A
background asyncio task can periodically drop expired entries.

All mutating methods are synchronous, so within one event loop no caller
ever observes a half-updated entry. The only suspension point is the
fetch inside `get_or_fetch`.
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
import time
from collections import OrderedDict
from dataclasses import asdict, dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from core.errors import CacheError, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ENTRIES = 1000
DEFAULT_TTL_MS = 3_600_000  # 1 hour
DEFAULT_PRUNE_INTERVAL_MS = 300_000  # 5 minutes

_MISSING = object()


def hash_key(key: str) -> str:
    """Return the fixed-size store key for a logical key."""
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def estimate_size(value: Any) -> int:
    """Approximate size of `value` in bytes via its JSON encoding (0 if unserializable)."""
    try:
        return len(json.dumps(value, ensure_ascii=False).encode("utf-8"))
    except (TypeError, ValueError, RecursionError):
        return 0


@dataclass(slots=True)
class CacheEntry:
    key: str  # logical key, kept for pattern invalidation
    data: Any
    expires_at: float  # clock() seconds
    last_accessed_at: float
    size_bytes: int


@dataclass(frozen=True)
class CacheStats:
    size: int
    max_size: int
    total_size_bytes: int
    hits: int
    misses: int
    evictions: int
    hit_rate: float  # percent
    utilization_rate: float  # percent

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ResponseCache:
    """Bounded TTL cache keyed by hashed logical keys.

    Parameters:
      - max_entries: capacity bound (default 1000).
      - default_ttl_ms: TTL used when `set`/`get_or_fetch` get no ttl (default 1 hour).
      - clock: monotonic time source in seconds (default time.monotonic).
    """

    def __init__(
        self,
        *,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        default_ttl_ms: float = DEFAULT_TTL_MS,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._max_entries = max(1, int(max_entries))
        self._default_ttl_ms = _check_ttl(default_ttl_ms)
        self._clock = clock or time.monotonic

        # Iteration order follows access order (move_to_end on every touch)
        self._store: "OrderedDict[str, CacheEntry]" = OrderedDict()

        self._hits = 0
        self._misses = 0
        self._evictions = 0

        self._prune_task: Optional[asyncio.Task[None]] = None

    def __len__(self) -> int:
        return len(self._store)

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def default_ttl_ms(self) -> float:
        return self._default_ttl_ms

    # --- Core operations ---

    def get(self, key: str, default: Any = None) -> Any:
        hashed = hash_key(key)
        entry = self._store.get(hashed)
        if entry is None:
            self._misses += 1
            logger.debug("Cache miss key=%s", key)
            return default

        now = self._clock()
        if now >= entry.expires_at:
            del self._store[hashed]
            self._misses += 1
            logger.debug("Cache expired key=%s", key)
            return default

        self._hits += 1
        entry.last_accessed_at = now
        self._store.move_to_end(hashed, last=True)
        logger.debug("Cache hit key=%s", key)
        return entry.data

    def set(self, key: str, value: Any, ttl_ms: Optional[float] = None) -> None:
        ttl = self._default_ttl_ms if ttl_ms is None else _check_ttl(ttl_ms)
        hashed = hash_key(key)

        # Overwriting an existing key never grows the store
        if hashed not in self._store and len(self._store) >= self._max_entries:
            self._evict_one()

        now = self._clock()
        self._store[hashed] = CacheEntry(
            key=key,
            data=value,
            expires_at=now + ttl / 1000.0,
            last_accessed_at=now,
            size_bytes=estimate_size(value),
        )
        self._store.move_to_end(hashed, last=True)
        logger.debug("Cache set key=%s ttl_ms=%s", key, ttl)

    def delete(self, key: str) -> bool:
        removed = self._store.pop(hash_key(key), None) is not None
        if removed:
            logger.debug("Cache deleted key=%s", key)
        return removed

    def clear(self) -> None:
        # evictions is a lifetime counter and survives clear()
        removed = len(self._store)
        self._store.clear()
        self._hits = 0
        self._misses = 0
        logger.info("Cache cleared entries_removed=%d", removed)

    def prune(self) -> int:
        now = self._clock()
        expired = [h for h, entry in self._store.items() if now >= entry.expires_at]
        for hashed in expired:
            del self._store[hashed]

        if expired:
            logger.info("Cache pruned entries_removed=%d", len(expired))
        return len(expired)

    def invalidate_pattern(self, substring: str) -> int:
        """Remove entries whose logical key contains `substring`.

        Matching runs against the logical key kept on each entry, not the
        hash. An empty substring removes nothing.
        """
        if not substring:
            return 0

        matched = [h for h, entry in self._store.items() if substring in entry.key]
        for hashed in matched:
            del self._store[hashed]

        if matched:
            logger.info("Cache invalidated pattern=%s entries_removed=%d", substring, len(matched))
        return len(matched)

    def stats(self) -> CacheStats:
        size = len(self._store)
        accesses = self._hits + self._misses
        hit_rate = (self._hits / accesses * 100) if accesses else 0.0
        return CacheStats(
            size=size,
            max_size=self._max_entries,
            total_size_bytes=sum(entry.size_bytes for entry in self._store.values()),
            hits=self._hits,
            misses=self._misses,
            evictions=self._evictions,
            hit_rate=round(hit_rate, 2),
            utilization_rate=round(size / self._max_entries * 100, 2),
        )

    async def get_or_fetch(
        self,
        key: str,
        fetch_fn: Callable[[], Awaitable[T]],
        ttl_ms: Optional[float] = None,
    ) -> T:
        """Return the cached value for `key`, or await `fetch_fn` and cache its result.

        Concurrent misses on the same key are not coalesced; each caller
        runs its own fetch. A failing fetch raises CacheError and leaves
        the key absent so the next call retries.
        """
        cached = self.get(key, _MISSING)
        if cached is not _MISSING:
            return cached

        try:
            data = await fetch_fn()
        except Exception as e:
            logger.error("Cache fetch failed key=%s error=%s", key, e)
            raise CacheError(key, e) from e

        self.set(key, data, ttl_ms)
        return data

    # --- Background pruning ---

    @property
    def auto_prune_running(self) -> bool:
        return self._prune_task is not None and not self._prune_task.done()

    def start_auto_prune(self, interval_ms: int = DEFAULT_PRUNE_INTERVAL_MS) -> None:
        """Start a background task calling prune() every `interval_ms`.

        Must be called from a running event loop. A second call while the
        task is alive only logs a warning.
        """
        if self.auto_prune_running:
            logger.warning("Auto-prune already running")
            return

        if interval_ms <= 0:
            raise ValidationError("interval_ms must be positive")

        loop = asyncio.get_running_loop()
        self._prune_task = loop.create_task(
            self._prune_loop(interval_ms / 1000.0),
            name="response-cache-auto-prune",
        )
        logger.info("Auto-prune started interval_ms=%s", interval_ms)

    def stop_auto_prune(self) -> None:
        task = self._prune_task
        if task is None:
            return

        self._prune_task = None
        task.cancel()
        logger.info("Auto-prune stopped")

    async def _prune_loop(self, interval_seconds: float) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            # Let already-queued callbacks run before the scan
            await asyncio.sleep(0)
            self.prune()

    # --- Internals ---

    def _evict_one(self) -> None:
        # min() keeps the first of equal timestamps, i.e. the oldest in access order
        victim, _ = min(self._store.items(), key=lambda item: item[1].last_accessed_at)
        del self._store[victim]
        self._evictions += 1
        logger.debug("Cache evicted hashed_key=%s", victim)


def _check_ttl(ttl_ms: float) -> float:
    # Fractional milliseconds are kept; NaN fails the comparison below
    ttl = float(ttl_ms)
    if not ttl >= 0:
        raise ValidationError("ttl_ms must be a non-negative number")
    return ttl
