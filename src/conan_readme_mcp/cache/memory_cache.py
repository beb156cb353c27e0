from __future__ import annotations

import asyncio
import json
import logging
import time
import typing as t
from collections import OrderedDict
from dataclasses import dataclass

logger = logging.getLogger(__name__)

T = t.TypeVar("T")

DEFAULT_TTL_SECONDS = 3600.0
DEFAULT_MAX_SIZE_BYTES = 100 * 1024 * 1024
DEFAULT_CLEANUP_INTERVAL_SECONDS = 300.0

# timestamp + ttl + object overhead
ENTRY_OVERHEAD_BYTES = 24
# value estimate used when the payload cannot be JSON-serialised
FALLBACK_VALUE_BYTES = 1024


@dataclass
class CacheEntry(t.Generic[T]):
    value: T
    stored_at: float
    ttl: float
    size: int

    def is_expired(self, now: float) -> bool:
        return now - self.stored_at > self.ttl


def estimate_entry_size(key: str, value: t.Any) -> int:
    """Rough footprint of one entry: UTF-16 widths of key and JSON payload plus overhead."""
    try:
        value_size = len(json.dumps(value, ensure_ascii=False)) * 2
    except (TypeError, ValueError, RecursionError):
        value_size = FALLBACK_VALUE_BYTES
    return len(key) * 2 + value_size + ENTRY_OVERHEAD_BYTES


class MemoryCache:
    """LRU + TTL cache bounded by an estimated byte ceiling.

    Recency lives in the ``OrderedDict`` order: entries move to the end on
    ``set`` and on a ``get`` hit, so the head is always the entry with the
    oldest ``stored_at``. None of the methods await, which keeps every
    check-then-mutate sequence atomic on a single event loop.

    Expired entries are dropped lazily on read and by a periodic sweep that
    the owner starts with :meth:`start` and stops with :meth:`destroy`.
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        max_size_bytes: int = DEFAULT_MAX_SIZE_BYTES,
        cleanup_interval: float = DEFAULT_CLEANUP_INTERVAL_SECONDS,
        clock: t.Callable[[], float] = time.monotonic,
    ) -> None:
        self._store: "OrderedDict[str, CacheEntry[t.Any]]" = OrderedDict()
        self._default_ttl = default_ttl
        self._max_size = max_size_bytes
        self._cleanup_interval = cleanup_interval
        self._clock = clock
        self._total_size = 0
        self._sweep_task: t.Optional[asyncio.Task[None]] = None
        self._destroyed = False

    @property
    def default_ttl(self) -> float:
        return self._default_ttl

    @property
    def max_size_bytes(self) -> int:
        return self._max_size

    def get(self, key: str) -> t.Optional[t.Any]:
        entry = self._store.get(key)
        if entry is None:
            logger.debug("Cache miss: %s", key)
            return None
        now = self._clock()
        if entry.is_expired(now):
            self._remove(key)
            logger.debug("Cache expired: %s", key)
            return None
        # mark as recently used
        entry.stored_at = now
        self._store.move_to_end(key)
        logger.debug("Cache hit: %s", key)
        return entry.value

    def set(self, key: str, value: t.Any, ttl: t.Optional[float] = None) -> None:
        actual_ttl = self._default_ttl if ttl is None else ttl
        size = estimate_entry_size(key, value)
        self._remove(key)
        while self._store and self._total_size + size > self._max_size:
            self._evict_oldest()
        self._store[key] = CacheEntry(value=value, stored_at=self._clock(), ttl=actual_ttl, size=size)
        self._total_size += size
        logger.debug("Cache set: %s (ttl=%ss, size=%d)", key, actual_ttl, size)

    def has(self, key: str) -> bool:
        entry = self._store.get(key)
        if entry is None:
            return False
        if entry.is_expired(self._clock()):
            self._remove(key)
            return False
        return True

    def delete(self, key: str) -> bool:
        deleted = self._remove(key)
        if deleted:
            logger.debug("Cache deleted: %s", key)
        return deleted

    def clear(self) -> None:
        self._store.clear()
        self._total_size = 0
        logger.info("Cache cleared")

    def size(self) -> int:
        return len(self._store)

    def memory_usage(self) -> int:
        return self._total_size

    def get_stats(self) -> t.Dict[str, t.Any]:
        # hit-rate tracking is not implemented; lookups are counted in monitoring.metrics
        return {"size": len(self._store), "memory_usage": self._total_size, "hit_rate": 0.0}

    def cleanup(self) -> int:
        """Drop every expired entry. Returns the number removed."""
        now = self._clock()
        expired = [key for key, entry in self._store.items() if entry.is_expired(now)]
        for key in expired:
            self._remove(key)
        if expired:
            logger.debug("Cache cleanup: removed %d expired entries", len(expired))
        return len(expired)

    def start(self) -> None:
        """Schedule the periodic sweep on the running event loop."""
        if self._destroyed:
            raise RuntimeError("cache has been destroyed")
        if self._sweep_task is not None and not self._sweep_task.done():
            return
        self._sweep_task = asyncio.get_running_loop().create_task(self._sweep_loop())

    def destroy(self) -> None:
        if self._destroyed:
            return
        self._destroyed = True
        if self._sweep_task is not None:
            self._sweep_task.cancel()
            self._sweep_task = None
        self._store.clear()
        self._total_size = 0
        logger.info("Cache destroyed")

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self._cleanup_interval)
            self.cleanup()

    def _evict_oldest(self) -> None:
        key, entry = self._store.popitem(last=False)
        self._total_size -= entry.size
        logger.debug("Cache LRU eviction: %s", key)

    def _remove(self, key: str) -> bool:
        entry = self._store.pop(key, None)
        if entry is None:
            return False
        self._total_size -= entry.size
        return True

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)
