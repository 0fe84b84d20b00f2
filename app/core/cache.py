"""
Process-local cache with per-key TTL and prefix invalidation.

Expired entries are never returned: lookups check expiry on read, and a background
sweep evicts them periodically so memory does not grow with dead keys.
The cache is best-effort. Backend failures are logged and treated as a miss.
"""

import asyncio
import math
import time
from typing import Any, Awaitable, Callable, Dict, List, NamedTuple, Optional, TypeVar

import structlog
from cachetools import TLRUCache

log = structlog.get_logger()

T = TypeVar("T")

_MISSING = object()


class CacheKeys:
    """Key namespaces. List keys share a prefix so one namespace can be dropped at once."""

    FORUMS = "forums"
    TOPICS = "topics"
    POSTS = "posts"
    COMMENTS = "comments"
    PAYMENTS = "payments"

    @staticmethod
    def list_key(namespace: str, parent_id: Optional[Any] = None) -> str:
        return f"{namespace}:list:{parent_id if parent_id is not None else 'all'}"

    @staticmethod
    def list_prefix(namespace: str) -> str:
        return f"{namespace}:list:"

    @staticmethod
    def item_key(namespace: str, item_id: Any) -> str:
        return f"{namespace}:item:{item_id}"

    @staticmethod
    def namespace_prefix(namespace: str) -> str:
        return f"{namespace}:"


class _Entry(NamedTuple):
    value: Any
    ttl: float


def _time_to_use(_key: str, entry: _Entry, now: float) -> float:
    return now + entry.ttl


class CacheLayer:
    """Key -> value store with per-key expiry, created once per process."""

    def __init__(
        self,
        default_ttl: float = 300,
        check_period: float = 120,
        max_size: int = 10000,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = default_ttl
        self.check_period = check_period
        self._store: TLRUCache = TLRUCache(maxsize=max_size, ttu=_time_to_use, timer=timer)
        self._hits = 0
        self._misses = 0
        self._sweeper: Optional[asyncio.Task] = None

    def get(self, key: str, default: Any = None) -> Any:
        """Return the live value for key, or default when absent or expired."""
        try:
            entry = self._store.get(key, _MISSING)
        except Exception:
            log.warning("cache.unavailable", op="get", key=key, exc_info=True)
            self._misses += 1
            return default
        if entry is _MISSING:
            self._misses += 1
            return default
        self._hits += 1
        return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> bool:
        """Store value under key. ttl=None uses the default; ttl=0 never expires."""
        if ttl is None:
            ttl = self.default_ttl
        try:
            self._store[key] = _Entry(value, math.inf if ttl == 0 else ttl)
        except Exception:
            log.warning("cache.unavailable", op="set", key=key, exc_info=True)
            return False
        return True

    def delete(self, key: str) -> int:
        try:
            return 0 if self._store.pop(key, _MISSING) is _MISSING else 1
        except Exception:
            log.warning("cache.unavailable", op="delete", key=key, exc_info=True)
            return 0

    def delete_by_prefix(self, prefix: str) -> int:
        """Drop every key that starts with prefix; other keys are left alone."""
        try:
            matching = [key for key in list(self._store.keys()) if key.startswith(prefix)]
            for key in matching:
                self._store.pop(key, None)
        except Exception:
            log.warning("cache.unavailable", op="delete_by_prefix", prefix=prefix, exc_info=True)
            return 0
        if matching:
            log.debug("cache.invalidated", prefix=prefix, count=len(matching))
        return len(matching)

    def flush_all(self) -> None:
        try:
            self._store.clear()
        except Exception:
            log.warning("cache.unavailable", op="flush_all", exc_info=True)
        self._hits = 0
        self._misses = 0

    def keys(self) -> List[str]:
        try:
            return [key for key in list(self._store.keys()) if key in self._store]
        except Exception:
            log.warning("cache.unavailable", op="keys", exc_info=True)
            return []

    def stats(self) -> Dict[str, int]:
        return {"hits": self._hits, "misses": self._misses, "keys": len(self.keys())}

    async def with_cache(
        self,
        key: str,
        producer: Callable[[], Awaitable[T]],
        ttl: Optional[float] = None,
    ) -> T:
        """
        Cache-aside read. On a hit the producer is not called; on a miss it is called once
        and its result stored. Concurrent misses on one key are not de-duplicated.
        """
        cached = self.get(key, _MISSING)
        if cached is not _MISSING:
            return cached
        fresh = await producer()
        self.set(key, fresh, ttl)
        return fresh

    def sweep(self) -> int:
        """Evict expired entries now. Returns how many were removed."""
        try:
            return len(self._store.expire())
        except Exception:
            log.warning("cache.unavailable", op="sweep", exc_info=True)
            return 0

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self.check_period)
            removed = self.sweep()
            if removed:
                log.debug("cache.swept", removed=removed)

    def start_sweeper(self) -> None:
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.create_task(self._sweep_forever())

    async def stop_sweeper(self) -> None:
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None
