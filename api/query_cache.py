"""
Client-side cache of server responses.

Keys are tuples whose first element names the resource, e.g.
("invoices", (("page", 1), ("status", "SENT"))) or ("invoice", "42").
Mutations drop every entry under a prefix so the next read refetches.
"""

import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Hashable, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

CacheKey = Tuple[Hashable, ...]

DEFAULT_STALE_SECONDS = 30.0
DEFAULT_IDLE_SECONDS = 60.0 * 60
DEFAULT_MAX_CACHES = 1000


def _freeze(value: Any) -> Hashable:
    if isinstance(value, Mapping):
        return normalize_params(value)
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def normalize_params(params: Optional[Mapping[str, Any]]) -> Tuple[Tuple[str, Hashable], ...]:
    """Sorted, hashable params with empty values dropped, so equal filters share an entry."""
    if not params:
        return ()
    return tuple(
        (str(key), _freeze(value))
        for key, value in sorted(params.items(), key=lambda item: str(item[0]))
        if value is not None and value != "" and value != [] and value != ()
    )


def make_key(resource: str, *parts: Any, params: Optional[Mapping[str, Any]] = None) -> CacheKey:
    """Build a cache key from a resource name, optional id parts and params."""
    key: Tuple[Hashable, ...] = (resource,) + tuple(str(p) for p in parts)
    if params is not None:
        key += (normalize_params(params),)
    return key


class QueryCache:
    """
    Stale-while-refetch cache for one console session.

    Args:
        stale_seconds: Age after which an entry is refetched; 0 disables caching
        clock: Monotonic time source, injectable for tests
    """

    def __init__(self, stale_seconds: float = DEFAULT_STALE_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        self.stale_seconds = stale_seconds
        self._clock = clock
        self._entries: Dict[CacheKey, Tuple[float, Any]] = {}
        self._lock = threading.RLock()

    def get(self, key: CacheKey) -> Optional[Any]:
        """Fresh cached value for key, or None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._clock() - stored_at >= self.stale_seconds:
                return None
            return value

    def set(self, key: CacheKey, value: Any) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), value)

    def fetch(self, key: CacheKey, fetcher: Callable[[], Any]) -> Any:
        """
        Return the cached value for key, calling fetcher when missing or stale.

        A failing fetcher leaves the cache untouched and its error propagates.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._clock() - entry[0] < self.stale_seconds:
                logger.debug(f"Cache hit: {key[0]}")
                return entry[1]

        logger.debug(f"Cache miss: {key[0]}")
        value = fetcher()
        self.set(key, value)
        return value

    def invalidate(self, *prefix: Hashable) -> int:
        """
        Drop every entry whose key starts with prefix.

        Returns:
            Number of entries dropped
        """
        size = len(prefix)
        with self._lock:
            stale = [key for key in self._entries if key[:size] == tuple(prefix)]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug(f"Invalidated {len(stale)} cache entries under {prefix}")
        return len(stale)

    def invalidate_all(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.info("Query cache cleared")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: CacheKey) -> bool:
        return self.get(key) is not None


class CacheRegistry:
    """
    One QueryCache per console session id, held in process memory.

    Caches unused for idle_seconds are dropped, and past max_caches the least
    recently used one is evicted.
    """

    def __init__(self, stale_seconds: float = DEFAULT_STALE_SECONDS,
                 idle_seconds: float = DEFAULT_IDLE_SECONDS, max_caches: int = DEFAULT_MAX_CACHES,
                 clock: Callable[[], float] = time.monotonic):
        self.stale_seconds = stale_seconds
        self.idle_seconds = idle_seconds
        self.max_caches = max_caches
        self._clock = clock
        self._caches: "OrderedDict[str, Tuple[float, QueryCache]]" = OrderedDict()
        self._lock = threading.Lock()

    def for_session(self, session_id: str) -> QueryCache:
        with self._lock:
            now = self._clock()
            entry = self._caches.get(session_id)
            cache = entry[1] if entry is not None and now - entry[0] <= self.idle_seconds else None
            if cache is None:
                cache = QueryCache(stale_seconds=self.stale_seconds)
            self._caches[session_id] = (now, cache)
            self._caches.move_to_end(session_id)
            self._prune(now)
            return cache

    def discard(self, session_id: str) -> None:
        with self._lock:
            self._caches.pop(session_id, None)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'CacheRegistry':
        """Registry sized by the `cache` config section."""
        cache_config = config.get("cache", {})
        return cls(
            stale_seconds=float(cache_config.get("stale_seconds", DEFAULT_STALE_SECONDS)),
            idle_seconds=float(cache_config.get("idle_seconds", DEFAULT_IDLE_SECONDS)),
            max_caches=int(cache_config.get("max_sessions", DEFAULT_MAX_CACHES)),
        )

    def _prune(self, now: float) -> None:
        idle = [sid for sid, (used_at, _) in self._caches.items() if now - used_at > self.idle_seconds]
        for sid in idle:
            del self._caches[sid]
        while len(self._caches) > self.max_caches:
            self._caches.popitem(last=False)
        if idle:
            logger.debug(f"Dropped {len(idle)} idle session caches")

    def __len__(self) -> int:
        with self._lock:
            return len(self._caches)
