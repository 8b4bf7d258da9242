from __future__ import annotations

import logging
import threading
import typing as t
from collections import OrderedDict
from dataclasses import dataclass

from ttlguard.core.clock import Clock, SystemClock
from ttlguard.core.errors import ConfigurationError, require_positive_int, validate_key
from ttlguard.monitoring.metrics import cache_evictions_total, cache_requests_total
from ttlguard.utils.config import CacheConfig

_logger = logging.getLogger(__name__)

_MISSING = object()


@dataclass(frozen=True)
class CacheEntry:
    value: t.Any
    expires_at: int  # epoch ms

    def is_expired(self, now_ms: int) -> bool:
        return now_ms >= self.expires_at


class TTLCache:
    """In-memory key/value cache with per-entry time-to-live.

    Expiry is lazy: an expired entry is dropped the next time it is read
    (or listed, or swept with ``purge_expired``). There is no background
    timer, so keys that are written and never read again stay in memory
    until ``clear``, ``purge_expired`` or capacity eviction removes them.

    When ``max_size`` is given the cache also tracks recency and evicts the
    least recently used entry on overflow.

    All operations hold a per-instance re-entrant lock.
    """

    def __init__(
        self,
        default_ttl_ms: int = 600_000,
        *,
        max_size: t.Optional[int] = None,
        clock: t.Optional[Clock] = None,
    ) -> None:
        self._default_ttl = require_positive_int(default_ttl_ms, "default_ttl_ms")
        if max_size is not None:
            require_positive_int(max_size, "max_size")
        self._max_size = max_size
        self._clock: Clock = clock or SystemClock()
        self._store: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, config: CacheConfig, clock: t.Optional[Clock] = None) -> "TTLCache":
        return cls(config.default_ttl_ms, max_size=config.max_size, clock=clock)

    @property
    def default_ttl_ms(self) -> int:
        return self._default_ttl

    @property
    def max_size(self) -> t.Optional[int]:
        return self._max_size

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def lock(self) -> threading.RLock:
        """The lock guarding this cache; hold it to make several calls atomic."""
        return self._lock

    def _resolve_ttl(self, ttl_ms: t.Any) -> int:
        if ttl_ms is None:
            return self._default_ttl
        if isinstance(ttl_ms, bool) or not isinstance(ttl_ms, int) or ttl_ms <= 0:
            _logger.warning("Invalid ttl_ms=%r, using default %d", ttl_ms, self._default_ttl)
            return self._default_ttl
        return ttl_ms

    def _lookup(self, key: str) -> t.Any:
        entry = self._store.get(key)
        if entry is None:
            cache_requests_total.inc(result="miss")
            return _MISSING
        if entry.is_expired(self._clock.now_ms()):
            del self._store[key]
            cache_requests_total.inc(result="expired")
            cache_evictions_total.inc(reason="expired")
            _logger.debug("Evicted expired key %s", key)
            return _MISSING
        if self._max_size is not None:
            # mark as recently used
            self._store.move_to_end(key)
        cache_requests_total.inc(result="hit")
        return entry.value

    def _store_entry(self, key: str, value: t.Any, ttl_ms: t.Any) -> None:
        expires_at = self._clock.now_ms() + self._resolve_ttl(ttl_ms)
        self._store[key] = CacheEntry(value=value, expires_at=expires_at)
        self._store.move_to_end(key)
        if self._max_size is None:
            return
        while len(self._store) > self._max_size:
            evicted, _ = self._store.popitem(last=False)
            cache_evictions_total.inc(reason="capacity")
            _logger.debug("Evicted LRU key %s", evicted)

    def get(self, key: str) -> t.Optional[t.Any]:
        validate_key(key)
        with self._lock:
            value = self._lookup(key)
        return None if value is _MISSING else value

    def set(self, key: str, value: t.Any, ttl_ms: t.Optional[int] = None) -> None:
        validate_key(key)
        with self._lock:
            self._store_entry(key, value, ttl_ms)

    def delete(self, key: str) -> bool:
        validate_key(key)
        with self._lock:
            entry = self._store.pop(key, None)
            # an expired entry was already gone as far as readers could tell
            return entry is not None and not entry.is_expired(self._clock.now_ms())

    def peek(self, key: str) -> t.Optional[t.Any]:
        """Like ``get`` but leaves recency and request metrics untouched.

        Expired entries are still dropped.
        """
        validate_key(key)
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock.now_ms()):
                del self._store[key]
                cache_evictions_total.inc(reason="expired")
                return None
            return entry.value

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def get_or_set(self, key: str, factory: t.Callable[[], t.Any], ttl_ms: t.Optional[int] = None) -> t.Any:
        """Return the cached value for ``key``, computing and storing it on a miss.

        ``factory`` runs with the lock held, so concurrent callers for the
        same key compute the value once. A cached ``None`` counts as a hit.
        """
        validate_key(key)
        with self._lock:
            value = self._lookup(key)
            if value is not _MISSING:
                return value
            value = factory()
            self._store_entry(key, value, ttl_ms)
            return value

    def invalidate(self, pattern: str) -> int:
        """Delete every key containing ``pattern``; returns how many were removed."""
        with self._lock:
            doomed = [key for key in self._store if pattern in key]
            for key in doomed:
                del self._store[key]
        if doomed:
            cache_evictions_total.inc(len(doomed), reason="invalidated")
            _logger.debug("Invalidated %d keys matching %r", len(doomed), pattern)
        return len(doomed)

    def purge_expired(self) -> int:
        with self._lock:
            now = self._clock.now_ms()
            expired = [key for key, entry in self._store.items() if entry.is_expired(now)]
            for key in expired:
                del self._store[key]
        if expired:
            cache_evictions_total.inc(len(expired), reason="expired")
        return len(expired)

    def keys(self) -> t.List[str]:
        with self._lock:
            self.purge_expired()
            return list(self._store)

    def __len__(self) -> int:
        with self._lock:
            self.purge_expired()
            return len(self._store)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        with self._lock:
            entry = self._store.get(key)
            return entry is not None and not entry.is_expired(self._clock.now_ms())
