from __future__ import annotations

import logging
import typing as t
from dataclasses import dataclass

from ttlguard.cache.ttl_cache import TTLCache
from ttlguard.core.clock import Clock
from ttlguard.core.errors import ConfigurationError, require_positive_int, validate_key
from ttlguard.monitoring.metrics import rate_limit_decisions_total
from ttlguard.utils.config import RateLimitConfig

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateWindow:
    count: int
    window_start: int  # epoch ms


class RateLimiter:
    """Fixed-window request counter keyed by an opaque identifier.

    Windows live in a ``TTLCache`` under ``{prefix}:{identifier}``; each entry
    expires when its window does, so idle identifiers are forgotten. The
    check-and-increment runs under the cache's lock.

    Fixed windows can admit up to ``2 * max_requests`` across a boundary.
    """

    def __init__(
        self,
        max_requests: int,
        window_ms: int,
        *,
        cache: t.Optional[TTLCache] = None,
        clock: t.Optional[Clock] = None,
        prefix: str = "ratelimit",
    ) -> None:
        self._max_requests = require_positive_int(max_requests, "max_requests")
        self._window_ms = require_positive_int(window_ms, "window_ms")
        if cache is not None and cache.max_size is not None:
            # LRU eviction would forget active windows and re-admit callers
            raise ConfigurationError("rate limiter needs an unbounded cache (max_size=None)")
        # An injected cache brings its own clock.
        self._cache = cache if cache is not None else TTLCache(window_ms, clock=clock)
        self._prefix = prefix.rstrip(":")

    @classmethod
    def from_config(
        cls,
        config: RateLimitConfig,
        *,
        cache: t.Optional[TTLCache] = None,
        clock: t.Optional[Clock] = None,
    ) -> "RateLimiter":
        return cls(config.max_requests, config.window_ms, cache=cache, clock=clock)

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def window_ms(self) -> int:
        return self._window_ms

    def _key(self, identifier: str) -> str:
        return f"{self._prefix}:{identifier}"

    def _active_window(self, key: str, now: int) -> t.Optional[RateWindow]:
        window = self._cache.peek(key)
        if window is None or now - window.window_start >= self._window_ms:
            return None
        return window

    def is_allowed(self, identifier: str) -> bool:
        validate_key(identifier, "identifier")
        key = self._key(identifier)
        with self._cache.lock:
            now = self._cache.clock.now_ms()
            window = self._active_window(key, now)
            if window is None:
                self._cache.set(key, RateWindow(count=1, window_start=now), self._window_ms)
                allowed = True
            elif window.count < self._max_requests:
                remaining_ms = window.window_start + self._window_ms - now
                self._cache.set(key, RateWindow(window.count + 1, window.window_start), remaining_ms)
                allowed = True
            else:
                allowed = False

        if allowed:
            rate_limit_decisions_total.inc(decision="allowed")
        else:
            rate_limit_decisions_total.inc(decision="rejected")
            _logger.debug("Rate limit exceeded for %s", identifier)
        return allowed

    def remaining(self, identifier: str) -> int:
        """How many more calls ``identifier`` may make in its current window."""
        validate_key(identifier, "identifier")
        with self._cache.lock:
            window = self._active_window(self._key(identifier), self._cache.clock.now_ms())
        if window is None:
            return self._max_requests
        return max(self._max_requests - window.count, 0)

    def reset(self, identifier: str) -> bool:
        validate_key(identifier, "identifier")
        return self._cache.delete(self._key(identifier))
