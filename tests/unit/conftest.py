"""Shared fixtures for unit tests."""

from __future__ import annotations

import pytest

from ttlguard.cache.ttl_cache import TTLCache
from ttlguard.core.clock import ManualClock
from ttlguard.limiter.rate_limiter import RateLimiter
from ttlguard.monitoring import metrics


@pytest.fixture
def clock():
    """Virtual clock starting at a fixed epoch-ms timestamp."""
    return ManualClock(start_ms=1_700_000_000_000)


@pytest.fixture
def cache(clock):
    """Unbounded cache with a 1s default TTL on the virtual clock."""
    return TTLCache(1000, clock=clock)


@pytest.fixture
def limiter(clock):
    """Limiter admitting 3 requests per 1s window."""
    return RateLimiter(max_requests=3, window_ms=1000, clock=clock)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Start every test with empty counters."""
    for counter in (
        metrics.cache_requests_total,
        metrics.cache_evictions_total,
        metrics.rate_limit_decisions_total,
    ):
        counter.reset()
    yield
