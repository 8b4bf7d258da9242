"""ttlguard

In-process TTL key/value cache with a fixed-window rate limiter, a
request-coalescing lazy loader and a request batcher.

This package is self-contained and does not import non-stdlib dependencies.
"""

from .cache import CacheEntry, TTLCache
from .coalesce import LazyLoader, RequestBatcher
from .core import (
    Clock,
    ConfigurationError,
    InvalidKeyError,
    ManualClock,
    SystemClock,
    TTLGuardError,
)
from .limiter import RateLimiter, RateWindow
from .utils import CacheConfig, RateLimitConfig, TTLGuardConfig

__all__ = [
    "TTLCache",
    "CacheEntry",
    "RateLimiter",
    "RateWindow",
    "LazyLoader",
    "RequestBatcher",
    "Clock",
    "SystemClock",
    "ManualClock",
    "TTLGuardError",
    "ConfigurationError",
    "InvalidKeyError",
    "CacheConfig",
    "RateLimitConfig",
    "TTLGuardConfig",
]

__version__ = "0.1.0"
