"""Configuration objects."""

from .config import CacheConfig, RateLimitConfig, TTLGuardConfig

__all__ = [
    "CacheConfig",
    "RateLimitConfig",
    "TTLGuardConfig",
]
