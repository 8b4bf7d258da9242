from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class CacheConfig:
    default_ttl_ms: int = 600_000
    max_size: Optional[int] = None  # None = unbounded, expiry by time only


@dataclass
class RateLimitConfig:
    max_requests: int = 100
    window_ms: int = 60_000


@dataclass
class TTLGuardConfig:
    cache: CacheConfig = dataclasses.field(default_factory=CacheConfig)
    rate_limit: RateLimitConfig = dataclasses.field(default_factory=RateLimitConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TTLGuardConfig":
        def build(dc_cls, key):
            values = data.get(key) or {}
            return dc_cls(**values)

        return cls(
            cache=build(CacheConfig, "cache"),
            rate_limit=build(RateLimitConfig, "rate_limit"),
        )
