from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass
class Counter:
    name: str
    help: str
    values: Dict[Tuple, float] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def inc(self, value: float = 1.0, **labels: Any) -> None:
        key = tuple(sorted(labels.items()))
        with self._lock:
            self.values[key] = self.values.get(key, 0.0) + value

    def get(self, **labels: Any) -> float:
        return self.values.get(tuple(sorted(labels.items())), 0.0)

    def reset(self) -> None:
        with self._lock:
            self.values.clear()


# Predefined metrics
cache_requests_total = Counter("ttlguard_cache_requests_total", "Cache lookups by result (hit/miss/expired)")
cache_evictions_total = Counter("ttlguard_cache_evictions_total", "Entries removed by reason")
rate_limit_decisions_total = Counter("ttlguard_rate_limit_decisions_total", "Rate limiter decisions")
