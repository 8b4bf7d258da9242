from .metrics import Counter, cache_evictions_total, cache_requests_total, rate_limit_decisions_total

__all__ = [
    "Counter",
    "cache_requests_total",
    "cache_evictions_total",
    "rate_limit_decisions_total",
]
