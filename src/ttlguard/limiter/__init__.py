from .rate_limiter import RateLimiter, RateWindow

__all__ = ["RateLimiter", "RateWindow"]
