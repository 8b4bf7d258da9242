"""Core primitives: clocks and errors."""

from .clock import Clock, ManualClock, SystemClock
from .errors import ConfigurationError, InvalidKeyError, TTLGuardError

__all__ = [
    "Clock",
    "SystemClock",
    "ManualClock",
    "TTLGuardError",
    "ConfigurationError",
    "InvalidKeyError",
]
