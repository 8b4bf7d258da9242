from __future__ import annotations

import typing as t


class TTLGuardError(Exception):
    """Base class for errors raised by ttlguard."""


class ConfigurationError(TTLGuardError, ValueError):
    """Raised at construction time for invalid settings."""


class InvalidKeyError(TTLGuardError, ValueError):
    """Raised when a key or identifier is empty or not a string."""


def validate_key(key: t.Any, kind: str = "key") -> str:
    if not isinstance(key, str):
        raise InvalidKeyError(f"{kind} must be a string, got {type(key).__name__}")
    if not key:
        raise InvalidKeyError(f"{kind} must be non-empty")
    return key


def require_positive_int(value: t.Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
    return value
