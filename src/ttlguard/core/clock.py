from __future__ import annotations

import time
import typing as t


class Clock(t.Protocol):
    def now_ms(self) -> int:  # pragma: no cover - interface
        ...


class SystemClock:
    """Wall clock in epoch milliseconds."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)


class ManualClock:
    """Virtual clock for tests and simulations.

    Time only moves when ``advance`` or ``set`` is called.
    """

    def __init__(self, start_ms: int = 0) -> None:
        self._now = start_ms

    def now_ms(self) -> int:
        return self._now

    def advance(self, ms: int) -> int:
        if ms < 0:
            raise ValueError("cannot move a clock backwards")
        self._now += ms
        return self._now

    def set(self, ms: int) -> None:
        self._now = ms
