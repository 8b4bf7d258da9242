"""Unit tests for clocks."""

import time

import pytest

from ttlguard.core.clock import ManualClock, SystemClock


class TestSystemClock:
    def test_tracks_wall_clock_in_ms(self):
        before = int(time.time() * 1000)
        now = SystemClock().now_ms()
        after = int(time.time() * 1000)
        assert before <= now <= after


class TestManualClock:
    def test_starts_where_told(self):
        assert ManualClock().now_ms() == 0
        assert ManualClock(start_ms=42).now_ms() == 42

    def test_advance(self):
        clock = ManualClock(start_ms=100)
        assert clock.advance(250) == 350
        assert clock.now_ms() == 350

    def test_advance_rejects_negative(self):
        clock = ManualClock(start_ms=100)
        with pytest.raises(ValueError):
            clock.advance(-1)
        assert clock.now_ms() == 100

    def test_set(self):
        clock = ManualClock()
        clock.set(5000)
        assert clock.now_ms() == 5000
