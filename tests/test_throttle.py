from __future__ import annotations

import pytest

from fx_lira.exceptions import ThrottleError
from fx_lira.ingestion.throttle import MIN_FETCH_INTERVAL_MS, FetchThrottle, can_fetch


class _Clock:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


def test_can_fetch_refuses_inside_interval_and_rounds_wait_up() -> None:
    t = 1_700_000_000_000
    decision = can_fetch(t, t - 10_000, 15_000)

    assert decision.allowed is False
    assert decision.wait_seconds == 5


def test_can_fetch_allows_after_interval() -> None:
    t = 1_700_000_000_000

    assert can_fetch(t, t - 16_000, 15_000).allowed is True
    assert can_fetch(t, t - 15_000, 15_000).allowed is True


def test_can_fetch_allows_first_fetch() -> None:
    assert can_fetch(0, None).allowed is True


def test_partial_seconds_round_up() -> None:
    decision = can_fetch(10_000, 0, 15_000.5)

    assert decision.wait_seconds == 6


def test_fetch_throttle_records_attempts() -> None:
    clock = _Clock()
    throttle = FetchThrottle(clock=clock)

    throttle.acquire()
    assert throttle.last_fetch_ms == clock.now * 1000

    clock.now += 3
    with pytest.raises(ThrottleError) as excinfo:
        throttle.acquire()
    assert excinfo.value.wait_seconds == 12
    assert "12 saniye bekleyin" in str(excinfo.value)

    clock.now += 12
    throttle.acquire()
    assert throttle.check().allowed is False


def test_default_interval_is_fifteen_seconds() -> None:
    assert MIN_FETCH_INTERVAL_MS == 15_000
    assert FetchThrottle().min_interval_ms == 15_000
