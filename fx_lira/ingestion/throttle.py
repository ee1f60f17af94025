"""Minimum-interval gate in front of upstream rate fetches."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Callable, Final

from fx_lira.exceptions import ThrottleError

MIN_FETCH_INTERVAL_MS: Final[int] = 15_000


@dataclass(frozen=True, slots=True)
class ThrottleDecision:
    allowed: bool
    wait_seconds: int = 0


def can_fetch(
    now_ms: float, last_fetch_ms: float | None, min_interval_ms: float = MIN_FETCH_INTERVAL_MS
) -> ThrottleDecision:
    """Decide whether a fetch may run at ``now_ms``.

    ``wait_seconds`` is ``ceil((min_interval_ms - elapsed) / 1000)`` when the
    fetch is refused.
    """

    if last_fetch_ms is None:
        return ThrottleDecision(allowed=True)
    elapsed = now_ms - last_fetch_ms
    if elapsed >= min_interval_ms:
        return ThrottleDecision(allowed=True)
    return ThrottleDecision(allowed=False, wait_seconds=math.ceil((min_interval_ms - elapsed) / 1000))


class FetchThrottle:
    """Owns ``last_fetch_ms`` for one rate-fetching component.

    Every trigger (timer, refocus, explicit refresh) goes through
    :meth:`acquire`, which records the attempt when it is allowed. State only
    resets with a new instance.
    """

    def __init__(
        self,
        min_interval_ms: float = MIN_FETCH_INTERVAL_MS,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.min_interval_ms = min_interval_ms
        self._clock = clock
        self.last_fetch_ms: float | None = None

    def _now_ms(self) -> float:
        return self._clock() * 1000

    def check(self) -> ThrottleDecision:
        return can_fetch(self._now_ms(), self.last_fetch_ms, self.min_interval_ms)

    def acquire(self) -> None:
        """Record a fetch attempt or raise :class:`ThrottleError`."""

        now_ms = self._now_ms()
        decision = can_fetch(now_ms, self.last_fetch_ms, self.min_interval_ms)
        if not decision.allowed:
            raise ThrottleError(decision.wait_seconds)
        self.last_fetch_ms = now_ms


__all__ = [
    "MIN_FETCH_INTERVAL_MS",
    "ThrottleDecision",
    "can_fetch",
    "FetchThrottle",
]
