"""Daily compound accumulation used by the interest calculator."""

from __future__ import annotations

import math
from dataclasses import dataclass

# Bounds the calculator form enforces; the engine itself accepts any value.
MIN_DAILY_RATE_PERCENT = 0.1
MAX_DAILY_RATE_PERCENT = 100.0
MIN_DAYS = 1
MAX_DAYS = 365


@dataclass(frozen=True, slots=True)
class AccumulationInput:
    """Inputs of a single calculation."""

    principal: float
    daily_rate_percent: float
    days: int


@dataclass(frozen=True, slots=True)
class AccumulationResult:
    """Final amount, absolute profit and profit percentage."""

    final_amount: float
    profit: float
    profit_percent: float


def accumulate(principal: float, daily_rate_percent: float, days: int) -> AccumulationResult:
    """Reinvest ``daily_rate_percent`` of the running amount once per day.

    Growth is applied iteratively rather than through ``(1 + r) ** n`` so the
    result matches simple per-day reinvestment. Negative rates decay the
    amount; ``-100`` wipes it out on the first day. The function never raises:
    NaN inputs come back as NaN amounts and validation is left to callers.
    ``profit_percent`` is 0 unless the principal is positive.
    """

    amount = principal
    for _ in range(days):
        amount = amount + amount * (daily_rate_percent / 100)

    profit = amount - principal
    if principal > 0:
        profit_percent = (profit / principal) * 100
    else:
        profit_percent = 0.0
    return AccumulationResult(final_amount=amount, profit=profit, profit_percent=profit_percent)


def accumulate_input(inputs: AccumulationInput) -> AccumulationResult:
    """Convenience wrapper around :func:`accumulate`."""

    return accumulate(inputs.principal, inputs.daily_rate_percent, inputs.days)


def validate_inputs(principal: float, daily_rate_percent: float, days: int) -> list[str]:
    """Return the calculator form's range violations (empty when valid)."""

    problems: list[str] = []
    if not math.isfinite(principal) or principal < 0:
        problems.append("principal must be a finite number >= 0")
    if not MIN_DAILY_RATE_PERCENT <= daily_rate_percent <= MAX_DAILY_RATE_PERCENT:
        problems.append(
            f"daily rate must be between {MIN_DAILY_RATE_PERCENT} and {MAX_DAILY_RATE_PERCENT}"
        )
    if not MIN_DAYS <= days <= MAX_DAYS:
        problems.append(f"days must be between {MIN_DAYS} and {MAX_DAYS}")
    return problems


__all__ = [
    "AccumulationInput",
    "AccumulationResult",
    "accumulate",
    "accumulate_input",
    "validate_inputs",
    "MIN_DAILY_RATE_PERCENT",
    "MAX_DAILY_RATE_PERCENT",
    "MIN_DAYS",
    "MAX_DAYS",
]
