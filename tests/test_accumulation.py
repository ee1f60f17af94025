from __future__ import annotations

import math

import pytest

from fx_lira.accumulation import (
    AccumulationInput,
    accumulate,
    accumulate_input,
    validate_inputs,
)


def test_thirty_days_at_five_percent_matches_reference_values() -> None:
    result = accumulate(10000, 5, 30)

    assert result.final_amount == pytest.approx(43219.42, abs=0.01)
    assert result.profit == pytest.approx(33219.42, abs=0.01)
    assert result.profit_percent == pytest.approx(332.19, abs=0.01)


@pytest.mark.parametrize("principal", [0.0, 1.0, 2500.5, 10000.0])
def test_zero_days_returns_principal_unchanged(principal: float) -> None:
    result = accumulate(principal, 7.5, 0)

    assert result.final_amount == principal
    assert result.profit == 0
    assert result.profit_percent == 0


@pytest.mark.parametrize("rate, days", [(5, 30), (-3, 10), (100, 365)])
def test_zero_principal_never_divides_by_zero(rate: float, days: int) -> None:
    result = accumulate(0, rate, days)

    assert result.final_amount == 0
    assert result.profit == 0
    assert result.profit_percent == 0


def test_minus_one_hundred_percent_wipes_out_on_first_day() -> None:
    result = accumulate(10000, -100, 5)

    assert result.final_amount == 0
    assert result.profit == -10000
    assert result.profit_percent == -100


def test_negative_rate_decays_amount() -> None:
    result = accumulate(1000, -10, 2)

    assert result.final_amount == pytest.approx(810.0)
    assert result.profit < 0


def test_iteration_tracks_closed_form_for_documented_range() -> None:
    result = accumulate(1234.56, 0.7, 365)

    assert result.final_amount == pytest.approx(1234.56 * 1.007**365, rel=1e-9)


def test_nan_inputs_propagate_instead_of_raising() -> None:
    by_rate = accumulate(1000, math.nan, 3)
    by_principal = accumulate(math.nan, 5, 3)

    assert math.isnan(by_rate.final_amount)
    assert math.isnan(by_rate.profit_percent)
    assert math.isnan(by_principal.final_amount)
    assert math.isnan(by_principal.profit)
    assert by_principal.profit_percent == 0


def test_accumulate_input_wraps_plain_function() -> None:
    inputs = AccumulationInput(principal=500, daily_rate_percent=1, days=2)

    assert accumulate_input(inputs) == accumulate(500, 1, 2)


def test_validate_inputs_reports_form_ranges() -> None:
    assert validate_inputs(10000, 5, 30) == []
    problems = validate_inputs(-1, 0.05, 400)
    assert len(problems) == 3
    assert any("days" in problem for problem in problems)
