from __future__ import annotations

import pytest

from fx_lira.accumulation import AccumulationInput, accumulate
from fx_lira.ingestion.models import (
    DEFAULT_INSTRUMENTS,
    CalculationRecord,
    EnrichedRateQuote,
    RateQuote,
    RateSnapshot,
)

VALID = {
    "start_amount": "10000",
    "daily_percent": "5",
    "days": "30",
    "total_result": "43219.42",
    "total_profit": "33219.42",
}


def test_payload_numbers_are_stringified() -> None:
    record = CalculationRecord.from_payload({**VALID, "start_amount": 10000, "days": 30})

    assert record.start_amount == "10000"
    assert record.days == "30"
    assert record.id is None


@pytest.mark.parametrize("missing", sorted(VALID))
def test_missing_field_is_rejected(missing: str) -> None:
    payload = {k: v for k, v in VALID.items() if k != missing}

    with pytest.raises(ValueError, match=missing):
        CalculationRecord.from_payload(payload)


@pytest.mark.parametrize(
    "field, value",
    [
        ("start_amount", "ten"),
        ("daily_percent", True),
        ("total_result", "nan"),
        ("total_profit", ["1"]),
        ("days", "2.5"),
        ("days", "-1"),
    ],
)
def test_invalid_values_are_rejected(field: str, value: object) -> None:
    with pytest.raises(ValueError, match=field):
        CalculationRecord.from_payload({**VALID, field: value})


def test_record_from_result() -> None:
    inputs = AccumulationInput(10_000, 5, 30)
    record = CalculationRecord.from_result(inputs, accumulate(10_000, 5, 30))

    assert record.days == "30"
    assert float(record.total_result) == pytest.approx(43219.42, abs=0.01)
    assert record.as_dict()["start_amount"] == "10000"


def test_direction_follows_buy_then_sell_change() -> None:
    base = dict(code="USD", name="Amerikan Doları", buy_rate=34.0, sell_rate=34.2)

    assert EnrichedRateQuote(**base, buy_change=0.1).direction == "up"
    assert EnrichedRateQuote(**base, sell_change=-0.1).direction == "down"
    assert EnrichedRateQuote(**base).direction == "flat"


def test_snapshot_by_code() -> None:
    usd = RateQuote("USD", "Amerikan Doları", 34.0, 34.2)
    snapshot = RateSnapshot(quotes=(usd,), source="evds")

    assert snapshot.by_code() == {"USD": usd}
    assert len(snapshot) == 1
    assert snapshot.fetched_at.tzinfo is not None


def test_default_instruments_use_tcmb_series() -> None:
    usd = DEFAULT_INSTRUMENTS[0]

    assert usd.code == "USD"
    assert (usd.buy_series, usd.sell_series) == ("TP.DK.USD.A", "TP.DK.USD.S")
    assert not any(instrument.is_metal for instrument in DEFAULT_INSTRUMENTS)
