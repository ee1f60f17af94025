"""Secondary provider tests: inversion, spread and metal skipping."""

from __future__ import annotations

import math
from typing import Any

import pytest
import requests

from fx_lira.exceptions import InvalidNumericInput, ProviderUnavailable
from fx_lira.ingestion.exchangerate_api import (
    DEFAULT_SPREAD,
    ExchangeRateAPIProvider,
    two_sided_from_mid,
)
from fx_lira.ingestion.models import Instrument


class _DummyResponse:
    def __init__(self, payload: Any = None, *, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code
        self.text = ""

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self) -> Any:
        return self._payload


class _DummySession:
    def __init__(self, response: _DummyResponse) -> None:
        self.headers: dict[str, str] = {}
        self.response = response
        self.urls: list[str] = []

    def get(self, url: str, **kwargs: Any) -> _DummyResponse:
        self.urls.append(url)
        return self.response


INSTRUMENTS = (
    Instrument("USD", "Amerikan Doları"),
    Instrument("EUR", "Euro"),
    Instrument("XAU", "Altın"),
    Instrument("CHF", "İsviçre Frangı"),
)


def _provider(payload: Any, status_code: int = 200) -> tuple[ExchangeRateAPIProvider, _DummySession]:
    session = _DummySession(_DummyResponse(payload, status_code=status_code))
    provider = ExchangeRateAPIProvider(instruments=INSTRUMENTS, session=session)  # type: ignore[arg-type]
    return provider, session


def test_rates_are_inverted_and_spread_symmetrically() -> None:
    provider, session = _provider({"rates": {"USD": 0.03125, "EUR": 0.025, "XAU": 0.0000125}})

    quotes = provider.fetch_quotes()

    assert session.urls == ["https://api.exchangerate-api.com/v4/latest/TRY"]
    assert [q.code for q in quotes] == ["USD", "EUR"]
    usd = quotes[0]
    assert usd.buy_rate == pytest.approx(32.0 * (1 - DEFAULT_SPREAD))
    assert usd.sell_rate == pytest.approx(32.0 * (1 + DEFAULT_SPREAD))
    assert usd.sell_rate - usd.buy_rate == pytest.approx(0.006 * 32.0)


@pytest.mark.parametrize("home_per_foreign", [0.03125, 0.0001, 1.7])
def test_spread_is_point_six_percent_of_mid(home_per_foreign: float) -> None:
    buy, sell = two_sided_from_mid(home_per_foreign)
    mid = 1 / home_per_foreign

    assert sell - buy == pytest.approx(0.006 * mid)
    assert (buy + sell) / 2 == pytest.approx(mid)


def test_invalid_currency_values_are_skipped() -> None:
    provider, _ = _provider({"rates": {"USD": 0, "EUR": "n/a", "CHF": 0.028}})

    assert [q.code for q in provider.fetch_quotes()] == ["CHF"]


@pytest.mark.parametrize(
    "payload, status_code",
    [
        ({"rates": {"XAU": 0.0001}}, 200),
        ({"result": "error"}, 200),
        ({"rates": {"USD": 0.03}}, 500),
    ],
)
def test_unusable_payload_raises_provider_unavailable(payload: Any, status_code: int) -> None:
    provider, _ = _provider(payload, status_code)

    with pytest.raises(ProviderUnavailable):
        provider.fetch_quotes()


def test_oversized_and_overflowing_rates_are_dropped() -> None:
    provider, _ = _provider({"rates": {"USD": int("9" * 400), "EUR": 5e-324, "CHF": 0.028}})

    quotes = provider.fetch_quotes()

    assert [q.code for q in quotes] == ["CHF"]
    assert all(math.isfinite(q.buy_rate) and math.isfinite(q.sell_rate) for q in quotes)


def test_only_unusable_magnitudes_make_the_tier_unavailable() -> None:
    provider, _ = _provider({"rates": {"USD": int("9" * 400), "EUR": 5e-324}})

    with pytest.raises(ProviderUnavailable, match="no valid rates"):
        provider.fetch_quotes()


def test_two_sided_from_mid_rejects_infinite_inverse() -> None:
    with pytest.raises(InvalidNumericInput):
        two_sided_from_mid(5e-324)
