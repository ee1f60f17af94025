"""Secondary provider: public spot rates with a synthetic buy/sell spread."""

from __future__ import annotations

import math
from typing import Any, Final, Mapping, Sequence

import requests

from fx_lira.exceptions import InvalidNumericInput, ProviderUnavailable
from fx_lira.ingestion.models import DEFAULT_INSTRUMENTS, Instrument, RateQuote
from fx_lira.ingestion.strategy import HTTPQuoteProvider, parse_positive_rate
from fx_lira.utils.logger import get_logger

LOGGER = get_logger(__name__)

EXCHANGERATE_API_URL = "https://api.exchangerate-api.com/v4/latest"
HOME_CURRENCY: Final[str] = "TRY"
DEFAULT_SPREAD: Final[float] = 0.003


def two_sided_from_mid(home_per_foreign: float, spread: float = DEFAULT_SPREAD) -> tuple[float, float]:
    """Invert a ``foreign units per home unit`` rate and widen it both ways.

    Returns ``(buy, sell)`` around the inverted mid, ``spread`` on each side.
    Raises :class:`InvalidNumericInput` when the inverse overflows.
    """

    mid = 1 / home_per_foreign
    buy, sell = mid * (1 - spread), mid * (1 + spread)
    if not (math.isfinite(buy) and math.isfinite(sell)):
        raise InvalidNumericInput("inverted rate", home_per_foreign)
    return buy, sell


class ExchangeRateAPIProvider(HTTPQuoteProvider):
    """Single mid-rate per currency, keyed by the home currency path segment.

    The upstream has no precious metals, so metal instruments are skipped.
    """

    name = "exchangerate-api"

    def __init__(
        self,
        *,
        instruments: Sequence[Instrument] = DEFAULT_INSTRUMENTS,
        base_currency: str = HOME_CURRENCY,
        base_url: str = EXCHANGERATE_API_URL,
        spread: float = DEFAULT_SPREAD,
        session: requests.Session | None = None,
        timeout: float = 30,
    ) -> None:
        super().__init__(session=session, timeout=timeout)
        self.instruments = tuple(instruments)
        self.base_currency = base_currency.upper()
        self.base_url = base_url.rstrip("/")
        self.spread = spread

    def fetch_quotes(self) -> list[RateQuote]:
        url = f"{self.base_url}/{self.base_currency}"
        LOGGER.info("Requesting spot rates from %s", url)
        payload = self._get_json(url)
        rates = payload.get("rates") if isinstance(payload, Mapping) else None
        if not isinstance(rates, Mapping):
            raise ProviderUnavailable(self.name, "no rates data in response")

        quotes = self.parse_rates(rates)
        if not quotes:
            raise ProviderUnavailable(self.name, "no valid rates extracted")
        LOGGER.info("%s returned %s quotes", self.name, len(quotes))
        return quotes

    def parse_rates(self, rates: Mapping[str, Any]) -> list[RateQuote]:
        quotes: list[RateQuote] = []
        for inst in self.instruments:
            if inst.is_metal:
                LOGGER.warning("%s not available from %s, skipping", inst.code, self.name)
                continue
            try:
                home_per_foreign = parse_positive_rate(rates.get(inst.code), field=inst.code)
                buy_rate, sell_rate = two_sided_from_mid(home_per_foreign, self.spread)
            except InvalidNumericInput as exc:
                LOGGER.warning("Dropping %s from %s: %s", inst.code, self.name, exc)
                continue
            quotes.append(
                RateQuote(code=inst.code, name=inst.name, buy_rate=buy_rate, sell_rate=sell_rate)
            )
        return quotes


__all__ = [
    "ExchangeRateAPIProvider",
    "EXCHANGERATE_API_URL",
    "HOME_CURRENCY",
    "DEFAULT_SPREAD",
    "two_sided_from_mid",
]
