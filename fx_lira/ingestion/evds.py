"""Primary provider: TCMB EVDS buy/sell series for each tracked currency."""

from __future__ import annotations

import os
from datetime import date, timedelta
from typing import Any, Callable, Mapping, Sequence

import requests

from fx_lira.exceptions import InvalidNumericInput, ProviderUnavailable
from fx_lira.ingestion.models import DEFAULT_INSTRUMENTS, Instrument, RateQuote
from fx_lira.ingestion.strategy import HTTPQuoteProvider, parse_positive_rate
from fx_lira.utils.logger import get_logger

LOGGER = get_logger(__name__)

EVDS_BASE_URL = "https://evds2.tcmb.gov.tr/service/evds"
EVDS_KEY_ENV = "TCMB_EVDS_KEY"
EVDS_DATE_FORMAT = "%d-%m-%Y"
# Weekends and holidays publish no rows, so ask for a short window and use
# the latest populated one.
DEFAULT_LOOKBACK_DAYS = 7

_ITEM_KEYS = ("items", "Items", "data", "Data")


def _series_value(record: Mapping[str, Any], series: str) -> Any:
    """EVDS echoes series ids with dots replaced by underscores in item rows."""

    if series in record:
        return record[series]
    return record.get(series.replace(".", "_"))


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class EVDSProvider(HTTPQuoteProvider):
    """Fetch two-sided quotes from the central bank's EVDS service.

    All series are requested in one call. The payload is read as an
    ``items`` array of dated rows first and as a ``series``-keyed object
    second; an instrument is kept only when both sides parse to finite
    numbers above zero.
    """

    name = "evds"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        instruments: Sequence[Instrument] = DEFAULT_INSTRUMENTS,
        base_url: str = EVDS_BASE_URL,
        lookback_days: int = DEFAULT_LOOKBACK_DAYS,
        session: requests.Session | None = None,
        timeout: float = 30,
        today: Callable[[], date] = date.today,
    ) -> None:
        super().__init__(session=session, timeout=timeout)
        self.api_key = api_key if api_key is not None else os.environ.get(EVDS_KEY_ENV)
        self.instruments = tuple(
            inst for inst in instruments if inst.buy_series and inst.sell_series
        )
        self.base_url = base_url.rstrip("/")
        self.lookback_days = lookback_days
        self._today = today

    def build_url(self, start: date, end: date) -> str:
        # EVDS expects the query glued onto the path rather than a ``?`` string.
        series: list[str] = []
        for inst in self.instruments:
            series.extend([inst.buy_series or "", inst.sell_series or ""])
        return (
            f"{self.base_url}/series={'-'.join(series)}"
            f"&startDate={start.strftime(EVDS_DATE_FORMAT)}"
            f"&endDate={end.strftime(EVDS_DATE_FORMAT)}&type=json"
        )

    def fetch_quotes(self) -> list[RateQuote]:
        if not self.api_key:
            raise ProviderUnavailable(self.name, f"no API key (set {EVDS_KEY_ENV})")
        if not self.instruments:
            raise ProviderUnavailable(self.name, "no instruments with EVDS series configured")

        end = self._today()
        start = end - timedelta(days=self.lookback_days)
        url = self.build_url(start, end)
        LOGGER.info("Requesting EVDS series for %s - %s", start, end)
        payload = self._get_json(url, headers={"key": self.api_key})
        if not isinstance(payload, Mapping):
            raise ProviderUnavailable(self.name, "unexpected payload type")

        quotes = self.parse_items(payload)
        if not quotes:
            quotes = self.parse_series(payload)
        if not quotes:
            raise ProviderUnavailable(self.name, "no usable instruments in response")
        LOGGER.info("EVDS returned %s quotes", len(quotes))
        return quotes

    def parse_items(self, payload: Mapping[str, Any]) -> list[RateQuote]:
        """Read the ``items`` array shape (one row per date, keyed by series)."""

        items = None
        for key in _ITEM_KEYS:
            candidate = payload.get(key)
            if isinstance(candidate, list) and candidate:
                items = candidate
                break
        if items is None:
            LOGGER.warning("No items array found in EVDS response")
            return []

        rows = [row for row in items if isinstance(row, Mapping)]
        quotes: list[RateQuote] = []
        for inst in self.instruments:
            buy_raw, sell_raw = self._latest_pair(rows, inst)
            quote = self._build_quote(inst, buy_raw, sell_raw)
            if quote is not None:
                quotes.append(quote)
        return quotes

    def parse_series(self, payload: Mapping[str, Any]) -> list[RateQuote]:
        """Read the ``series`` shape: ``{series_id: [{"value": ...}, ...]}``."""

        series = payload.get("series")
        if not isinstance(series, Mapping):
            return []
        quotes: list[RateQuote] = []
        for inst in self.instruments:
            buy_raw = self._last_series_value(_series_value(series, inst.buy_series or ""))
            sell_raw = self._last_series_value(_series_value(series, inst.sell_series or ""))
            quote = self._build_quote(inst, buy_raw, sell_raw)
            if quote is not None:
                quotes.append(quote)
        return quotes

    @staticmethod
    def _latest_pair(rows: Sequence[Mapping[str, Any]], inst: Instrument) -> tuple[Any, Any]:
        buy_series = inst.buy_series or ""
        sell_series = inst.sell_series or ""
        for row in reversed(rows):
            buy_raw = _series_value(row, buy_series)
            sell_raw = _series_value(row, sell_series)
            if not _is_blank(buy_raw) and not _is_blank(sell_raw):
                return buy_raw, sell_raw
        if not rows:
            return None, None
        return _series_value(rows[-1], buy_series), _series_value(rows[-1], sell_series)

    @staticmethod
    def _last_series_value(entries: Any) -> Any:
        if not isinstance(entries, list) or not entries:
            return None
        last = entries[-1]
        if isinstance(last, Mapping):
            return last.get("value")
        return None

    def _build_quote(self, inst: Instrument, buy_raw: Any, sell_raw: Any) -> RateQuote | None:
        try:
            buy_rate = parse_positive_rate(buy_raw, field=f"{inst.code} buy")
            sell_rate = parse_positive_rate(sell_raw, field=f"{inst.code} sell")
        except InvalidNumericInput as exc:
            LOGGER.warning("%s data invalid or missing in EVDS: %s", inst.code, exc)
            return None
        return RateQuote(code=inst.code, name=inst.name, buy_rate=buy_rate, sell_rate=sell_rate)


__all__ = ["EVDSProvider", "EVDS_BASE_URL", "EVDS_KEY_ENV", "DEFAULT_LOOKBACK_DAYS"]
