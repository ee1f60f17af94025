"""TRY conversions against the displayed buy/sell quotes."""

from __future__ import annotations

import math
from typing import Iterable, Literal, TypeVar

from fx_lira.ingestion.models import RateQuote

QuoteT = TypeVar("QuoteT", bound=RateQuote)


def _divide(amount: float, rate: float | None) -> float:
    if rate is None or not rate > 0:
        return 0.0
    return amount / rate


def _usable_amount(amount: float) -> bool:
    return not math.isnan(amount) and amount > 0


def convert_try(
    amount: float, quote: RateQuote | None, side: Literal["buy", "sell"] = "sell"
) -> float:
    """Convert a TRY ``amount`` into units of ``quote``.

    ``side="sell"`` means the customer sells foreign currency, so the bank's
    buy rate applies; ``side="buy"`` applies the sell rate.
    """

    if quote is None or not _usable_amount(amount):
        return 0.0
    rate = quote.sell_rate if side == "buy" else quote.buy_rate
    return _divide(amount, rate)


def ounces_for(amount: float, quote: RateQuote | None) -> tuple[float, float]:
    """Ounces a TRY ``amount`` buys at the buy and sell rates of a metal."""

    if quote is None or not _usable_amount(amount):
        return 0.0, 0.0
    return _divide(amount, quote.buy_rate), _divide(amount, quote.sell_rate)


def find_quote(quotes: Iterable[QuoteT], code: str) -> QuoteT | None:
    upper = code.upper()
    for quote in quotes:
        if quote.code == upper:
            return quote
    return None


def split_metals(quotes: Iterable[QuoteT]) -> tuple[list[QuoteT], list[QuoteT]]:
    """Return ``(currencies, metals)`` preserving input order."""

    currencies: list[QuoteT] = []
    metals: list[QuoteT] = []
    for quote in quotes:
        (metals if quote.is_metal else currencies).append(quote)
    return currencies, metals


__all__ = ["convert_try", "ounces_for", "find_quote", "split_metals"]
