"""Delta enrichment against the previous snapshot."""

from __future__ import annotations

from typing import Iterable

from fx_lira.ingestion.models import EnrichedRateQuote, RateQuote, RateSnapshot


def _change(current: float, previous: RateQuote | None, side: str) -> tuple[float, float]:
    if previous is None:
        return 0.0, 0.0
    before = getattr(previous, side)
    change = current - before
    percent = change / before * 100 if before != 0 else 0.0
    return change, percent


def enrich(
    current: Iterable[RateQuote], previous: Iterable[RateQuote] | None = None
) -> list[EnrichedRateQuote]:
    """Attach buy/sell changes to every current quote.

    Previous quotes are matched by ``code``; unmatched codes get zero deltas.
    Neither input is mutated.
    """

    baseline = {quote.code: quote for quote in (previous or ())}
    enriched: list[EnrichedRateQuote] = []
    for quote in current:
        before = baseline.get(quote.code)
        buy_change, buy_percent = _change(quote.buy_rate, before, "buy_rate")
        sell_change, sell_percent = _change(quote.sell_rate, before, "sell_rate")
        enriched.append(
            EnrichedRateQuote(
                code=quote.code,
                name=quote.name,
                buy_rate=quote.buy_rate,
                sell_rate=quote.sell_rate,
                buy_change=buy_change,
                sell_change=sell_change,
                buy_change_percent=buy_percent,
                sell_change_percent=sell_percent,
            )
        )
    return enriched


class SnapshotStore:
    """Two slots, ``current`` and ``previous``, rotated after each success."""

    __slots__ = ("current", "previous")

    def __init__(self) -> None:
        self.current: RateSnapshot | None = None
        self.previous: RateSnapshot | None = None

    def rotate(self, snapshot: RateSnapshot) -> None:
        # Keep only the minimal quote fields; deltas are never re-stored.
        minimal = RateSnapshot(
            quotes=tuple(
                RateQuote(code=q.code, name=q.name, buy_rate=q.buy_rate, sell_rate=q.sell_rate)
                for q in snapshot.quotes
            ),
            fetched_at=snapshot.fetched_at,
            source=snapshot.source,
        )
        self.previous, self.current = self.current, minimal

    def enriched(self) -> list[EnrichedRateQuote]:
        if self.current is None:
            return []
        previous = self.previous.quotes if self.previous is not None else None
        return enrich(self.current.quotes, previous)


__all__ = ["enrich", "SnapshotStore"]
