"""Provider fallback chain and the refresh cycle built on top of it."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from fx_lira.exceptions import AllProvidersExhausted, ProviderUnavailable
from fx_lira.ingestion.enrichment import SnapshotStore
from fx_lira.ingestion.models import EnrichedRateQuote, RateQuote, RateSnapshot
from fx_lira.ingestion.strategy import QuoteProvider
from fx_lira.ingestion.throttle import FetchThrottle
from fx_lira.utils.logger import get_logger

LOGGER = get_logger(__name__)


def fetch_raw_quotes_with_source(
    providers: Sequence[QuoteProvider],
) -> tuple[list[RateQuote], str]:
    """Like :func:`fetch_raw_quotes` but also names the tier that answered."""

    errors: list[str] = []
    for provider in providers:
        name = getattr(provider, "name", type(provider).__name__)
        LOGGER.info("Trying rate provider %s", name)
        try:
            quotes = list(provider.fetch_quotes())
        except ProviderUnavailable as exc:
            LOGGER.warning("Provider %s unavailable: %s", name, exc.reason)
            errors.append(str(exc))
            continue
        if not quotes:
            LOGGER.warning("Provider %s returned no quotes", name)
            errors.append(f"{name}: no quotes")
            continue
        LOGGER.info("Resolved %s quotes from %s", len(quotes), name)
        return quotes, name

    LOGGER.error("Every rate provider failed: %s", "; ".join(errors) or "none configured")
    raise AllProvidersExhausted(errors)


def fetch_raw_quotes(providers: Sequence[QuoteProvider]) -> list[RateQuote]:
    """Return quotes from the first provider, in order, that yields any.

    Tiers that raise :class:`ProviderUnavailable` or return nothing are
    skipped; :class:`AllProvidersExhausted` is raised only when all of them
    fail.
    """

    quotes, _ = fetch_raw_quotes_with_source(providers)
    return quotes


class RatePipeline:
    """Throttle, fallback chain and snapshot store for one rate display."""

    def __init__(
        self,
        providers: Sequence[QuoteProvider],
        *,
        throttle: FetchThrottle | None = None,
        store: SnapshotStore | None = None,
    ) -> None:
        self.providers = tuple(providers)
        self.throttle = throttle or FetchThrottle()
        self.store = store or SnapshotStore()

    def refresh(self) -> list[EnrichedRateQuote]:
        """Fetch fresh quotes and return them enriched against the last cycle.

        Raises :class:`~fx_lira.exceptions.ThrottleError` before any network
        call when invoked too early, and
        :class:`~fx_lira.exceptions.AllProvidersExhausted` when no tier
        answered; in that case the stored snapshots are left as they were.
        """

        self.throttle.acquire()
        quotes, source = fetch_raw_quotes_with_source(self.providers)
        snapshot = RateSnapshot(
            quotes=tuple(quotes), fetched_at=datetime.now(timezone.utc), source=source
        )
        self.store.rotate(snapshot)
        return self.store.enriched()

    def latest(self) -> list[EnrichedRateQuote]:
        """Return the retained snapshot without fetching."""

        return self.store.enriched()

    @property
    def last_updated(self) -> datetime | None:
        current = self.store.current
        return current.fetched_at if current is not None else None


__all__ = ["fetch_raw_quotes", "fetch_raw_quotes_with_source", "RatePipeline"]
