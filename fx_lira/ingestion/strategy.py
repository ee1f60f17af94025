"""Abstractions for pluggable quote providers."""

from __future__ import annotations

import math
from typing import Any, Protocol

import requests

from fx_lira.exceptions import InvalidNumericInput, ProviderUnavailable
from fx_lira.ingestion.models import RateQuote


class QuoteProvider(Protocol):
    """Contract for one upstream tier of the fallback chain.

    Implementations return every instrument they could resolve and raise
    :class:`~fx_lira.exceptions.ProviderUnavailable` when the tier as a whole
    failed (network error, non-2xx response, malformed payload or no usable
    instruments).
    """

    name: str

    def fetch_quotes(self) -> list[RateQuote]:
        ...  # pragma: no cover - protocol definition


def parse_positive_rate(value: object, *, field: str) -> float:
    """Parse ``value`` into a finite float above zero.

    Raises :class:`InvalidNumericInput` otherwise so the caller can drop the
    single instrument.
    """

    if value is None or isinstance(value, bool):
        raise InvalidNumericInput(field, value)
    try:
        parsed = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        raise InvalidNumericInput(field, value) from None
    if not math.isfinite(parsed) or parsed <= 0:
        raise InvalidNumericInput(field, value)
    return parsed


class HTTPQuoteProvider:
    """Shared ``requests`` plumbing for JSON-over-HTTP providers."""

    name = "http"
    user_agent = "fx-lira/0.1"

    def __init__(self, *, session: requests.Session | None = None, timeout: float = 30) -> None:
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", self.user_agent)
        self.timeout = timeout

    def _get_json(
        self,
        url: str,
        *,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET ``url`` and decode JSON, mapping every failure to ProviderUnavailable."""

        try:
            response = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ProviderUnavailable(self.name, f"request failed: {exc}") from exc
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            body = (response.text or "")[:500]
            raise ProviderUnavailable(
                self.name, f"HTTP {response.status_code} for {url}: {body}"
            ) from exc
        try:
            return response.json()
        except ValueError as exc:
            raise ProviderUnavailable(self.name, f"malformed JSON from {url}") from exc


__all__ = ["QuoteProvider", "HTTPQuoteProvider", "parse_positive_rate"]
