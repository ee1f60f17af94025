"""Data models shared across ingestion and storage modules."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Final, Literal, Mapping

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from fx_lira.accumulation import AccumulationInput, AccumulationResult

PRECIOUS_METAL_CODES: Final[frozenset[str]] = frozenset({"XAU", "XAG", "XPT", "XPD"})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class Instrument:
    """A tracked instrument and the EVDS series that price it."""

    code: str
    name: str
    buy_series: str | None = None
    sell_series: str | None = None

    @property
    def is_metal(self) -> bool:
        return self.code in PRECIOUS_METAL_CODES


DEFAULT_INSTRUMENTS: Final[tuple[Instrument, ...]] = tuple(
    Instrument(code=code, name=name, buy_series=f"TP.DK.{code}.A", sell_series=f"TP.DK.{code}.S")
    for code, name in (
        ("USD", "Amerikan Doları"),
        ("EUR", "Euro"),
        ("GBP", "İngiliz Sterlini"),
        ("JPY", "Japon Yeni"),
        ("CHF", "İsviçre Frangı"),
    )
)


@dataclass(frozen=True, slots=True)
class RateQuote:
    """Current two-sided TRY price of one instrument.

    ``sell_rate >= buy_rate`` is expected but never enforced because upstream
    data is not always consistent.
    """

    code: str
    name: str
    buy_rate: float
    sell_rate: float

    @property
    def is_metal(self) -> bool:
        return self.code in PRECIOUS_METAL_CODES


@dataclass(frozen=True, slots=True)
class EnrichedRateQuote(RateQuote):
    """A :class:`RateQuote` with changes against the previous snapshot."""

    buy_change: float = 0.0
    sell_change: float = 0.0
    buy_change_percent: float = 0.0
    sell_change_percent: float = 0.0

    @property
    def direction(self) -> Literal["up", "down", "flat"]:
        change = self.buy_change if self.buy_change != 0 else self.sell_change
        if change > 0:
            return "up"
        if change < 0:
            return "down"
        return "flat"

    def to_quote(self) -> RateQuote:
        """Strip the deltas so the quote can serve as the next baseline."""

        return RateQuote(
            code=self.code, name=self.name, buy_rate=self.buy_rate, sell_rate=self.sell_rate
        )


@dataclass(frozen=True, slots=True)
class RateSnapshot:
    """All quotes from one successful fetch."""

    quotes: tuple[RateQuote, ...]
    fetched_at: datetime = field(default_factory=_utcnow)
    source: str | None = None

    def by_code(self) -> dict[str, RateQuote]:
        return {quote.code: quote for quote in self.quotes}

    def __len__(self) -> int:
        return len(self.quotes)


_CALCULATION_FIELDS: Final[tuple[str, ...]] = (
    "start_amount",
    "daily_percent",
    "days",
    "total_result",
    "total_profit",
)


@dataclass(slots=True)
class CalculationRecord:
    """Flat history row; numeric values are kept as strings."""

    start_amount: str
    daily_percent: str
    days: str
    total_result: str
    total_profit: str
    id: int | str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "CalculationRecord":
        """Validate a submitted record and return it unsaved.

        Numbers are stringified; every field must parse to a finite float and
        ``days`` must be a non-negative integer.
        """

        values: dict[str, str] = {}
        for name in _CALCULATION_FIELDS:
            if name not in payload or payload[name] is None:
                raise ValueError(f"{name} is required")
            raw = payload[name]
            if isinstance(raw, bool) or not isinstance(raw, (str, int, float)):
                raise ValueError(f"{name} must be a string or number")
            text = str(raw).strip()
            try:
                number = float(text)
            except ValueError:
                raise ValueError(f"{name} must be numeric, got {raw!r}") from None
            if not math.isfinite(number):
                raise ValueError(f"{name} must be finite, got {raw!r}")
            if name == "days" and (number < 0 or not number.is_integer()):
                raise ValueError(f"days must be a non-negative integer, got {raw!r}")
            values[name] = text
        return cls(**values)

    @classmethod
    def from_result(
        cls, inputs: "AccumulationInput", result: "AccumulationResult"
    ) -> "CalculationRecord":
        return cls.from_payload(
            {
                "start_amount": str(inputs.principal),
                "daily_percent": str(inputs.daily_rate_percent),
                "days": str(inputs.days),
                "total_result": str(result.final_amount),
                "total_profit": str(result.profit),
            }
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "start_amount": self.start_amount,
            "daily_percent": self.daily_percent,
            "days": self.days,
            "total_result": self.total_result,
            "total_profit": self.total_profit,
            "created_at": self.created_at,
        }


__all__ = [
    "PRECIOUS_METAL_CODES",
    "DEFAULT_INSTRUMENTS",
    "Instrument",
    "RateQuote",
    "EnrichedRateQuote",
    "RateSnapshot",
    "CalculationRecord",
]
