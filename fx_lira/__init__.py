"""Public interface for the fx_lira package."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from importlib import metadata as importlib_metadata
from pathlib import Path
from typing import Any, Literal, Mapping, Sequence
from urllib.parse import quote, urlparse, urlunparse

from fx_lira.accumulation import AccumulationInput, AccumulationResult, accumulate
from fx_lira.conversion import convert_try, find_quote, split_metals
from fx_lira.db import DEFAULT_SQLITE_DB_PATH
from fx_lira.db.base_backend import BackendStrategy
from fx_lira.db.sqlite_backend import SQLiteBackend
from fx_lira.exceptions import (
    AllProvidersExhausted,
    InvalidNumericInput,
    ProviderUnavailable,
    ThrottleError,
)
from fx_lira.ingestion.enrichment import enrich
from fx_lira.ingestion.evds import EVDSProvider
from fx_lira.ingestion.exchangerate_api import ExchangeRateAPIProvider
from fx_lira.ingestion.models import (
    DEFAULT_INSTRUMENTS,
    CalculationRecord,
    EnrichedRateQuote,
    Instrument,
    RateQuote,
)
from fx_lira.ingestion.pipeline import RatePipeline, fetch_raw_quotes
from fx_lira.ingestion.strategy import QuoteProvider
from fx_lira.ingestion.throttle import MIN_FETCH_INTERVAL_MS, FetchThrottle, can_fetch

__all__ = [
    "__version__",
    "AccumulationResult",
    "AllProvidersExhausted",
    "CalculationRecord",
    "DatabaseBackend",
    "DatabaseConnectionInfo",
    "EnrichedRateQuote",
    "FxLira",
    "InvalidNumericInput",
    "ProviderUnavailable",
    "RateQuote",
    "ThrottleError",
    "accumulate",
    "can_fetch",
    "enrich",
    "fetch_raw_quotes",
]

try:
    __version__ = importlib_metadata.version("fx-lira")
except importlib_metadata.PackageNotFoundError:  # pragma: no cover - fallback for local runs
    __version__ = "0.1.0"


class DatabaseBackend(str, Enum):
    """Supported history stores."""

    SQLITE = "sqlite"
    MYSQL = "mysql"
    POSTGRES = "postgres"
    MONGODB = "mongodb"

    @classmethod
    def resolve_backend_and_scheme(cls, scheme: str) -> tuple["DatabaseBackend", str]:
        """Return backend enum + canonical scheme used in connection URLs."""

        if not scheme:
            raise ValueError("DB_URL must include a scheme (e.g. mysql:// or postgres://)")
        scheme_lower = scheme.lower()
        base_scheme, _, driver = scheme_lower.partition("+")
        if base_scheme in {"postgresql", "postgres"}:
            return cls.POSTGRES, "postgresql"
        if base_scheme == "sqlite":
            return cls.SQLITE, "sqlite"
        if base_scheme == "mysql":
            # Keep driver hints such as ``mysql+pymysql``.
            return cls.MYSQL, scheme_lower if driver else "mysql"
        if base_scheme == "mongodb":
            # ``mongodb+srv`` must survive so pymongo can resolve via DNS.
            return cls.MONGODB, scheme_lower if driver else "mongodb"
        raise ValueError(
            "Unsupported database backend. Supported values are SQLite, MySQL, "
            "Postgres, and MongoDB."
        )


@dataclass(slots=True)
class DatabaseConnectionInfo:
    """Where calculation history is written."""

    backend: DatabaseBackend
    url: str
    name: str | None

    @classmethod
    def from_url(cls, url: str) -> "DatabaseConnectionInfo":
        """Create a connection object by parsing a database URL/DSN."""

        parsed = urlparse(url)
        if not parsed.scheme:
            raise ValueError("DB_URL must include a scheme (e.g. mysql:// or postgres://)")
        backend, canonical_scheme = DatabaseBackend.resolve_backend_and_scheme(parsed.scheme)
        if parsed.scheme != canonical_scheme:
            parsed = parsed._replace(scheme=canonical_scheme)
            url = urlunparse(parsed)
        name = parsed.path[1:] if parsed.path and parsed.path != "/" else None
        return cls(backend=backend, url=url, name=name)

    @classmethod
    def sqlite(cls, db_path: str | Path = DEFAULT_SQLITE_DB_PATH) -> "DatabaseConnectionInfo":
        path = Path(db_path)
        return cls(
            backend=DatabaseBackend.SQLITE,
            url=f"sqlite:///{quote(path.as_posix(), safe='/:')}",
            name=str(path),
        )

    @property
    def is_sqlite(self) -> bool:
        return self.backend is DatabaseBackend.SQLITE


class FxLira:
    """Package facade: calculator, live rates and calculation history."""

    __slots__ = ("connection_info", "pipeline", "_backend_strategy")

    __version__ = __version__

    def __init__(
        self,
        db_config: DatabaseConnectionInfo | str | None = None,
        *,
        providers: Sequence[QuoteProvider] | None = None,
        evds_key: str | None = None,
        instruments: Sequence[Instrument] = DEFAULT_INSTRUMENTS,
        min_interval_ms: float = MIN_FETCH_INTERVAL_MS,
        timeout: float = 30,
    ) -> None:
        """Wire storage and the rate pipeline.

        ``db_config`` is a ``DatabaseConnectionInfo`` or a DSN; omitted means
        the bundled SQLite file. ``providers`` overrides the default
        EVDS → exchangerate-api chain.
        """

        self.connection_info = self._build_connection_info(db_config)
        if providers is None:
            providers = (
                EVDSProvider(evds_key, instruments=instruments, timeout=timeout),
                ExchangeRateAPIProvider(instruments=instruments, timeout=timeout),
            )
        self.pipeline = RatePipeline(providers, throttle=FetchThrottle(min_interval_ms))
        self._backend_strategy: BackendStrategy | None = None

    @staticmethod
    def _build_connection_info(
        db_config: DatabaseConnectionInfo | str | None,
    ) -> DatabaseConnectionInfo:
        if isinstance(db_config, DatabaseConnectionInfo):
            return db_config
        if isinstance(db_config, str):
            if "://" not in db_config:
                raise ValueError("DB_URL must include a scheme (e.g. mysql:// or postgres://)")
            return DatabaseConnectionInfo.from_url(db_config)
        return DatabaseConnectionInfo.sqlite()

    def _build_backend(self) -> BackendStrategy:
        info = self.connection_info
        if info.is_sqlite:
            return SQLiteBackend(db_path=info.name or DEFAULT_SQLITE_DB_PATH)
        if info.backend is DatabaseBackend.POSTGRES:
            from fx_lira.db.postgres_backend import PostgresBackend

            return PostgresBackend(info.url)
        if info.backend is DatabaseBackend.MYSQL:
            from fx_lira.db.mysql_backend import MySQLBackend

            return MySQLBackend(info.url)
        if info.backend is DatabaseBackend.MONGODB:
            from fx_lira.db.mongo_backend import MongoBackend

            return MongoBackend(info.url, database=info.name)
        raise ValueError(f"Unsupported backend: {info.backend}")

    def _get_backend_strategy(self) -> BackendStrategy:
        if self._backend_strategy is None:
            backend = self._build_backend()
            backend.ensure_schema()
            self._backend_strategy = backend
        return self._backend_strategy

    # Calculator -----------------------------------------------------------

    @staticmethod
    def accumulate(principal: float, daily_rate_percent: float, days: int) -> AccumulationResult:
        return accumulate(principal, daily_rate_percent, days)

    def save_calculation(
        self, principal: float, daily_rate_percent: float, days: int
    ) -> CalculationRecord:
        """Compute and log one calculation to the history store."""

        inputs = AccumulationInput(principal, daily_rate_percent, days)
        record = CalculationRecord.from_result(inputs, accumulate(principal, daily_rate_percent, days))
        return self._get_backend_strategy().insert_calculation(record)

    def save_record(self, payload: Mapping[str, Any]) -> CalculationRecord:
        """Validate a flat record of stringified numbers and store it."""

        record = CalculationRecord.from_payload(payload)
        return self._get_backend_strategy().insert_calculation(record)

    def calculations(self) -> list[CalculationRecord]:
        return self._get_backend_strategy().fetch_calculations()

    # Rates ----------------------------------------------------------------

    def refresh_rates(self) -> list[EnrichedRateQuote]:
        """Fetch fresh quotes; see :meth:`RatePipeline.refresh` for errors."""

        return self.pipeline.refresh()

    def rates(self) -> list[EnrichedRateQuote]:
        """Quotes from the last successful refresh, without fetching."""

        return self.pipeline.latest()

    def currencies(self) -> list[EnrichedRateQuote]:
        currencies, _ = split_metals(self.pipeline.latest())
        return currencies

    def metals(self) -> list[EnrichedRateQuote]:
        _, metals = split_metals(self.pipeline.latest())
        return metals

    def convert(self, amount: float, code: str, side: Literal["buy", "sell"] = "sell") -> float:
        """Convert TRY ``amount`` into ``code`` using the last quotes."""

        return convert_try(amount, find_quote(self.pipeline.latest(), code), side)

    # Storage --------------------------------------------------------------

    def connection(self) -> tuple[bool, str | None]:
        """Attempt to reach the history store and report the outcome."""

        try:
            self._get_backend_strategy()
        except ModuleNotFoundError as exc:
            module_name = exc.name or str(exc)
            return False, (
                f"Missing database driver '{module_name}' required for "
                f"{self.connection_info.backend.value} connections."
            )
        except Exception as exc:  # driver/SQLAlchemy errors carry the detail
            return False, str(exc)
        return True, None

    def close(self) -> None:
        if self._backend_strategy is not None:
            self._backend_strategy.close()
            self._backend_strategy = None
