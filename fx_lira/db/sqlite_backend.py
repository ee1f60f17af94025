"""SQLite backend strategy implementation."""

from __future__ import annotations

from pathlib import Path

from fx_lira.db import DEFAULT_SQLITE_DB_PATH
from fx_lira.db.base_backend import BackendStrategy
from fx_lira.db.sqlite_manager import SQLiteManager
from fx_lira.ingestion.models import CalculationRecord


class SQLiteBackend(BackendStrategy):
    """Backend strategy that keeps the history in a local SQLite file."""

    def __init__(
        self,
        db_path: str | Path = DEFAULT_SQLITE_DB_PATH,
        *,
        manager: SQLiteManager | None = None,
    ) -> None:
        self.manager = manager or SQLiteManager(db_path)
        self.db_path = Path(self.manager.db_path)

    def ensure_schema(self) -> None:
        # SQLiteManager creates the table when it is constructed.
        return None

    def insert_calculation(self, record: CalculationRecord) -> CalculationRecord:
        return self.manager.insert_calculation(record)

    def fetch_calculations(self) -> list[CalculationRecord]:
        return self.manager.fetch_calculations()

    def close(self) -> None:  # pragma: no cover - trivial delegator
        self.manager.close()


__all__ = ["SQLiteBackend"]
