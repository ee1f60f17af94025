"""Shared logic for SQL (Postgres/MySQL) history backends."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, MetaData, String, Table, create_engine, select, text
from sqlalchemy.engine import Engine

from fx_lira.db.base_backend import BackendStrategy
from fx_lira.ingestion.models import CalculationRecord
from fx_lira.utils.logger import get_logger

LOGGER = get_logger(__name__)

metadata = MetaData()

calculations_table = Table(
    "calculations",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("start_amount", String(64), nullable=False),
    Column("daily_percent", String(64), nullable=False),
    Column("days", String(16), nullable=False),
    Column("total_result", String(64), nullable=False),
    Column("total_profit", String(64), nullable=False),
    Column("created_at", DateTime, nullable=False),
)


class RelationalBackend(BackendStrategy):
    """Base class that encapsulates SQLAlchemy powered interactions."""

    def __init__(self, url: str) -> None:
        self.url = url
        self._engine_instance: Engine | None = None

    def _get_engine(self) -> Engine:
        if self._engine_instance is None:
            self._engine_instance = create_engine(self.url, future=True)
        return self._engine_instance

    def ensure_schema(self) -> None:
        engine = self._get_engine()
        with engine.begin() as connection:
            LOGGER.info("Ensuring calculations schema exists")
            connection.execute(text("SELECT 1"))
        metadata.create_all(engine)

    def insert_calculation(self, record: CalculationRecord) -> CalculationRecord:
        created_at = record.created_at or datetime.now(timezone.utc).replace(tzinfo=None)
        params = {
            "start_amount": record.start_amount,
            "daily_percent": record.daily_percent,
            "days": record.days,
            "total_result": record.total_result,
            "total_profit": record.total_profit,
            "created_at": created_at,
        }
        with self._get_engine().begin() as connection:
            result = connection.execute(calculations_table.insert().values(**params))
            new_id = result.inserted_primary_key[0]
        LOGGER.info("Inserted calculation %s", new_id)
        return CalculationRecord(id=new_id, **params)

    def fetch_calculations(self) -> list[CalculationRecord]:
        stmt = select(calculations_table).order_by(
            calculations_table.c.created_at, calculations_table.c.id
        )
        with self._get_engine().connect() as connection:
            return [
                CalculationRecord(
                    id=row.id,
                    start_amount=row.start_amount,
                    daily_percent=row.daily_percent,
                    days=row.days,
                    total_result=row.total_result,
                    total_profit=row.total_profit,
                    created_at=_normalise_timestamp(row.created_at),
                )
                for row in connection.execute(stmt)
            ]

    def close(self) -> None:  # pragma: no cover - trivial resource cleanup
        if self._engine_instance is not None:
            self._engine_instance.dispose()


def _normalise_timestamp(value: object) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


__all__ = ["RelationalBackend", "calculations_table"]
