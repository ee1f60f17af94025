"""SQLAlchemy persistence for the local calculation history."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import cast

from sqlalchemy import Column, DateTime, Integer, String, create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from fx_lira.db import DEFAULT_SQLITE_DB_PATH
from fx_lira.ingestion.models import CalculationRecord
from fx_lira.utils.logger import get_logger

LOGGER = get_logger(__name__)


class Base(DeclarativeBase):
    pass


class _Calculation(Base):
    __tablename__ = "calculations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    start_amount = Column(String, nullable=False)
    daily_percent = Column(String, nullable=False)
    days = Column(String, nullable=False)
    total_result = Column(String, nullable=False)
    total_profit = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False)


def _to_record(model: _Calculation) -> CalculationRecord:
    return CalculationRecord(
        id=cast(int, model.id),
        start_amount=cast(str, model.start_amount),
        daily_percent=cast(str, model.daily_percent),
        days=cast(str, model.days),
        total_result=cast(str, model.total_result),
        total_profit=cast(str, model.total_profit),
        created_at=cast(datetime, model.created_at),
    )


class SQLiteManager:
    """Session-per-call access to the ``calculations`` table in a SQLite file."""

    def __init__(self, db_path: str | Path = DEFAULT_SQLITE_DB_PATH) -> None:
        self.db_path = Path(db_path).expanduser().resolve()
        self.engine: Engine = create_engine(
            f"sqlite:///{self.db_path}",
            echo=False,
            future=True,
            connect_args={"check_same_thread": False},
        )
        Base.metadata.create_all(self.engine)
        self._SessionFactory: sessionmaker[Session] = sessionmaker(
            bind=self.engine, expire_on_commit=False, future=True
        )

    def insert_calculation(self, record: CalculationRecord) -> CalculationRecord:
        created_at = record.created_at or datetime.now(timezone.utc).replace(tzinfo=None)
        with self._SessionFactory() as session:
            model = _Calculation(
                start_amount=record.start_amount,
                daily_percent=record.daily_percent,
                days=record.days,
                total_result=record.total_result,
                total_profit=record.total_profit,
                created_at=created_at,
            )
            session.add(model)
            session.commit()
            stored = _to_record(model)
        LOGGER.info("Inserted calculation %s into %s", stored.id, self.db_path.name)
        return stored

    def fetch_calculations(self) -> list[CalculationRecord]:
        with self._SessionFactory() as session:
            stmt = select(_Calculation).order_by(_Calculation.created_at, _Calculation.id)
            return [_to_record(row) for row in session.execute(stmt).scalars()]

    def close(self) -> None:  # pragma: no cover - trivial
        self.engine.dispose()

    def __enter__(self) -> "SQLiteManager":  # pragma: no cover - trivial
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - trivial
        self.close()


__all__ = ["SQLiteManager"]
