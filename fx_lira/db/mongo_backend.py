"""MongoDB backend strategy."""

from __future__ import annotations

from datetime import datetime, timezone

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from fx_lira.db.base_backend import BackendStrategy
from fx_lira.ingestion.models import CalculationRecord
from fx_lira.utils.logger import get_logger

LOGGER = get_logger(__name__)


class MongoBackend(BackendStrategy):
    """Backend strategy that keeps calculations in a MongoDB collection."""

    def __init__(self, url: str, *, database: str | None = None) -> None:
        self.url = url
        self._client = MongoClient(url)
        db = self._client.get_default_database() if database is None else self._client[database]
        if db is None:
            raise ValueError("MongoDB connection URI must include a database name")
        self._collection: Collection = db["calculations"]

    def ensure_schema(self) -> None:
        try:
            LOGGER.info("Ensuring MongoDB calculations collection exists")
            self._client.admin.command("ping")
            self._collection.create_index([("created_at", 1)])
        except PyMongoError as exc:  # pragma: no cover - error path
            raise RuntimeError(f"Failed to ensure MongoDB schema: {exc}") from exc

    def insert_calculation(self, record: CalculationRecord) -> CalculationRecord:
        doc = {
            "start_amount": record.start_amount,
            "daily_percent": record.daily_percent,
            "days": record.days,
            "total_result": record.total_result,
            "total_profit": record.total_profit,
            "created_at": record.created_at or datetime.now(timezone.utc),
        }
        try:
            result = self._collection.insert_one(dict(doc))
        except PyMongoError as exc:  # pragma: no cover - error path
            raise RuntimeError(f"Failed to insert MongoDB calculation: {exc}") from exc
        LOGGER.info("Inserted calculation %s", result.inserted_id)
        return CalculationRecord(id=str(result.inserted_id), **doc)

    def fetch_calculations(self) -> list[CalculationRecord]:
        docs = self._collection.find({}).sort("created_at", 1)
        return [
            CalculationRecord(
                id=str(doc.get("_id")),
                start_amount=doc["start_amount"],
                daily_percent=doc["daily_percent"],
                days=doc["days"],
                total_result=doc["total_result"],
                total_profit=doc["total_profit"],
                created_at=doc.get("created_at"),
            )
            for doc in docs
        ]

    def close(self) -> None:  # pragma: no cover - trivial cleanup
        self._client.close()


__all__ = ["MongoBackend"]
