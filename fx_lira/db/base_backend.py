"""Backend strategy interfaces for the calculation history."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fx_lira.ingestion.models import CalculationRecord


class BackendStrategy(ABC):
    """Common interface implemented by every history backend."""

    @abstractmethod
    def ensure_schema(self) -> None:
        """Create required tables/collections and verify connectivity."""

    @abstractmethod
    def insert_calculation(self, record: CalculationRecord) -> CalculationRecord:
        """Store ``record`` and return it with ``id`` and ``created_at`` set."""

    @abstractmethod
    def fetch_calculations(self) -> list[CalculationRecord]:
        """Return every stored calculation, oldest first."""

    def close(self) -> None:  # pragma: no cover - optional cleanup hook
        """Backends may override to release connections/resources."""


__all__ = ["BackendStrategy"]
