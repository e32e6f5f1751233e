# src/assessa/domain/ports.py
from __future__ import annotations

from typing import Any, Protocol

from assessa.domain.tax_records import TaxHistory


# ----------------------------
# Tax history (read-only snapshot source)
# ----------------------------

class TaxHistoryRepository(Protocol):
    def get_history(self, property_id: str, limit: int = 5, payment_limit: int | None = None) -> TaxHistory:
        """
        Newest `limit` assessments and newest `payment_limit` payments (defaults
        to `limit`); raises PropertyNotFoundError.
        """
        ...


# ----------------------------
# Analysis persistence
# ----------------------------

class AnalysisRepository(Protocol):
    def save_analysis(self, property_id: str | None, analysis: dict[str, Any], payload: dict[str, Any]) -> int:
        ...

    def list_recent(self, property_id: str | None = None, limit: int = 10) -> list[dict[str, Any]]:
        ...
