from typing import Any

from assessa.domain.errors import PropertyNotFoundError
from assessa.domain.ports import AnalysisRepository, TaxHistoryRepository
from assessa.domain.tax_records import TaxAssessmentRecord, TaxHistory, TaxPaymentRecord


class InMemoryTaxHistoryRepository(TaxHistoryRepository):
    def __init__(self, histories: dict[str, TaxHistory] | None = None) -> None:
        self._histories: dict[str, TaxHistory] = dict(histories or {})

    def put(self, property_id: str, history: TaxHistory) -> None:
        self._histories[property_id] = history

    def get_history(self, property_id: str, limit: int = 5, payment_limit: int | None = None) -> TaxHistory:
        if property_id not in self._histories:
            raise PropertyNotFoundError(property_id)
        stored = self._histories[property_id]
        assessments: list[TaxAssessmentRecord] = sorted(
            stored.assessments, key=lambda a: a.assessment_year, reverse=True
        )
        payments: list[TaxPaymentRecord] = stored.payments_newest_first()
        return TaxHistory(assessments=tuple(assessments[:limit]), payments=tuple(payments[: payment_limit or limit]))


class InMemoryAnalysisRepository(AnalysisRepository):
    def __init__(self) -> None:
        self._items: list[dict[str, Any]] = []

    def save_analysis(
        self,
        property_id: str | None,
        analysis: dict[str, Any],
        payload: dict[str, Any],
    ) -> int:
        rec = analysis.copy()
        rec["property_id"] = property_id
        rec["request_payload"] = payload
        self._items.append(rec)
        rec["analysis_id"] = len(self._items)
        return rec["analysis_id"]

    def list_recent(self, property_id: str | None = None, limit: int = 10) -> list[dict[str, Any]]:
        items = [r for r in self._items if property_id is None or r["property_id"] == property_id]
        return list(reversed(items))[:limit]
