# src/assessa/domain/tax_records.py
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PaymentStatus = Literal["paid", "unpaid", "delinquent"]


class TaxAssessmentRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    assessment_year: int
    assessed_value: float | None = Field(default=None, ge=0)
    land_value: float | None = None
    improvement_value: float | None = None
    annual_taxes: float | None = None   # reported or derived by the assessor feed
    tax_rate: float | None = None       # effective rate as a fraction, e.g. 0.0185


class TaxPaymentRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    tax_year: int
    amount_due: float | None = None
    amount_paid: float | None = None
    status: PaymentStatus | None = None


class TaxHistory(BaseModel):
    """
    Read-only snapshot of a property's tax record.

    Callers usually hand records over newest first, but nothing here relies on
    input order. Every consumer that needs "valid" or "latest" history goes
    through the helpers below so trend, projection and risk classification all
    see the same view.
    """
    model_config = ConfigDict(frozen=True)

    assessments: tuple[TaxAssessmentRecord, ...] = ()
    payments: tuple[TaxPaymentRecord, ...] = ()

    @classmethod
    def empty(cls) -> TaxHistory:
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.assessments and not self.payments

    def valid_assessments(self) -> list[TaxAssessmentRecord]:
        """Assessments with a positive assessed value, oldest year first."""
        valid = [a for a in self.assessments if a.assessed_value is not None and a.assessed_value > 0]
        return sorted(valid, key=lambda a: a.assessment_year)

    def latest_assessment(self) -> TaxAssessmentRecord | None:
        valid = self.valid_assessments()
        return valid[-1] if valid else None

    def payments_newest_first(self) -> list[TaxPaymentRecord]:
        # stable sort keeps caller order among payments of the same year
        return sorted(self.payments, key=lambda p: p.tax_year, reverse=True)

    def latest_payment(self) -> TaxPaymentRecord | None:
        ordered = self.payments_newest_first()
        return ordered[0] if ordered else None
