# src/assessa/analysis/tax_history.py
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

import pandas as pd

from assessa.domain.tax_records import TaxAssessmentRecord, TaxHistory, TaxPaymentRecord


@dataclass
class TaxHistorySummary:
    assessment_trend: float     # CAGR of assessed value, >= 2 valid records
    payment_trend: float        # CAGR of amount paid, >= 2 positive payments
    years_analyzed: int
    average_annual_tax: float
    latest_assessment: TaxAssessmentRecord | None
    latest_payment: TaxPaymentRecord | None
    total_years: int
    yearly: pd.DataFrame        # one row per year, newest first

    def to_dict(self) -> dict[str, Any]:
        return {
            "trends": {
                "assessment_trend": self.assessment_trend,
                "tax_trend": self.payment_trend,
                "years_analyzed": self.years_analyzed,
            },
            "summary": {
                "total_years": self.total_years,
                "latest_assessment": self.latest_assessment.model_dump() if self.latest_assessment else None,
                "latest_payment": self.latest_payment.model_dump() if self.latest_payment else None,
                "average_annual_tax": self.average_annual_tax,
                "tax_growth_rate": self.assessment_trend,
            },
            "yearly_data": json.loads(self.yearly.to_json(orient="records")),
        }


def _cagr(first_value: float, last_value: float, years: int) -> float:
    if years <= 0 or first_value <= 0:
        return 0.0
    return (last_value / first_value) ** (1.0 / years) - 1.0


def yearly_table(history: TaxHistory) -> pd.DataFrame:
    """
    Join assessments with per-year payment totals.

    Columns: year, assessed_value, annual_taxes, amount_due, amount_paid,
    payment_count.
    """
    a = pd.DataFrame(
        [
            {
                "year": r.assessment_year,
                "assessed_value": r.assessed_value,
                "annual_taxes": r.annual_taxes,
            }
            for r in history.assessments
        ],
        columns=["year", "assessed_value", "annual_taxes"],
    ).drop_duplicates(subset="year", keep="first")
    a["year"] = a["year"].astype("int64")

    p = pd.DataFrame(
        [
            {"year": r.tax_year, "amount_due": r.amount_due, "amount_paid": r.amount_paid}
            for r in history.payments
        ],
        columns=["year", "amount_due", "amount_paid"],
    )
    if p.empty:
        p_by_year = pd.DataFrame(columns=["year", "amount_due", "amount_paid", "payment_count"])
    else:
        p_by_year = (
            p.groupby("year")
            .agg(
                amount_due=("amount_due", lambda s: s.sum(min_count=1)),
                amount_paid=("amount_paid", lambda s: s.sum(min_count=1)),
                payment_count=("amount_paid", "size"),
            )
            .reset_index()
        )

    p_by_year["year"] = p_by_year["year"].astype("int64")

    table = a.merge(p_by_year, on="year", how="outer")
    table["payment_count"] = table["payment_count"].fillna(0).astype(int)
    return table.sort_values("year", ascending=False).reset_index(drop=True)


def summarize_tax_history(history: TaxHistory) -> TaxHistorySummary:
    valid = history.valid_assessments()
    assessment_trend = 0.0
    years_analyzed = 0
    if len(valid) >= 2:
        first, last = valid[0], valid[-1]
        years_analyzed = last.assessment_year - first.assessment_year
        assessment_trend = _cagr(first.assessed_value, last.assessed_value, years_analyzed)

    paid = sorted(
        (p for p in history.payments if p.amount_paid is not None and p.amount_paid > 0),
        key=lambda p: p.tax_year,
    )
    payment_trend = 0.0
    if len(paid) >= 2:
        payment_trend = _cagr(paid[0].amount_paid, paid[-1].amount_paid, paid[-1].tax_year - paid[0].tax_year)

    taxes = [a.annual_taxes for a in history.assessments if a.annual_taxes is not None and a.annual_taxes > 0]
    average_annual_tax = sum(taxes) / len(taxes) if taxes else 0.0

    return TaxHistorySummary(
        assessment_trend=assessment_trend,
        payment_trend=payment_trend,
        years_analyzed=years_analyzed,
        total_years=len(history.assessments),
        average_annual_tax=average_annual_tax,
        latest_assessment=history.latest_assessment(),
        latest_payment=history.latest_payment(),
        yearly=yearly_table(history),
    )
