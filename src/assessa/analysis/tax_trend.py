# src/assessa/analysis/tax_trend.py
from __future__ import annotations

from typing import Iterable

from assessa.domain.tax_records import TaxAssessmentRecord, TaxHistory

MIN_TREND_RECORDS = 3


def compute_cagr(history: TaxHistory | Iterable[TaxAssessmentRecord]) -> float:
    """
    Compound annual growth rate of assessed value, first to last valid year.

    Assessments compound year over year, so this is geometric rather than an
    average of yearly deltas. Fewer than three valid records, or a span of zero
    years, is treated as a flat trend (0.0) rather than an error.
    """
    if not isinstance(history, TaxHistory):
        history = TaxHistory(assessments=tuple(history))

    valid = history.valid_assessments()
    if len(valid) < MIN_TREND_RECORDS:
        return 0.0

    first, last = valid[0], valid[-1]
    years = last.assessment_year - first.assessment_year
    if years == 0:
        return 0.0

    return (last.assessed_value / first.assessed_value) ** (1.0 / years) - 1.0


def baseline_tax(history: TaxHistory) -> float:
    """
    Starting point for projections: the latest actual payment, else the latest
    reported annual taxes, else 0.
    """
    payment = history.latest_payment()
    if payment is not None and payment.amount_paid:
        return float(payment.amount_paid)

    assessment = history.latest_assessment()
    if assessment is not None and assessment.annual_taxes:
        return float(assessment.annual_taxes)

    return 0.0


def project_taxes(baseline: float, cagr: float, years: int) -> list[float]:
    """projection[i] = baseline * (1 + cagr) ** (i + 1)"""
    return [baseline * (1.0 + cagr) ** (i + 1) for i in range(max(years, 0))]


def project_history(history: TaxHistory, years: int = 5) -> list[float]:
    return project_taxes(baseline_tax(history), compute_cagr(history), years)
