# src/assessa/analysis/risk.py
from __future__ import annotations

from assessa.analysis.tax_trend import compute_cagr, project_history
from assessa.domain.assumptions import UnderwritingThresholds
from assessa.domain.deal import DealInputs
from assessa.domain.tax_records import TaxHistory
from assessa.domain.underwriting import AssessmentRisk, TaxMetrics

_DELINQUENT_STATUSES = {"unpaid", "delinquent"}


def effective_tax_rate(history: TaxHistory) -> float:
    payment = history.latest_payment()
    assessment = history.latest_assessment()
    if payment is None or assessment is None:
        return 0.0
    if not payment.amount_paid or not assessment.assessed_value:
        return 0.0
    return payment.amount_paid / assessment.assessed_value


def assessed_vs_market(history: TaxHistory, purchase_price: float) -> float:
    """Latest assessed value over purchase price; 1.0 (neutral) without data."""
    assessment = history.latest_assessment()
    if assessment is None or purchase_price <= 0:
        return 1.0
    return assessment.assessed_value / purchase_price


def has_appeal_potential(ratio: float, thresholds: UnderwritingThresholds) -> bool:
    return ratio > thresholds.appeal_ratio


def has_delinquency_risk(history: TaxHistory) -> bool:
    for payment in history.payments:
        if payment.status in _DELINQUENT_STATUSES:
            return True
        if (
            payment.amount_due is not None
            and payment.amount_paid is not None
            and payment.amount_paid < payment.amount_due
        ):
            return True
    return False


def classify_assessment_risk(cagr: float, thresholds: UnderwritingThresholds) -> AssessmentRisk:
    # Only the historical trend feeds this today.
    if cagr > thresholds.assessment_high_cagr:
        return "high"
    if cagr > thresholds.assessment_medium_cagr:
        return "medium"
    return "low"


def build_tax_metrics(
    inputs: DealInputs,
    history: TaxHistory,
    thresholds: UnderwritingThresholds,
    projection_years: int = 5,
) -> TaxMetrics:
    cagr = compute_cagr(history)
    ratio = assessed_vs_market(history, inputs.purchase_price)

    return TaxMetrics(
        effective_tax_rate=effective_tax_rate(history),
        tax_assessed_vs_market=ratio,
        tax_trend_3_year=cagr,
        tax_appeal_potential=has_appeal_potential(ratio, thresholds),
        projected_taxes=project_history(history, projection_years),
        tax_delinquency_risk=has_delinquency_risk(history),
        assessment_increase_risk=classify_assessment_risk(cagr, thresholds),
    )
