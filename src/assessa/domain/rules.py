from assessa.domain.assumptions import UnderwritingThresholds
from assessa.domain.underwriting import Advisory, DealMetrics, TaxMetrics


def generate_recommendations(
    deal: DealMetrics,
    tax: TaxMetrics,
    thresholds: UnderwritingThresholds,
) -> list[str]:
    recommendations = []

    # 1. Tax-side opportunities and exposure
    if tax.tax_appeal_potential:
        over_pct = (tax.tax_assessed_vs_market - 1) * 100
        recommendations.append(
            f"Consider filing a tax assessment appeal. Property is assessed {over_pct:.1f}% above purchase price."
        )
    if tax.tax_trend_3_year > thresholds.budget_trend_cagr:
        recommendations.append(
            f"Budget for accelerating tax increases. Historical trend shows "
            f"{tax.tax_trend_3_year * 100:.1f}% annual growth."
        )
    if tax.effective_tax_rate > thresholds.high_tax_rate:
        recommendations.append(
            f"High tax rate area ({tax.effective_tax_rate * 100:.2f}%). "
            "Factor into cash flow projections and consider tax-efficient strategies."
        )
    if tax.assessment_increase_risk == "high":
        recommendations.append(
            "High risk of assessment increases. Consider setting aside additional reserves for tax escalation."
        )

    # 2. Return and coverage
    if deal.cash_on_cash_return < thresholds.min_cash_on_cash:
        coc = f"{deal.cash_on_cash_return * 100:.1f}%" if deal.coc_defined else "undefined with no equity"
        recommendations.append(
            f"Low cash-on-cash return ({coc}). "
            "Consider negotiating purchase price or increasing rents."
        )
    if deal.debt_service_coverage < thresholds.min_dscr:
        recommendations.append(
            "Low debt service coverage ratio. Consider larger down payment or better financing terms."
        )

    return recommendations


def generate_warnings(
    deal: DealMetrics,
    tax: TaxMetrics,
    thresholds: UnderwritingThresholds,
) -> list[str]:
    warnings = []

    if tax.tax_delinquency_risk:
        warnings.append(
            "WARNING: Property has history of tax delinquency. Verify current tax status before purchase."
        )
    if deal.cash_flow < 0:
        warnings.append(f"WARNING: Negative cash flow of ${abs(deal.cash_flow):,.0f} annually.")
    if deal.debt_service_coverage < thresholds.warn_dscr:
        warnings.append("WARNING: Property cannot cover debt service with current income projections.")
    if deal.cap_rate < thresholds.warn_cap_rate:
        warnings.append(
            f"WARNING: Very low cap rate ({deal.cap_rate * 100:.1f}%). "
            "Property may be overpriced for income potential."
        )
    if tax.tax_trend_3_year > thresholds.warn_trend_cagr:
        warnings.append(
            f"WARNING: Extremely high tax escalation trend ({tax.tax_trend_3_year * 100:.1f}% annually). "
            "Future cash flows at high risk."
        )

    return warnings


def build_advisory(
    deal: DealMetrics,
    tax: TaxMetrics,
    thresholds: UnderwritingThresholds,
) -> Advisory:
    """
    Rule-based advice. Lists keep the fixed rule order above (not sorted by
    severity). Undefined ratios (nan) never trigger a rule.
    """
    return Advisory(
        recommendations=generate_recommendations(deal, tax, thresholds),
        warnings=generate_warnings(deal, tax, thresholds),
    )
