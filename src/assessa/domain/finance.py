# src/assessa/domain/finance.py
import math

from assessa.domain.deal import DealInputs
from assessa.domain.underwriting import DealMetrics


def annuity_payment(rate_monthly: float, n_months: int, principal: float) -> float:
    """
    Standard fixed-rate amortization formula:
    M = P * r / (1 - (1+r)^-n)
    The denominator is taken as -expm1(-n * log1p(r)) so tiny rates keep their
    precision and huge rates settle at P * r instead of overflowing.
    Zero interest degrades to straight-line principal / n.
    """
    r = rate_monthly
    if r == 0:
        return principal / n_months
    discount = -math.expm1(-n_months * math.log1p(r))
    if discount == 0:
        return principal / n_months
    return principal * r / discount


def monthly_payment(inputs: DealInputs) -> float:
    loan_amount = inputs.purchase_price * (1 - inputs.down_payment_pct / 100.0)
    return annuity_payment(
        rate_monthly=inputs.interest_rate_pct / 100.0 / 12.0,
        n_months=inputs.loan_term_years * 12,
        principal=loan_amount,
    )


def _ratio_or_sentinel(numerator: float, denominator: float) -> float:
    # zero denominator: signed infinity, or nan when the numerator is zero too
    if denominator > 0:
        return numerator / denominator
    if numerator == 0:
        return math.nan
    return math.copysign(math.inf, numerator)


def compute_deal_metrics(inputs: DealInputs) -> DealMetrics:
    """
    Core underwriting math for one deal. No I/O, no estimation of missing values.

    DSCR with no debt (all-cash purchase) is +inf when NOI is positive and nan
    (undefined) otherwise. Cash-on-cash with no equity follows the same idea,
    signed by cash flow.
    """
    purchase_price = inputs.purchase_price
    loan_amount = purchase_price * (1 - inputs.down_payment_pct / 100.0)
    down_payment = purchase_price - loan_amount

    # --- debt service ---
    mortgage_monthly = monthly_payment(inputs)
    annual_debt_service = mortgage_monthly * 12.0

    # --- income / expenses ---
    effective_gross_income = inputs.gross_rental_income * (1 - inputs.vacancy_rate_pct / 100.0)
    total_expenses = inputs.total_expenses

    noi = effective_gross_income - total_expenses
    cash_flow = noi - annual_debt_service

    if annual_debt_service > 0:
        dscr = noi / annual_debt_service
    else:
        dscr = math.inf if noi > 0 else math.nan

    return DealMetrics(
        loan_amount=loan_amount,
        down_payment=down_payment,
        monthly_payment=mortgage_monthly,
        annual_debt_service=annual_debt_service,
        effective_gross_income=effective_gross_income,
        total_expenses=total_expenses,
        net_operating_income=noi,
        cap_rate=noi / purchase_price,
        cash_flow=cash_flow,
        cash_on_cash_return=_ratio_or_sentinel(cash_flow, down_payment),
        debt_service_coverage=dscr,
    )
