import math

import pytest
from hypothesis import given, settings, strategies as st

from assessa.analysis.solvers import break_even_rent, max_purchase_price
from assessa.domain.deal import DealInputs
from assessa.domain.finance import compute_deal_metrics, monthly_payment


def _break_even_deal(**overrides) -> DealInputs:
    values = dict(
        purchase_price=1_000_000.0,
        down_payment_pct=25.0,
        interest_rate_pct=7.0,
        loan_term_years=30,
        gross_rental_income=0.0,
        vacancy_rate_pct=5.0,
        property_taxes=11_000.0,
    )
    values.update(overrides)
    return DealInputs(**values)


def _amortized_balance(principal: float, annual_rate: float, months: int, payment: float) -> float:
    balance = principal
    for _ in range(months):
        interest = balance * annual_rate / 12
        balance = balance + interest - payment
    return balance


def test_break_even_rent_matches_amortization_table():
    inputs = _break_even_deal()

    payment = monthly_payment(inputs)
    # $750k at 7% over 30y: 6.653025 per $1k
    assert payment == pytest.approx(4_989.77, abs=0.01)
    # the payment fully retires the loan in 360 months
    assert _amortized_balance(750_000.0, 0.07, 360, payment) == pytest.approx(0.0, abs=1e-4)

    assert break_even_rent(inputs) == pytest.approx((payment + 11_000.0 / 12) / 0.95)
    assert break_even_rent(inputs) == pytest.approx(6_217.30, abs=0.05)


def test_break_even_rent_without_vacancy_or_debt():
    inputs = _break_even_deal(down_payment_pct=100.0, vacancy_rate_pct=0.0)

    assert break_even_rent(inputs) == pytest.approx(11_000.0 / 12)


def test_break_even_rent_at_full_vacancy_is_infinite():
    assert break_even_rent(_break_even_deal(vacancy_rate_pct=100.0)) == math.inf


def test_break_even_rent_at_full_vacancy_without_costs_is_undefined():
    inputs = _break_even_deal(vacancy_rate_pct=100.0, down_payment_pct=100.0, property_taxes=None)

    assert math.isnan(break_even_rent(inputs))


def test_break_even_rent_at_vanishing_rate():
    inputs = _break_even_deal(interest_rate_pct=1e-14, vacancy_rate_pct=0.0)

    assert break_even_rent(inputs) == pytest.approx(750_000.0 / 360 + 11_000.0 / 12)


def _solver_deal(**overrides) -> DealInputs:
    """
    NOI fixed at 210k, so cash-on-cash = 840,000 / P - 0.239509 at 7% / 30y
    with 25% down.
    """
    values = dict(
        purchase_price=1.0,
        down_payment_pct=25.0,
        interest_rate_pct=7.0,
        loan_term_years=30,
        gross_rental_income=300_000.0,
        vacancy_rate_pct=0.0,
        other_expenses=90_000.0,
    )
    values.update(overrides)
    return DealInputs(**values)


def test_max_purchase_price_lands_near_analytic_answer():
    inputs = _solver_deal()

    price = max_purchase_price(inputs, 0.10)

    # 840,000 / (0.10 + 0.239509) ~= 2,474,160
    assert price == pytest.approx(2_474_160.0, abs=2_000.0)
    assert compute_deal_metrics(inputs.with_price(price)).cash_on_cash_return >= 0.10


def test_max_purchase_price_ignores_input_price():
    assert max_purchase_price(_solver_deal(purchase_price=50.0), 0.10) == max_purchase_price(
        _solver_deal(purchase_price=9_000_000.0), 0.10
    )


def test_unreachable_target_returns_zero():
    assert max_purchase_price(_solver_deal(), 50.0) == 0.0


def test_trivial_target_converges_toward_upper_bound():
    price = max_purchase_price(_solver_deal(), -10.0)

    assert 4_990_000.0 < price < 5_000_000.0


def test_search_bounds_are_adjustable():
    price = max_purchase_price(_solver_deal(), 0.10, low=1_000.0, high=20_000_000.0, max_iterations=60, tolerance=1.0)

    assert price == pytest.approx(2_474_160.0, abs=50.0)


@settings(max_examples=50, deadline=None)
@given(
    gross=st.floats(min_value=100_000.0, max_value=800_000.0),
    expense_share=st.floats(min_value=0.0, max_value=0.5),
    rate=st.floats(min_value=0.0, max_value=12.0),
    t1=st.floats(min_value=-0.5, max_value=1.0),
    delta=st.floats(min_value=0.0, max_value=0.5),
)
def test_max_purchase_price_is_non_increasing_in_target(gross, expense_share, rate, t1, delta):
    inputs = _solver_deal(
        gross_rental_income=gross,
        other_expenses=gross * expense_share,
        interest_rate_pct=rate,
    )

    assert max_purchase_price(inputs, t1 + delta) <= max_purchase_price(inputs, t1)
