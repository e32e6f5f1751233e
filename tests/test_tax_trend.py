import pytest
from hypothesis import given, strategies as st

from assessa.analysis.tax_trend import baseline_tax, compute_cagr, project_history, project_taxes
from assessa.domain.tax_records import TaxAssessmentRecord, TaxHistory, TaxPaymentRecord
from deal_fixtures.history import steady_growth_history


def _assessments(pairs):
    return [TaxAssessmentRecord(assessment_year=y, assessed_value=v) for y, v in pairs]


@given(r=st.floats(min_value=-0.5, max_value=0.5))
def test_cagr_recovers_growth_rate(r):
    records = _assessments([(2020, 100.0), (2021, 100.0 * (1 + r)), (2022, 100.0 * (1 + r) ** 2)])

    assert compute_cagr(records) == pytest.approx(r, abs=1e-9)


def test_fewer_than_three_records_is_flat():
    assert compute_cagr([]) == 0
    assert compute_cagr(_assessments([(2022, 100.0)])) == 0
    assert compute_cagr(_assessments([(2021, 100.0), (2022, 200.0)])) == 0


def test_non_positive_values_are_dropped_before_counting():
    records = _assessments([(2020, 100.0), (2021, 0.0), (2022, 121.0)])
    records.append(TaxAssessmentRecord(assessment_year=2023, assessed_value=None))

    # only two valid records remain
    assert compute_cagr(records) == 0


def test_cagr_ignores_input_order():
    newest_first = _assessments([(2024, 146.41), (2022, 121.0), (2023, 133.1), (2020, 100.0), (2021, 110.0)])

    assert compute_cagr(newest_first) == pytest.approx(0.10)


def test_single_year_span_is_flat():
    records = _assessments([(2022, 100.0), (2022, 150.0), (2022, 200.0)])

    assert compute_cagr(records) == 0


def test_cagr_accepts_history_snapshot():
    assert compute_cagr(steady_growth_history(rate=0.04)) == pytest.approx(0.04)


def test_projection_compounds_from_baseline():
    projected = project_taxes(10_000.0, 0.05, 3)

    assert projected == pytest.approx([10_500.0, 11_025.0, 11_576.25])


def test_projection_with_zero_years_is_empty():
    assert project_taxes(10_000.0, 0.05, 0) == []


def test_baseline_prefers_latest_payment():
    history = TaxHistory(
        assessments=(TaxAssessmentRecord(assessment_year=2024, assessed_value=500_000.0, annual_taxes=9_000.0),),
        payments=(
            TaxPaymentRecord(tax_year=2023, amount_paid=8_000.0),
            TaxPaymentRecord(tax_year=2024, amount_paid=8_800.0),
        ),
    )
    assert baseline_tax(history) == 8_800.0


def test_baseline_falls_back_to_reported_taxes_then_zero():
    with_taxes = TaxHistory(
        assessments=(TaxAssessmentRecord(assessment_year=2024, assessed_value=500_000.0, annual_taxes=9_000.0),),
        payments=(TaxPaymentRecord(tax_year=2024, amount_due=9_000.0, amount_paid=None, status="unpaid"),),
    )
    assert baseline_tax(with_taxes) == 9_000.0
    assert baseline_tax(TaxHistory.empty()) == 0.0


def test_project_history_uses_trend_and_baseline():
    history = steady_growth_history(first_value=1_000_000.0, rate=0.03, years=5)
    latest_paid = 1_000_000.0 * 1.03 ** 4 * 0.02

    projected = project_history(history, years=5)

    assert len(projected) == 5
    assert projected[0] == pytest.approx(latest_paid * 1.03)
    assert projected[-1] == pytest.approx(latest_paid * 1.03 ** 5)


def test_project_history_without_data_is_all_zero():
    assert project_history(TaxHistory.empty(), years=5) == [0.0] * 5
