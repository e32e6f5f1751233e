import math

import pytest

from assessa.adapters.config import AppConfig
from assessa.adapters.memory_repo import InMemoryAnalysisRepository
from assessa.domain.tax_records import TaxHistory
from assessa.services.underwriting import analyze_deal, analyze_property, analyze_scenarios
from deal_fixtures.history import baseline_inputs, delinquent_history, steady_growth_history


def test_analyze_deal_combines_all_pieces():
    analysis = analyze_deal(baseline_inputs(), delinquent_history())

    assert analysis.deal.net_operating_income == pytest.approx(130_000.0)
    assert analysis.tax.tax_delinquency_risk is True
    assert analysis.tax.tax_appeal_potential is True
    assert analysis.advisory.recommendations[0].startswith("Consider filing a tax assessment appeal")
    assert analysis.advisory.warnings[0].startswith("WARNING: Property has history of tax delinquency")


def test_analyze_deal_without_history_is_flat_and_neutral():
    analysis = analyze_deal(baseline_inputs())

    assert analysis.tax.tax_trend_3_year == 0.0
    assert analysis.tax.tax_assessed_vs_market == 1.0
    assert analysis.tax.projected_taxes == [0.0] * 5


def test_analyze_deal_is_repeatable():
    inputs, history = baseline_inputs(), steady_growth_history()

    assert analyze_deal(inputs, history) == analyze_deal(inputs, history)


def test_to_dict_is_flat():
    out = analyze_deal(baseline_inputs(down_payment_pct=100.0), steady_growth_history()).to_dict()

    for key in [
        "net_operating_income",
        "cap_rate",
        "cash_flow",
        "cash_on_cash_return",
        "debt_service_coverage",
        "effective_tax_rate",
        "tax_assessed_vs_market",
        "tax_trend_3_year",
        "tax_appeal_potential",
        "projected_taxes",
        "tax_delinquency_risk",
        "assessment_increase_risk",
        "recommendations",
        "warnings",
    ]:
        assert key in out
    assert out["dscr_defined"] is False
    assert math.isinf(out["debt_service_coverage"])


def test_analyze_property_unknown_id_uses_empty_history(history_repo):
    cfg = AppConfig()
    out = analyze_property(
        "does-not-exist",
        {"purchase_price": 1_000_000, "gross_rental_income": 150_000},
        history_repo=history_repo,
        cfg=cfg,
    )

    assert out["tax_data"] == {"assessments": [], "payments": []}
    assert out["data_quality"]["tax_data_available"] is False
    assert out["data_quality"]["property_taxes_source"] == "national_average"
    assert out["financials"]["property_taxes"] == pytest.approx(11_000.0)
    assert out["analysis"]["tax_trend_3_year"] == 0.0
    assert "analysis_id" not in out


def test_analyze_property_uses_stored_history_and_saves(history_repo):
    repo = InMemoryAnalysisRepository()

    out = analyze_property(
        "prop-delinquent",
        {"purchase_price": 2_000_000, "gross_rental_income": 200_000, "down_payment_pct": "25%"},
        history_repo=history_repo,
        analysis_repo=repo,
        save=True,
    )

    assert out["analysis_id"] == 1
    assert out["financials"]["property_taxes"] == pytest.approx(60_000.0)
    assert out["data_quality"]["property_taxes_source"] == "assessment"
    assert out["analysis"]["tax_delinquency_risk"] is True
    assert out["analysis"]["break_even_rent"] > 0
    assert out["analysis"]["target_cash_on_cash"] == pytest.approx(0.10)
    assert repo.list_recent("prop-delinquent")[0]["analysis_id"] == 1


def test_analyze_property_respects_configured_history_limit(history_repo):
    cfg = AppConfig(HISTORY_LIMIT=2)

    out = analyze_property(
        "prop-steady",
        {"purchase_price": 1_000_000, "gross_rental_income": 150_000},
        history_repo=history_repo,
        cfg=cfg,
    )

    assert len(out["tax_data"]["assessments"]) == 2
    # two records are not enough for a trend
    assert out["analysis"]["tax_trend_3_year"] == 0.0


def test_analyze_property_full_vacancy_has_infinite_break_even(history_repo):
    out = analyze_property(
        "prop-steady",
        {"purchase_price": 1_000_000, "gross_rental_income": 150_000, "vacancy_rate_pct": 100},
        history_repo=history_repo,
    )

    assert out["analysis"]["break_even_rent"] == math.inf
    assert out["analysis"]["break_even_rent_defined"] is False


def test_analyze_scenarios_ranks_by_cash_on_cash():
    rows = analyze_scenarios(
        {
            "ask": baseline_inputs(),
            "negotiated": baseline_inputs(purchase_price=1_600_000.0),
            "all_cash": baseline_inputs(down_payment_pct=100.0),
        }
    )

    # negotiated ~8.5%, all cash 6.5%, asking price ~2.0%
    assert [r["scenario"] for r in rows] == ["negotiated", "all_cash", "ask"]
    assert {r["scenario"] for r in rows} == {"ask", "negotiated", "all_cash"}
    negotiated = next(r for r in rows if r["scenario"] == "negotiated")
    assert negotiated["purchase_price"] == pytest.approx(1_600_000.0)


def test_empty_history_is_explicit():
    assert TaxHistory.empty().is_empty
