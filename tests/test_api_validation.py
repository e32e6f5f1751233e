# tests/test_api_validation.py
import pytest


BASE = {
    "purchase_price": 1_000_000,
    "down_payment_pct": 25,
    "interest_rate_pct": 7,
    "loan_term_years": 30,
    "gross_rental_income": 120_000,
    "vacancy_rate_pct": 5,
}


@pytest.mark.parametrize(
    "override",
    [
        {"purchase_price": 0},
        {"loan_term_years": 0},
        {"down_payment_pct": 101},
        {"vacancy_rate_pct": -1},
    ],
)
def test_invalid_financials_rejected(client, override):
    r = client.post("/analyze", json={"financials": BASE | override})
    assert r.status_code == 422


def test_missing_required_fields(client):
    r = client.post("/analyze", json={"financials": {"purchase_price": 1_000_000}})
    assert r.status_code == 422


def test_break_even_at_full_vacancy_is_undefined(client):
    r = client.post("/break-even-rent", json=BASE | {"vacancy_rate_pct": 100})
    assert r.status_code == 200
    body = r.json()
    assert body["break_even_rent_monthly"] is None
    assert body["break_even_rent_defined"] is False


def test_property_analyze_bad_raw_financials_is_400(client):
    r = client.post(
        "/properties/prop-steady/analyze",
        json={"financials": {"purchase_price": 1_000_000, "gross_rental_income": 100_000, "down_payment_pct": "abc"}},
    )
    assert r.status_code == 400


def test_too_many_scenarios_is_422(client):
    r = client.post("/scenarios", json={"scenarios": {f"s{i}": BASE for i in range(6)}})
    assert r.status_code == 422
