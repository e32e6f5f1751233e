# src/assessa/services/enrichment.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from assessa.adapters.config import AppConfig
from assessa.domain.deal import DealInputs
from assessa.domain.tax_records import TaxHistory

REQUIRED_FIELDS = ["purchase_price", "gross_rental_income"]


@dataclass
class DataQuality:
    tax_data_available: bool
    estimated_values: dict[str, bool] = field(default_factory=dict)
    property_taxes_source: str = "provided"   # provided | assessment | assessed_value_x_rate | national_average


def _to_num(val: Any, field_name: str) -> float:
    """
    Coerce values like 250000, "250000", "6.5" or "6.5%" into float.
    A trailing % is stripped; the number is kept as a whole percent.
    """
    if val is None:
        raise ValueError(f"Missing required numeric field: {field_name}")
    if isinstance(val, bool):
        raise ValueError(f"Invalid type for {field_name}: {type(val)}")
    if isinstance(val, (int, float)):
        return float(val)
    if isinstance(val, str):
        s = val.strip().replace(",", "").replace("$", "")
        if s.endswith("%"):
            s = s[:-1]
        try:
            return float(s)
        except ValueError as err:
            raise ValueError(f"Invalid number for {field_name}: {val!r}") from err
    raise ValueError(f"Invalid type for {field_name}: {type(val)}")


def _to_num_optional(val: Any, field_name: str) -> float | None:
    """Like _to_num, but blank or missing means None (not provided)."""
    if val is None or (isinstance(val, str) and not val.strip()):
        return None
    return _to_num(val, field_name)


def _property_taxes_from_history(history: TaxHistory) -> tuple[float | None, str]:
    latest = history.latest_assessment()
    if latest is None:
        return None, ""
    if latest.annual_taxes:
        return float(latest.annual_taxes), "assessment"
    if latest.assessed_value and latest.tax_rate:
        return float(latest.assessed_value * latest.tax_rate), "assessed_value_x_rate"
    return None, ""


def enrich_financials(
    raw: dict[str, Any],
    history: TaxHistory,
    config: AppConfig,
) -> tuple[DealInputs, DataQuality]:
    """
    Fill the gaps in caller-provided financials before underwriting.

    - deal terms fall back to config defaults
    - management / maintenance are estimated as a share of gross income,
      insurance as a share of price
    - property taxes come from the latest assessment, then assessed value
      times rate, then the national average rate on the purchase price

    Zero or blank counts as missing, matching how listing feeds report
    unknown expenses.
    """
    for name in REQUIRED_FIELDS:
        if not raw.get(name):
            raise ValueError(f"Missing required field: {name}")

    price = _to_num(raw["purchase_price"], "purchase_price")
    gross = _to_num(raw["gross_rental_income"], "gross_rental_income")

    def _term(name: str, default: float) -> float:
        v = _to_num_optional(raw.get(name), name)
        return default if v is None else v

    def _expense(name: str) -> float | None:
        v = _to_num_optional(raw.get(name), name)
        return v if v else None

    estimated: dict[str, bool] = {}

    management = _expense("property_management")
    estimated["property_management"] = management is None
    if management is None:
        management = gross * config.MGMT_PCT_OF_INCOME

    maintenance = _expense("maintenance_repairs")
    estimated["maintenance_repairs"] = maintenance is None
    if maintenance is None:
        maintenance = gross * config.MAINTENANCE_PCT_OF_INCOME

    insurance = _expense("insurance")
    estimated["insurance"] = insurance is None
    if insurance is None:
        insurance = price * config.INSURANCE_PCT_OF_PRICE

    taxes = _expense("property_taxes")
    source = "provided"
    if taxes is None:
        taxes, source = _property_taxes_from_history(history)
    if taxes is None:
        taxes, source = price * config.NATIONAL_AVG_TAX_RATE, "national_average"
    estimated["property_taxes"] = source != "provided"

    inputs = DealInputs.build(
        purchase_price=price,
        down_payment_pct=_term("down_payment_pct", config.DEFAULT_DOWN_PAYMENT_PCT),
        interest_rate_pct=_term("interest_rate_pct", config.DEFAULT_INTEREST_RATE_PCT),
        loan_term_years=int(_term("loan_term_years", config.DEFAULT_LOAN_TERM_YEARS)),
        gross_rental_income=gross,
        vacancy_rate_pct=_term("vacancy_rate_pct", config.DEFAULT_VACANCY_RATE_PCT),
        property_management=management,
        maintenance_repairs=maintenance,
        insurance=insurance,
        utilities=_expense("utilities"),
        other_expenses=_expense("other_expenses"),
        property_taxes=taxes,
    )

    quality = DataQuality(
        tax_data_available=bool(history.assessments),
        estimated_values=estimated,
        property_taxes_source=source,
    )
    return inputs, quality
