from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Literal

AssessmentRisk = Literal["low", "medium", "high"]


@dataclass(frozen=True)
class DealMetrics:
    loan_amount: float
    down_payment: float
    monthly_payment: float
    annual_debt_service: float
    effective_gross_income: float
    total_expenses: float

    net_operating_income: float   # annual, before debt service
    cap_rate: float               # NOI / purchase price
    cash_flow: float              # annual, after debt service
    cash_on_cash_return: float    # cash flow / down payment; +-inf or nan with zero equity
    debt_service_coverage: float  # NOI / debt service; inf or nan with zero debt

    @property
    def dscr_defined(self) -> bool:
        return self.annual_debt_service > 0

    @property
    def coc_defined(self) -> bool:
        return self.down_payment > 0


@dataclass(frozen=True)
class TaxMetrics:
    effective_tax_rate: float
    tax_assessed_vs_market: float
    tax_trend_3_year: float                  # CAGR of assessed value
    tax_appeal_potential: bool
    projected_taxes: list[float]
    tax_delinquency_risk: bool
    assessment_increase_risk: AssessmentRisk


@dataclass(frozen=True)
class Advisory:
    recommendations: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TaxEnhancedAnalysis:
    deal: DealMetrics
    tax: TaxMetrics
    advisory: Advisory

    def to_dict(self) -> dict[str, Any]:
        """Flat view: standard metrics, tax metrics, then advisory lists."""
        out: dict[str, Any] = {}
        out.update(asdict(self.deal))
        out["dscr_defined"] = self.deal.dscr_defined
        out["coc_defined"] = self.deal.coc_defined
        out.update(asdict(self.tax))
        out.update(asdict(self.advisory))
        return out
