# src/assessa/domain/assumptions.py
from pydantic import BaseModel


class UnderwritingThresholds(BaseModel):
    """
    Cut-offs used by the risk classifier and the advisory rules.

    Rates are fractions (0.04 = 4%/yr). Comparisons are strict: a value has to
    be above (or below) the cut-off to trigger.
    """
    # risk classification
    appeal_ratio: float = 1.10
    assessment_high_cagr: float = 0.05
    assessment_medium_cagr: float = 0.03

    # recommendations
    budget_trend_cagr: float = 0.04
    high_tax_rate: float = 0.025
    min_cash_on_cash: float = 0.08
    min_dscr: float = 1.25

    # warnings
    warn_dscr: float = 1.0
    warn_cap_rate: float = 0.04
    warn_trend_cagr: float = 0.08
