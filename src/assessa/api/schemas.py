# src/assessa/api/schemas.py
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from assessa.domain.deal import DealInputs
from assessa.domain.tax_records import TaxAssessmentRecord, TaxPaymentRecord


# --------------------------------------------
# Analyze
# --------------------------------------------

class AnalyzeRequest(BaseModel):
    """Deal inputs plus an inline tax-history snapshot (newest first)."""
    financials: DealInputs
    assessments: list[TaxAssessmentRecord] = Field(default_factory=list)
    payments: list[TaxPaymentRecord] = Field(default_factory=list)
    projection_years: int = Field(default=5, ge=0, le=30)


class PropertyAnalyzeRequest(BaseModel):
    """
    Raw financials for a stored property. Kept permissive: missing expense
    fields are estimated, percent strings like "7%" are accepted.
    """
    model_config = ConfigDict(extra="allow")

    financials: dict[str, Any]
    save: bool = True


class AnalyzeResponse(BaseModel):
    model_config = ConfigDict(extra="allow")


# --------------------------------------------
# Solvers
# --------------------------------------------

class MaxPriceRequest(BaseModel):
    financials: DealInputs
    target_cash_on_cash: float = Field(default=0.10, description="0.10 means 10%")


class ScenariosRequest(BaseModel):
    scenarios: dict[str, DealInputs] = Field(..., min_length=1, max_length=5)
