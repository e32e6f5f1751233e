# src/assessa/domain/deal.py
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from assessa.domain.errors import InvalidDealInputError

# Optional annual operating-expense buckets, in the order they are summed.
EXPENSE_FIELDS = (
    "property_management",
    "maintenance_repairs",
    "insurance",
    "utilities",
    "other_expenses",
    "property_taxes",
)


class DealInputs(BaseModel):
    """
    Financial inputs of a proposed deal.

    Percent fields are whole percents (25 means 25%), money fields are annual.
    Missing expense buckets count as zero; estimating them is the caller's job
    (see services.enrichment).
    """
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    purchase_price: float = Field(..., gt=0, description="Purchase price")
    down_payment_pct: float = Field(..., ge=0, le=100, description="25 means 25% down")
    interest_rate_pct: float = Field(..., ge=0, description="7.0 means 7% APR")
    loan_term_years: int = Field(..., gt=0, description="Amortization period in years")
    gross_rental_income: float = Field(..., ge=0, description="Gross scheduled rent, annual")
    vacancy_rate_pct: float = Field(..., ge=0, le=100)

    property_management: float | None = Field(default=None, ge=0)
    maintenance_repairs: float | None = Field(default=None, ge=0)
    insurance: float | None = Field(default=None, ge=0)
    utilities: float | None = Field(default=None, ge=0)
    other_expenses: float | None = Field(default=None, ge=0)
    property_taxes: float | None = Field(default=None, ge=0)

    @classmethod
    def build(cls, **values: Any) -> DealInputs:
        """Construct and validate, surfacing failures as InvalidDealInputError."""
        try:
            return cls(**values)
        except ValidationError as err:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in err.errors()
            )
            raise InvalidDealInputError(problems) from err

    @property
    def total_expenses(self) -> float:
        return sum((getattr(self, name) or 0.0) for name in EXPENSE_FIELDS)

    def with_price(self, purchase_price: float) -> DealInputs:
        if purchase_price <= 0:
            raise InvalidDealInputError("purchase_price must be > 0")
        return self.model_copy(update={"purchase_price": float(purchase_price)})
