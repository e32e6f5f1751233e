# src/assessa/adapters/config.py
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from assessa.domain.assumptions import UnderwritingThresholds


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # persistence
    DB_URI: str = Field(default="sqlite:///assessa.db")

    # How much history to pull per property, and how far to project taxes
    HISTORY_LIMIT: int = Field(default=5, ge=1)
    PROJECTION_YEARS: int = Field(default=5, ge=0)

    # Solver target used by the property analysis service
    TARGET_CASH_ON_CASH: float = Field(default=0.10)

    # -----------------------------
    # Caller-side estimation defaults (whole percents for deal terms)
    # -----------------------------
    DEFAULT_DOWN_PAYMENT_PCT: float = Field(default=25.0)
    DEFAULT_INTEREST_RATE_PCT: float = Field(default=7.0)
    DEFAULT_LOAN_TERM_YEARS: int = Field(default=30)
    DEFAULT_VACANCY_RATE_PCT: float = Field(default=5.0)

    MGMT_PCT_OF_INCOME: float = Field(default=0.08)
    MAINTENANCE_PCT_OF_INCOME: float = Field(default=0.05)
    INSURANCE_PCT_OF_PRICE: float = Field(default=0.003)
    NATIONAL_AVG_TAX_RATE: float = Field(default=0.011)

    # -----------------------------
    # Risk / advisory thresholds (fractions)
    # -----------------------------
    APPEAL_RATIO: float = Field(default=1.10)
    ASSESSMENT_HIGH_CAGR: float = Field(default=0.05)
    ASSESSMENT_MEDIUM_CAGR: float = Field(default=0.03)
    BUDGET_TREND_CAGR: float = Field(default=0.04)
    HIGH_TAX_RATE: float = Field(default=0.025)
    MIN_CASH_ON_CASH: float = Field(default=0.08)
    MIN_DSCR: float = Field(default=1.25)
    WARN_DSCR: float = Field(default=1.0)
    WARN_CAP_RATE: float = Field(default=0.04)
    WARN_TREND_CAGR: float = Field(default=0.08)

    model_config = SettingsConfigDict(
        env_prefix="ASSESSA_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "TARGET_CASH_ON_CASH",
        "MGMT_PCT_OF_INCOME",
        "MAINTENANCE_PCT_OF_INCOME",
        "INSURANCE_PCT_OF_PRICE",
        "NATIONAL_AVG_TAX_RATE",
        "ASSESSMENT_HIGH_CAGR",
        "ASSESSMENT_MEDIUM_CAGR",
        "BUDGET_TREND_CAGR",
        "HIGH_TAX_RATE",
        "MIN_CASH_ON_CASH",
        "WARN_CAP_RATE",
        "WARN_TREND_CAGR",
        mode="before",
    )
    @classmethod
    def _to_non_negative_fraction(cls, v: Any) -> Any:
        if v is None:
            return v
        is_percent = False
        if isinstance(v, str):
            is_percent = v.strip().endswith("%")
            v = v.strip().replace("%", "")
        try:
            f = float(v)
        except Exception as err:
            raise ValueError("rate must be numeric or percent-like") from err
        if is_percent or f > 1.0:
            f = f / 100.0
        if f < 0:
            raise ValueError("rate must be non-negative")
        return f

    @field_validator("APPEAL_RATIO", "MIN_DSCR", "WARN_DSCR", mode="before")
    @classmethod
    def _ratio_positive(cls, v: Any) -> Any:
        f = float(v)
        if f <= 0:
            raise ValueError("ratio thresholds must be > 0")
        return f

    def thresholds(self) -> UnderwritingThresholds:
        return UnderwritingThresholds(
            appeal_ratio=self.APPEAL_RATIO,
            assessment_high_cagr=self.ASSESSMENT_HIGH_CAGR,
            assessment_medium_cagr=self.ASSESSMENT_MEDIUM_CAGR,
            budget_trend_cagr=self.BUDGET_TREND_CAGR,
            high_tax_rate=self.HIGH_TAX_RATE,
            min_cash_on_cash=self.MIN_CASH_ON_CASH,
            min_dscr=self.MIN_DSCR,
            warn_dscr=self.WARN_DSCR,
            warn_cap_rate=self.WARN_CAP_RATE,
            warn_trend_cagr=self.WARN_TREND_CAGR,
        )


config = AppConfig()
