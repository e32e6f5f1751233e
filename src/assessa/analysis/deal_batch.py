# src/assessa/analysis/deal_batch.py

from __future__ import annotations

from typing import Mapping

import numpy as np
import pandas as pd

from assessa.domain.deal import DealInputs

MAX_SCENARIOS = 5

INPUT_COLUMNS = [
    "purchase_price",
    "down_payment_pct",
    "interest_rate_pct",
    "loan_term_years",
    "gross_rental_income",
    "vacancy_rate_pct",
    "total_expenses",
]


def compute_deal_metrics_df(df: pd.DataFrame) -> pd.DataFrame:
    """
    Vectorized deal metrics over a DataFrame, one row per scenario.

    Expected columns: see INPUT_COLUMNS (percents are whole percents,
    money is annual). Returns a new frame with the same index and the same
    sentinels as domain.finance: DSCR is +inf / nan without debt, cash-on-cash
    is +-inf / nan without equity.
    """
    missing = [c for c in INPUT_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"missing columns: {missing}")

    price = df["purchase_price"].to_numpy(dtype=float)
    dp_pct = df["down_payment_pct"].to_numpy(dtype=float)
    rate_pct = df["interest_rate_pct"].to_numpy(dtype=float)
    n_months = df["loan_term_years"].to_numpy(dtype=float) * 12.0
    gross = df["gross_rental_income"].to_numpy(dtype=float)
    vacancy_pct = df["vacancy_rate_pct"].to_numpy(dtype=float)
    expenses = df["total_expenses"].to_numpy(dtype=float)

    # --- Financing ---
    loan_amount = price * (1.0 - dp_pct / 100.0)
    down_payment = price - loan_amount

    r_monthly = rate_pct / 100.0 / 12.0
    mortgage_monthly = np.zeros_like(price, dtype=float)

    # 1 - (1+r)^-n without overflow for large r or cancellation for tiny r
    discount = -np.expm1(-n_months * np.log1p(r_monthly))

    mask_straight = discount == 0
    mortgage_monthly[mask_straight] = loan_amount[mask_straight] / n_months[mask_straight]

    mask_rate = ~mask_straight
    if mask_rate.any():
        mortgage_monthly[mask_rate] = loan_amount[mask_rate] * r_monthly[mask_rate] / discount[mask_rate]

    annual_debt_service = mortgage_monthly * 12.0

    # --- NOI / cash flow ---
    egi = gross * (1.0 - vacancy_pct / 100.0)
    noi = egi - expenses
    cash_flow = noi - annual_debt_service

    with np.errstate(divide="ignore", invalid="ignore"):
        dscr = noi / annual_debt_service
        coc = cash_flow / down_payment
        cap_rate = noi / price

    no_debt = annual_debt_service <= 0
    dscr[no_debt] = np.where(noi[no_debt] > 0, np.inf, np.nan)

    no_equity = down_payment <= 0
    coc[no_equity] = np.where(
        cash_flow[no_equity] == 0, np.nan, np.copysign(np.inf, cash_flow[no_equity])
    )

    return pd.DataFrame(
        {
            "loan_amount": loan_amount,
            "down_payment": down_payment,
            "monthly_payment": mortgage_monthly,
            "annual_debt_service": annual_debt_service,
            "effective_gross_income": egi,
            "total_expenses": expenses,
            "net_operating_income": noi,
            "cap_rate": cap_rate,
            "cash_flow": cash_flow,
            "cash_on_cash_return": coc,
            "debt_service_coverage": dscr,
        },
        index=df.index,
    )


def inputs_to_frame(scenarios: Mapping[str, DealInputs]) -> pd.DataFrame:
    rows = []
    for name, inputs in scenarios.items():
        row = {c: getattr(inputs, c) for c in INPUT_COLUMNS if c != "total_expenses"}
        row["total_expenses"] = inputs.total_expenses
        row["scenario"] = name
        rows.append(row)
    return pd.DataFrame(rows, columns=["scenario", *INPUT_COLUMNS]).set_index("scenario")


def compare_scenarios(scenarios: Mapping[str, DealInputs]) -> pd.DataFrame:
    """
    Side-by-side metrics for up to MAX_SCENARIOS named deal variants, ranked by
    cash-on-cash return (best first).
    """
    if not scenarios:
        raise ValueError("at least one scenario is required")
    if len(scenarios) > MAX_SCENARIOS:
        raise ValueError(f"at most {MAX_SCENARIOS} scenarios can be compared at once")

    frame = inputs_to_frame(scenarios)
    metrics = compute_deal_metrics_df(frame)
    out = frame[["purchase_price"]].join(metrics)
    return out.sort_values("cash_on_cash_return", ascending=False, na_position="last")
