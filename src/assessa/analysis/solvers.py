# src/assessa/analysis/solvers.py
from __future__ import annotations

import math

from assessa.adapters.logging_utils import get_logger
from assessa.domain.deal import DealInputs
from assessa.domain.finance import compute_deal_metrics, monthly_payment

logger = get_logger(__name__)

# Search bounds are in the deal's currency units; rescale for other markets.
PRICE_SEARCH_LOW = 100_000.0
PRICE_SEARCH_HIGH = 5_000_000.0
PRICE_SEARCH_MAX_ITERATIONS = 20
PRICE_SEARCH_TOLERANCE = 1_000.0


def break_even_rent(inputs: DealInputs) -> float:
    """
    Monthly gross rent at which collected rent covers the mortgage plus
    operating expenses after vacancy.

    At 100% vacancy no rent is ever collected: +inf when there are costs to
    cover, nan (undefined) when there are none.
    """
    monthly_costs = monthly_payment(inputs) + inputs.total_expenses / 12.0
    occupancy = 1 - inputs.vacancy_rate_pct / 100.0
    if occupancy <= 0:
        return math.inf if monthly_costs > 0 else math.nan

    return monthly_costs / occupancy


def max_purchase_price(
    inputs: DealInputs,
    target_cash_on_cash: float,
    *,
    low: float = PRICE_SEARCH_LOW,
    high: float = PRICE_SEARCH_HIGH,
    max_iterations: int = PRICE_SEARCH_MAX_ITERATIONS,
    tolerance: float = PRICE_SEARCH_TOLERANCE,
) -> float:
    """
    Highest purchase price (bisection) that still reaches the target
    cash-on-cash return, holding every other input fixed. inputs.purchase_price
    is ignored.

    Assumes cash-on-cash falls as price rises. Returns 0.0 when no tried price
    meets the target.
    """
    best = 0.0
    for i in range(max_iterations):
        mid = (low + high) / 2.0
        metrics = compute_deal_metrics(inputs.with_price(mid))

        if metrics.cash_on_cash_return >= target_cash_on_cash:
            best = mid
            low = mid
        else:
            high = mid

        if high - low < tolerance:
            logger.debug(
                "max_price_converged",
                extra={"context": {"iterations": i + 1, "price": best, "target_coc": target_cash_on_cash}},
            )
            break

    return best
