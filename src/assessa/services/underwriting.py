# src/assessa/services/underwriting.py
from __future__ import annotations

import math
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any

from assessa.adapters.config import AppConfig, config as default_config
from assessa.adapters.logging_utils import get_logger
from assessa.analysis.deal_batch import compare_scenarios
from assessa.analysis.risk import build_tax_metrics
from assessa.analysis.solvers import break_even_rent, max_purchase_price
from assessa.domain.assumptions import UnderwritingThresholds
from assessa.domain.deal import DealInputs
from assessa.domain.errors import PropertyNotFoundError
from assessa.domain.finance import compute_deal_metrics
from assessa.domain.ports import AnalysisRepository, TaxHistoryRepository
from assessa.domain.rules import build_advisory
from assessa.domain.tax_records import TaxHistory
from assessa.domain.underwriting import TaxEnhancedAnalysis
from assessa.services.enrichment import enrich_financials

logger = get_logger(__name__)


def analyze_deal(
    inputs: DealInputs,
    history: TaxHistory | None = None,
    *,
    thresholds: UnderwritingThresholds | None = None,
    projection_years: int = 5,
) -> TaxEnhancedAnalysis:
    """
    Tax-enhanced underwriting for one deal against a tax-history snapshot.

    Pure: nothing is read or written here. An unknown property should arrive
    as an empty history.
    """
    history = history or TaxHistory.empty()
    thresholds = thresholds or UnderwritingThresholds()

    deal = compute_deal_metrics(inputs)
    tax = build_tax_metrics(inputs, history, thresholds, projection_years)
    advisory = build_advisory(deal, tax, thresholds)

    return TaxEnhancedAnalysis(deal=deal, tax=tax, advisory=advisory)


def load_history(
    property_id: str,
    repo: TaxHistoryRepository,
    limit: int,
) -> TaxHistory:
    try:
        return repo.get_history(property_id, limit=limit)
    except PropertyNotFoundError:
        logger.info("tax_history_not_found", extra={"context": {"property_id": property_id}})
        return TaxHistory.empty()


def analyze_property(
    property_id: str,
    raw_financials: dict[str, Any],
    *,
    history_repo: TaxHistoryRepository,
    analysis_repo: AnalysisRepository | None = None,
    save: bool = False,
    cfg: AppConfig | None = None,
) -> dict[str, Any]:
    """
    Full request flow for a stored property:
    1) load the tax snapshot (unknown property -> empty history)
    2) fill missing financials from history / config defaults
    3) run the engine and both solvers
    4) optionally persist the result
    """
    cfg = cfg or default_config

    history = load_history(property_id, history_repo, cfg.HISTORY_LIMIT)
    inputs, quality = enrich_financials(raw_financials, history, cfg)

    analysis = analyze_deal(
        inputs,
        history,
        thresholds=cfg.thresholds(),
        projection_years=cfg.PROJECTION_YEARS,
    )

    result = analysis.to_dict()
    rent = break_even_rent(inputs)
    result["break_even_rent"] = rent
    result["break_even_rent_defined"] = math.isfinite(rent)
    result["max_purchase_price"] = max_purchase_price(inputs, cfg.TARGET_CASH_ON_CASH)
    result["target_cash_on_cash"] = cfg.TARGET_CASH_ON_CASH

    out: dict[str, Any] = {
        "property_id": property_id,
        "financials": inputs.model_dump(),
        "analysis": result,
        "tax_data": {
            "assessments": [a.model_dump() for a in history.assessments],
            "payments": [p.model_dump() for p in history.payments],
        },
        "data_quality": asdict(quality),
        "calculated_at": datetime.now(timezone.utc).isoformat(),
    }

    logger.info(
        "property_analyzed",
        extra={
            "context": {
                "property_id": property_id,
                "cagr": analysis.tax.tax_trend_3_year,
                "n_recommendations": len(analysis.advisory.recommendations),
                "n_warnings": len(analysis.advisory.warnings),
            }
        },
    )

    if save and analysis_repo is not None:
        out["analysis_id"] = analysis_repo.save_analysis(property_id, result, raw_financials)

    return out


def analyze_scenarios(scenarios: dict[str, DealInputs]) -> list[dict[str, Any]]:
    """Ranked side-by-side comparison of named deal variants."""
    frame = compare_scenarios(scenarios)
    return [{"scenario": name, **row} for name, row in frame.to_dict(orient="index").items()]
