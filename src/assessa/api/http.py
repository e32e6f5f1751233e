# src/assessa/api/http.py
from __future__ import annotations

import math
from functools import lru_cache
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query

from assessa.adapters.config import config
from assessa.adapters.logging_utils import get_logger
from assessa.adapters.sql_repo import SqlAnalysisRepository, SqlTaxHistoryRepository
from assessa.analysis.solvers import break_even_rent, max_purchase_price
from assessa.analysis.tax_history import summarize_tax_history
from assessa.domain.deal import DealInputs
from assessa.domain.errors import PropertyNotFoundError
from assessa.domain.ports import AnalysisRepository, TaxHistoryRepository
from assessa.domain.tax_records import TaxHistory
from assessa.services.underwriting import analyze_deal, analyze_property, analyze_scenarios
from .schemas import AnalyzeRequest, AnalyzeResponse, MaxPriceRequest, PropertyAnalyzeRequest, ScenariosRequest

logger = get_logger(__name__)

app = FastAPI(title="assessa")


@lru_cache(maxsize=1)
def get_history_repo() -> TaxHistoryRepository:
    return SqlTaxHistoryRepository(config.DB_URI)


@lru_cache(maxsize=1)
def get_analysis_repo() -> AnalysisRepository:
    return SqlAnalysisRepository(config.DB_URI)


def _json_safe(value: Any) -> Any:
    # inf / nan sentinels go out as null; *_defined flags carry the meaning
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


@app.post("/analyze", response_model=AnalyzeResponse)
def analyze_endpoint(payload: AnalyzeRequest) -> AnalyzeResponse:
    """Stateless analysis: caller supplies both the deal and the tax snapshot."""
    history = TaxHistory(assessments=tuple(payload.assessments), payments=tuple(payload.payments))
    analysis = analyze_deal(
        payload.financials,
        history,
        thresholds=config.thresholds(),
        projection_years=payload.projection_years,
    )
    return AnalyzeResponse(**_json_safe(analysis.to_dict()))


@app.post("/properties/{property_id}/analyze", response_model=AnalyzeResponse)
def analyze_property_endpoint(
    property_id: str,
    body: PropertyAnalyzeRequest,
    history_repo: TaxHistoryRepository = Depends(get_history_repo),
    analysis_repo: AnalysisRepository = Depends(get_analysis_repo),
) -> AnalyzeResponse:
    try:
        result = analyze_property(
            property_id,
            body.financials,
            history_repo=history_repo,
            analysis_repo=analysis_repo,
            save=body.save,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return AnalyzeResponse(**_json_safe(result))


@app.get("/properties/{property_id}/tax-history")
def tax_history_endpoint(
    property_id: str,
    years: int = Query(5, ge=1, le=50),
    history_repo: TaxHistoryRepository = Depends(get_history_repo),
) -> dict[str, Any]:
    try:
        # several installments per year: take twice as many payment rows as years
        history = history_repo.get_history(property_id, limit=years, payment_limit=years * 2)
    except PropertyNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    summary = summarize_tax_history(history)
    return _json_safe(
        {
            "property_id": property_id,
            "assessments": [a.model_dump() for a in history.assessments],
            "payments": [p.model_dump() for p in history.payments],
            **summary.to_dict(),
        }
    )


@app.post("/break-even-rent")
def break_even_rent_endpoint(financials: DealInputs) -> dict[str, Any]:
    rent = break_even_rent(financials)
    return _json_safe(
        {
            "break_even_rent_monthly": rent,
            "break_even_rent_annual": rent * 12.0,
            "break_even_rent_defined": math.isfinite(rent),
        }
    )


@app.post("/max-purchase-price")
def max_purchase_price_endpoint(body: MaxPriceRequest) -> dict[str, Any]:
    price = max_purchase_price(body.financials, body.target_cash_on_cash)
    return {
        "target_cash_on_cash": body.target_cash_on_cash,
        "max_purchase_price": price,
        "feasible": price > 0,
    }


@app.post("/scenarios")
def scenarios_endpoint(body: ScenariosRequest) -> dict[str, Any]:
    rows = analyze_scenarios(body.scenarios)
    return _json_safe({"scenarios": rows, "total_scenarios": len(rows)})


@app.get("/analyses")
def list_analyses(
    property_id: str | None = None,
    limit: int = Query(10, ge=1, le=100),
    analysis_repo: AnalysisRepository = Depends(get_analysis_repo),
) -> list[dict[str, Any]]:
    return _json_safe(analysis_repo.list_recent(property_id=property_id, limit=limit))
