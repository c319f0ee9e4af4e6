"""Fund list, import and single-fund analysis endpoints."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.concurrency import run_in_threadpool

from fundquery.models.schemas import (
    FilterOptionsResponse,
    FundAnalysisResponse,
    FundListResponse,
    ImportRequest,
    ImportResponse,
    ListFilters,
    SortConfig,
    SortDirection,
    SourceResponse,
)
from fundquery.services.fund_narrator import get_fund_narrator
from fundquery.services.fund_store import get_fund_store
from fundquery.services.gemini_exceptions import GeminiClientError
from fundquery.services.table_view import filter_options, list_funds, next_sort_config

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=FundListResponse)
async def get_funds(
    asset_type: str = Query("All", description="Exact asset type, or All"),
    dividend: str = Query("All", description="Exact dividend policy, or All"),
    search: str = Query("", description="Case-sensitive substring of code or name"),
    sort_key: Optional[str] = Query(None, description="Column to sort by"),
    direction: SortDirection = Query("desc"),
    toggle: Optional[str] = Query(None, description="Column header clicked; toggles against sort_key/direction"),
):
    """
    Return the list view of the current dataset.

    Filters are always applied to the full dataset, then the optional sort.
    With ``toggle`` the returned sort is the one that follows a click on that
    column, given the current ``sort_key`` and ``direction``.
    """
    snapshot = get_fund_store().snapshot()
    filters = ListFilters(asset_type=asset_type, dividend=dividend, search=search)
    sort = SortConfig(key=sort_key, direction=direction)
    if toggle:
        sort = next_sort_config(sort, toggle)
    rows = list_funds(snapshot.records, filters, sort)

    return FundListResponse(
        columns=list(snapshot.columns),
        rows=rows,
        total=len(rows),
        sort=sort,
        filters=filters,
    )


@router.get("/options", response_model=FilterOptionsResponse)
async def get_filter_options():
    """Values for the asset type and dividend drop-downs."""
    return FilterOptionsResponse(**filter_options(get_fund_store().records))


@router.get("/source", response_model=SourceResponse)
async def get_source():
    """Markdown currently loaded, used to pre-fill the import editor."""
    snapshot = get_fund_store().snapshot()
    return SourceResponse(markdown=snapshot.source_text, record_count=len(snapshot.records))


@router.post("/import", response_model=ImportResponse)
async def import_funds(request: ImportRequest):
    """Replace the whole dataset with the posted Markdown table."""
    if not request.markdown.strip():
        raise HTTPException(status_code=400, detail="請輸入有效的 Markdown 資料")

    store = get_fund_store()
    count = store.replace(request.markdown)
    return ImportResponse(
        record_count=count,
        columns=list(store.columns),
        message="✅ 資料匯入成功！資料庫已更新，您可以根據新的數據進行查詢。",
    )


@router.post("/reset", response_model=ImportResponse)
async def reset_funds():
    """Restore the bundled sample dataset."""
    store = get_fund_store()
    count = store.reset()
    return ImportResponse(record_count=count, columns=list(store.columns), message="已恢復預設基金資料。")


@router.get("/{code}")
async def get_fund(code: str):
    """Return a single fund record by code."""
    fund = get_fund_store().find(code)
    if fund is None:
        raise HTTPException(status_code=404, detail="Fund not found")
    return fund


@router.post("/{code}/analysis", response_model=FundAnalysisResponse)
async def analyze_fund(code: str):
    """
    Ask Gemini for an analyst note on one fund.

    Gemini failures are reported in ``error`` rather than as an HTTP error so
    the fund card can still be shown.
    """
    fund = get_fund_store().find(code)
    if fund is None:
        raise HTTPException(status_code=404, detail="Fund not found")

    narrator = get_fund_narrator()
    try:
        analysis = await run_in_threadpool(narrator.analyze_fund, fund)
    except GeminiClientError as exc:
        logger.warning("Fund analysis failed for %s: %s", code, exc)
        return FundAnalysisResponse(code=code, fund=fund, error=str(exc))

    return FundAnalysisResponse(code=code, fund=fund, analysis=analysis)
