"""Free-text fund query endpoint."""
from fastapi import APIRouter, HTTPException
from fastapi.concurrency import run_in_threadpool

from fundquery.config import get_settings
from fundquery.models.schemas import QueryRequest, QueryResponse
from fundquery.services.fund_narrator import get_fund_narrator
from fundquery.services.fund_store import get_fund_store
from fundquery.services.query_interpreter import answer_query

router = APIRouter()


@router.post("", response_model=QueryResponse)
async def run_query(request: QueryRequest):
    """
    Interpret a query, rank matching funds and add a narrative.

    The ranked rows and summary are computed from a dataset snapshot before
    Gemini is contacted; the narrative can only append text to them.
    """
    query = request.query.strip()
    if not query:
        raise HTTPException(status_code=400, detail="Query text is required")

    records = get_fund_store().records
    result = answer_query(query, records)

    settings = get_settings()
    narrator = get_fund_narrator()
    answer = await run_in_threadpool(
        narrator.narrate,
        query,
        result,
        settings.narrative_enabled and request.narrate,
    )

    return QueryResponse(
        query=query,
        criteria=result.criteria,
        columns=result.columns,
        rows=result.rows,
        summary=result.summary,
        total_matches=result.total_matches,
        content=answer.content,
        narrative=answer.narrative,
        narrative_error=answer.narrative_error,
    )
