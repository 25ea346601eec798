"""Search and usage API routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from launcher_search.engine.search import ActionSearchEngine
from launcher_search.server.dependencies import get_engine
from launcher_search.server.models import (
    SearchRequest,
    SearchResponse,
    SearchResult,
    UsageRecordResponse,
    UsageRequest,
)

router = APIRouter(tags=["search"])


@router.post(
    "/search",
    response_model=SearchResponse,
    summary="Search the catalog",
    description="Rank registered actions for a query, personalized by usage history.",
)
async def search(
    request: SearchRequest,
    engine: Annotated[ActionSearchEngine, Depends(get_engine)],
) -> SearchResponse:
    matches = engine.search_scored(request.query, request.root_id, request.reference_time)
    if request.limit is not None:
        matches = matches[: request.limit]

    return SearchResponse(
        query=request.query,
        results=[
            SearchResult(
                id=m.action.id,
                name=m.action.name,
                score=m.score,
                base_score=m.base_score,
                section=m.action.section,
                subtitle=m.action.subtitle,
            )
            for m in matches
        ],
    )


@router.post(
    "/usage",
    response_model=UsageRecordResponse,
    summary="Record a launch",
)
async def record_usage(
    request: UsageRequest,
    engine: Annotated[ActionSearchEngine, Depends(get_engine)],
) -> UsageRecordResponse:
    """Record that an action was launched; history is saved in the background."""
    record = engine.record_usage(request.action_id, request.query, request.timestamp)
    return UsageRecordResponse.from_record(request.action_id, record)
