"""Usage history API routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from launcher_search.engine.search import ActionSearchEngine
from launcher_search.server.dependencies import get_engine
from launcher_search.server.models import ErrorResponse, UsageRecordResponse

router = APIRouter(prefix="/history", tags=["history"])


@router.get(
    "/{action_id}",
    response_model=UsageRecordResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get usage history of an action",
)
async def get_history(
    action_id: str,
    engine: Annotated[ActionSearchEngine, Depends(get_engine)],
) -> UsageRecordResponse:
    record = engine.history_for(action_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"No usage recorded for {action_id}")
    return UsageRecordResponse.from_record(action_id, record)


@router.delete("", summary="Clear all usage history")
async def clear_history(
    engine: Annotated[ActionSearchEngine, Depends(get_engine)],
) -> dict[str, str]:
    engine.clear_history()
    return {"status": "cleared"}
