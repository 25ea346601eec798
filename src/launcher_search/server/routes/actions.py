"""Action catalog API routes."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from launcher_search.core.registry import RegistryError
from launcher_search.engine.search import ActionSearchEngine
from launcher_search.server.dependencies import get_engine
from launcher_search.server.models import (
    ActionResponse,
    ErrorResponse,
    RegisterActionsRequest,
    RegisterActionsResponse,
    UnregisterActionsRequest,
    UnregisterActionsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/actions", tags=["actions"])


@router.post(
    "",
    response_model=RegisterActionsResponse,
    responses={422: {"model": ErrorResponse}},
    summary="Register actions",
)
async def register_actions(
    request: RegisterActionsRequest,
    engine: Annotated[ActionSearchEngine, Depends(get_engine)],
) -> RegisterActionsResponse:
    """Register a batch of actions; the batch is rejected as a whole on error."""
    try:
        registered = engine.register_actions([a.to_spec() for a in request.actions])
    except RegistryError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    return RegisterActionsResponse(
        registered=[a.id for a in registered],
        total=len(engine.registry),
    )


@router.delete(
    "",
    response_model=UnregisterActionsResponse,
    summary="Unregister actions",
)
async def unregister_actions(
    request: UnregisterActionsRequest,
    engine: Annotated[ActionSearchEngine, Depends(get_engine)],
) -> UnregisterActionsResponse:
    """Remove actions with their descendants. Unknown ids are ignored."""
    removed = engine.unregister_actions(request.ids)
    return UnregisterActionsResponse(removed=removed, total=len(engine.registry))


@router.get(
    "/{action_id}",
    response_model=ActionResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get an action",
)
async def get_action(
    action_id: str,
    engine: Annotated[ActionSearchEngine, Depends(get_engine)],
) -> ActionResponse:
    action = engine.get_action(action_id)
    if action is None:
        raise HTTPException(status_code=404, detail=f"Action {action_id} not found")
    return ActionResponse.from_action(action)


@router.get(
    "/{action_id}/ancestors",
    response_model=list[ActionResponse],
    responses={404: {"model": ErrorResponse}},
    summary="Get the parent chain of an action",
)
async def get_ancestors(
    action_id: str,
    engine: Annotated[ActionSearchEngine, Depends(get_engine)],
) -> list[ActionResponse]:
    """Ancestors of an action, top-most first."""
    if engine.get_action(action_id) is None:
        raise HTTPException(status_code=404, detail=f"Action {action_id} not found")
    return [ActionResponse.from_action(a) for a in engine.ancestors(action_id)]
