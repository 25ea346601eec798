"""API routes for the launcher-search server."""

from launcher_search.server.routes.actions import router as actions_router
from launcher_search.server.routes.history import router as history_router
from launcher_search.server.routes.search import router as search_router

__all__ = [
    "actions_router",
    "history_router",
    "search_router",
]
