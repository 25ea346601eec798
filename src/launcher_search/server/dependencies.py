"""Shared dependencies for API routes."""

from __future__ import annotations

from launcher_search.engine.search import ActionSearchEngine


async def get_engine() -> ActionSearchEngine:
    """
    Dependency to get the search engine.

    This is overridden by the application at startup.
    """
    raise NotImplementedError("Search engine not configured")
