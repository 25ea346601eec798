"""FastAPI application factory."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from launcher_search import __version__
from launcher_search.engine.search import ActionSearchEngine
from launcher_search.server.models import HealthResponse
from launcher_search.server.routes import actions_router, history_router, search_router


def create_app(
    engine: ActionSearchEngine | None = None,
    title: str = "launcher-search",
    description: str = "Personalized command-palette search",
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        engine: Engine to serve (default: built from the unified config)
        title: API title
        description: API description

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Load history on startup; flush and close it on shutdown."""
        served = engine
        if served is None:
            from launcher_search.unified_config import get_config

            served = ActionSearchEngine.from_config(get_config())
        await served.load()
        app.state.engine = served
        yield
        await served.close()

    app = FastAPI(
        title=title,
        description=description,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Override engine dependency using the shared module
    from launcher_search.server.dependencies import get_engine as shared_get_engine

    async def get_engine() -> ActionSearchEngine:
        served: ActionSearchEngine = app.state.engine
        return served

    app.dependency_overrides[shared_get_engine] = get_engine

    app.include_router(actions_router)
    app.include_router(search_router)
    app.include_router(history_router)

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        served: ActionSearchEngine = app.state.engine
        return HealthResponse(
            status="healthy",
            version=__version__,
            actions=len(served.registry),
            history_records=len(served.history),
        )

    return app
