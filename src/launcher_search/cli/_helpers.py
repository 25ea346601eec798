"""Shared CLI helpers for configuration, engine setup, and output formatting."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Coroutine
from pathlib import Path
from typing import Any, TypeVar

import typer

from launcher_search.core.action import ActionSpec
from launcher_search.engine.search import ActionSearchEngine
from launcher_search.unified_config import UnifiedConfig
from launcher_search.unified_config import get_config as _get_unified_config

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Engines created during a CLI command; closed (and flushed) before the
# event loop shuts down so aiosqlite's worker thread never outlives it.
_active_engines: list[ActionSearchEngine] = []


def get_config() -> UnifiedConfig:
    """Get configuration, re-read from disk."""
    return _get_unified_config(reload=True)


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run an async CLI command with proper engine cleanup.

    Replaces bare ``asyncio.run()`` so pending history writes are flushed
    and storage connections closed *before* the event loop is torn down.
    """

    async def _with_cleanup() -> T:
        try:
            return await coro
        finally:
            for engine in _active_engines:
                try:
                    await engine.close()
                except Exception:
                    logger.warning("Failed to close engine during cleanup", exc_info=True)
            _active_engines.clear()
            await asyncio.sleep(0)

    return asyncio.run(_with_cleanup())


async def get_engine(config: UnifiedConfig) -> ActionSearchEngine:
    """
    Create an engine with history loaded from the configured storage.

    Args:
        config: Unified configuration

    Returns:
        Engine, closed automatically by :func:`run_async`
    """
    engine = ActionSearchEngine.from_config(config)
    _active_engines.append(engine)
    await engine.load()
    return engine


def load_catalog(path: Path) -> list[ActionSpec]:
    """
    Read action specs from a JSON catalog file.

    The file holds either a list of action objects or ``{"actions": [...]}``.

    Raises:
        typer.BadParameter: If the file is missing or malformed
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise typer.BadParameter(f"Cannot read catalog {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("actions", [])
    if not isinstance(data, list):
        raise typer.BadParameter(f"Catalog {path} must contain a list of actions")

    try:
        return [ActionSpec.from_dict(item) for item in data]
    except (KeyError, TypeError, ValueError) as e:
        raise typer.BadParameter(f"Invalid action in {path}: {e}") from e


def output_result(data: dict[str, Any], as_json: bool = False) -> None:
    """Output result in appropriate format."""
    if as_json:
        typer.echo(json.dumps(data, indent=2, default=str, ensure_ascii=False))
        return

    if "error" in data:
        typer.secho(f"Error: {data['error']}", fg=typer.colors.RED)
    elif "results" in data:
        results = data["results"]
        if not results:
            typer.secho("No matching actions.", fg=typer.colors.YELLOW)
        for i, result in enumerate(results, 1):
            typer.secho(f"{i:>3}. {result['name']}", bold=True, nl=False)
            typer.secho(
                f"  [{result['id']}] score={result['score']:.2f}",
                fg=typer.colors.BRIGHT_BLACK,
            )
    elif "message" in data:
        typer.secho(data["message"], fg=typer.colors.GREEN)
        if data.get("warnings"):
            for warning in data["warnings"]:
                typer.secho(warning, fg=typer.colors.YELLOW)
    else:
        typer.echo(json.dumps(data, indent=2, default=str, ensure_ascii=False))
