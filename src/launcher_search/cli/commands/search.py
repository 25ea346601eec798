"""Search and usage commands: search, record."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from launcher_search.cli._helpers import (
    get_config,
    get_engine,
    load_catalog,
    output_result,
    run_async,
)
from launcher_search.core.registry import RegistryError


def search(
    query: Annotated[str, typer.Argument(help="Search query")],
    catalog: Annotated[
        Path,
        typer.Option("--catalog", "-c", help="JSON file with the action catalog"),
    ],
    root: Annotated[
        str | None,
        typer.Option("--root", "-r", help="Only search below this action id"),
    ] = None,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", min=1, help="Maximum number of results"),
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Search an action catalog, ranked by your usage history.

    Examples:
        lsearch search calc --catalog actions.json
        lsearch search "jsq" --catalog actions.json --limit 5
        lsearch search "" --catalog actions.json --root settings
    """
    specs = load_catalog(catalog)

    async def _search() -> dict:
        config = get_config()
        engine = await get_engine(config)
        if limit is not None:
            engine.config = engine.config.with_updates(max_results=limit)

        try:
            engine.register_actions(specs)
        except RegistryError as e:
            return {"error": str(e)}

        matches = engine.search_scored(query, root_id=root)
        return {"query": query, "results": [m.to_dict() for m in matches]}

    result = run_async(_search())
    output_result(result, json_output)
    if "error" in result:
        raise typer.Exit(1)


def record(
    action_id: Annotated[str, typer.Argument(help="Id of the launched action")],
    query: Annotated[
        str,
        typer.Option("--query", "-q", help="Query the action was launched from"),
    ] = "",
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Record a launch of an action in the usage history.

    Examples:
        lsearch record calc
        lsearch record calc --query calc
    """

    async def _record() -> dict:
        config = get_config()
        engine = await get_engine(config)
        usage = engine.record_usage(action_id, query)
        return {
            "message": f"Recorded usage of {action_id} (total {usage.usage_count})",
            "action_id": action_id,
            "usage": usage.to_dict(),
        }

    output_result(run_async(_record()), json_output)


def register(app: typer.Typer) -> None:
    """Register search commands on the app."""
    app.command()(search)
    app.command()(record)
