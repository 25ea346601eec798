"""Usage history management commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from launcher_search.cli._helpers import get_config, get_engine, output_result, run_async

history_app = typer.Typer(help="Usage history management")


@history_app.command("show")
def show(
    action_id: Annotated[
        str | None,
        typer.Argument(help="Action id (all actions when omitted)"),
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show recorded usage.

    Examples:
        lsearch history show
        lsearch history show calc --json
    """

    async def _show() -> dict:
        engine = await get_engine(get_config())
        if action_id is not None:
            record = engine.history_for(action_id)
            if record is None:
                return {"error": f"No usage recorded for {action_id}"}
            return {"actions": {action_id: record.to_dict()}}
        return {
            "actions": {aid: rec.to_dict() for aid, rec in engine.history.records().items()}
        }

    result = run_async(_show())
    if json_output or "error" in result:
        output_result(result, json_output)
        if "error" in result:
            raise typer.Exit(1)
        return

    actions = result["actions"]
    if not actions:
        typer.secho("No usage recorded yet.", fg=typer.colors.YELLOW)
        return
    for aid, usage in sorted(actions.items(), key=lambda kv: -kv[1]["usage_count"]):
        typer.secho(f"{aid}", bold=True, nl=False)
        typer.echo(f"  used {usage['usage_count']}x, last {usage['last_used_time'] or 'never'}")
        for query, entry in usage["query_affinity"].items():
            typer.secho(f"    '{query}': {entry['count']:.2f}", fg=typer.colors.BRIGHT_BLACK)


@history_app.command("clear")
def clear(
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation")] = False,
) -> None:
    """Forget all usage history."""
    if not force and not typer.confirm("Delete all usage history?"):
        raise typer.Abort()

    async def _clear() -> dict:
        engine = await get_engine(get_config())
        engine.clear_history()
        return {"message": "Usage history cleared"}

    output_result(run_async(_clear()))


@history_app.command("export")
def export(
    output: Annotated[
        Path | None,
        typer.Argument(help="Output file (stdout when omitted)"),
    ] = None,
) -> None:
    """Export usage history as JSON.

    Examples:
        lsearch history export backup.json
        lsearch history export > backup.json
    """

    async def _export() -> str:
        engine = await get_engine(get_config())
        return engine.export_history()

    text = run_async(_export())
    if output is None:
        typer.echo(text)
        return
    output.write_text(text, encoding="utf-8")
    typer.secho(f"Exported usage history to {output}", fg=typer.colors.GREEN)


@history_app.command("import")
def import_(
    file: Annotated[Path, typer.Argument(help="JSON file produced by 'history export'")],
) -> None:
    """Replace usage history with an exported file."""
    try:
        text = file.read_text(encoding="utf-8")
    except OSError as e:
        typer.secho(f"Cannot read {file}: {e}", fg=typer.colors.RED)
        raise typer.Exit(1) from e

    async def _import() -> bool:
        engine = await get_engine(get_config())
        return engine.import_history(text)

    if not run_async(_import()):
        output_result({"error": f"{file} is not a usage history export of a supported version"})
        raise typer.Exit(1)
    output_result({"message": f"Imported usage history from {file}"})


def register(app: typer.Typer) -> None:
    """Register history commands on the app."""
    app.add_typer(history_app, name="history")
