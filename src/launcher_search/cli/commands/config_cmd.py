"""CLI commands for configuration management."""

from __future__ import annotations

from typing import Annotated

import typer

from launcher_search.cli._helpers import get_config, output_result

config_app = typer.Typer(help="Configuration management")


@config_app.command("show")
def show(
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show the effective configuration.

    Examples:
        lsearch config show
        LAUNCHER_SEARCH_BACKEND=sqlite lsearch config show --json
    """
    config = get_config()
    data = config.to_dict()
    if json_output:
        output_result(data, as_json=True)
        return

    typer.secho(f"Config file: {config.config_path}", fg=typer.colors.BRIGHT_BLACK)
    typer.secho(f"History:     {config.history_path}", fg=typer.colors.BRIGHT_BLACK)
    for section in ("ranking", "storage", "server"):
        typer.secho(f"\n[{section}]", fg=typer.colors.CYAN, bold=True)
        for key, value in data[section].items():
            typer.echo(f"  {key} = {value}")


@config_app.command("init")
def init(
    force: Annotated[bool, typer.Option("--force", "-f", help="Overwrite existing file")] = False,
) -> None:
    """Write a config file with the current settings."""
    config = get_config()
    if config.config_path.exists() and not force:
        typer.secho(f"{config.config_path} already exists (use --force)", fg=typer.colors.YELLOW)
        raise typer.Exit(1)
    config.save()
    output_result({"message": f"Wrote {config.config_path}"})


def register(app: typer.Typer) -> None:
    """Register config commands on the app."""
    app.add_typer(config_app, name="config")
