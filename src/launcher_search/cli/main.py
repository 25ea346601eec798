"""launcher-search CLI main entry point."""

from __future__ import annotations

import logging
import sys
from typing import Annotated

import typer

from launcher_search.cli.commands import config_cmd, history
from launcher_search.cli.commands import search as search_cmds

# Main app
app = typer.Typer(
    name="lsearch",
    help="launcher-search - personalized command-palette search",
    no_args_is_help=True,
)


@app.callback()
def _configure(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log debug output to stderr")
    ] = False,
) -> None:
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def version() -> None:
    """Show version information."""
    from launcher_search import __version__

    typer.echo(f"launcher-search v{__version__}")


@app.command()
def serve(
    host: Annotated[str | None, typer.Option("--host", help="Bind address")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Port")] = None,
) -> None:
    """Run the REST API server.

    Examples:
        lsearch serve
        lsearch serve --host 0.0.0.0 --port 9000
    """
    try:
        import uvicorn
    except ImportError:
        typer.echo("Error: uvicorn not installed. Run: pip install launcher-search[server]", err=True)
        raise typer.Exit(1) from None

    from launcher_search.cli._helpers import get_config

    settings = get_config().server
    bind_host = host or settings.host
    bind_port = port or settings.port
    typer.echo(f"Starting launcher-search API on http://{bind_host}:{bind_port}")
    typer.echo(f"  Docs: http://{bind_host}:{bind_port}/docs")

    uvicorn.run(
        "launcher_search.server.app:create_app",
        host=bind_host,
        port=bind_port,
        factory=True,
    )


search_cmds.register(app)
history.register(app)
config_cmd.register(app)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
