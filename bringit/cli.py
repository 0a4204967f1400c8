"""CLI for the grocery backend.

Provides startup diagnostics and server entry points.
"""

from typing import Optional

import typer
from rich.console import Console

from bringit.config import get_settings
from bringit.diagnostics import check_modules, check_routes, check_stripe
from bringit.monitoring.logging import setup_logging

app = typer.Typer(
    name="bringit",
    help="BringIt grocery backend - diagnostics and servers",
    add_completion=False,
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    """Console-rendered logs for interactive commands."""
    settings = get_settings()
    setup_logging(
        settings.model_copy(
            update={
                "log_format": "console",
                "log_level": "DEBUG" if verbose else settings.log_level,
            }
        )
    )


@app.command("check-stripe")
def check_stripe_command(
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Exit with status 1 when the key is missing or initialization fails",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
) -> None:
    """Load the Stripe library and check STRIPE_SECRET_KEY."""
    _configure_logging(verbose)
    result = check_stripe(out=console)
    if strict and not result.ok:
        raise typer.Exit(1)


@app.command("check-modules")
def check_modules_command(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
) -> None:
    """Verify the server's third-party modules import."""
    _configure_logging(verbose)
    results = check_modules(out=console)
    if not all(result.ok for result in results):
        raise typer.Exit(1)


@app.command("check-routes")
def check_routes_command(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
) -> None:
    """Verify the HTTP route modules import."""
    _configure_logging(verbose)
    results = check_routes(out=console)
    if not all(result.ok for result in results):
        raise typer.Exit(1)


@app.command()
def serve(
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Override PORT"),
) -> None:
    """Run the main API server."""
    from bringit.api import main as api_main

    if port is not None:
        get_settings().port = port
    api_main.run()


@app.command("test-server")
def test_server(
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Override TEST_SERVER_PORT"),
) -> None:
    """Run the minimal smoke-test server (GET / -> Hello)."""
    from bringit.api import test_server as smoke

    if port is not None:
        get_settings().test_server_port = port
    smoke.run()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """BringIt grocery backend."""
    if version:
        from bringit import __version__

        console.print(f"BringIt backend v{__version__}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


def main() -> None:
    app()


if __name__ == "__main__":
    main()
