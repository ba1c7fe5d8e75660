"""
GIS.ph CLI.

Command-line client for the GIS.ph API.
Built with Typer for type-safe commands and Rich for formatted output.

Usage:
    gisph --help                                # Show help
    gisph --version                             # Show version

    # Regions
    gisph regions list                          # Table of regions
    gisph regions list --format json --limit 5  # JSON output
    gisph regions list --filter code:NCR        # Filter by field
    gisph regions get 13                        # Single region as JSON
    gisph regions get 13 --format table         # Single region as table

    # Configuration
    gisph config set apiKey <key>               # Store a value
    gisph config get apiUrl                     # Read a value
    gisph config list                           # Show everything (masked)
    gisph config delete apiKey                  # Remove a value
    gisph config auto-update disable            # Turn off daily update checks

    # Updates
    gisph update --check                        # Check only
    gisph update                                # Install the latest version
    gisph update --force                        # Reinstall even if current

Options:
    --verbose, -v     Enable verbose output
    --debug, -d       Enable debug mode (detailed logging)
    --help            Show help message
"""

import asyncio

import typer
from rich.console import Console

from gisph import __app_name__, __version__
from gisph.cli.commands import config_app, regions_app, update
from gisph.cli.context import AppContext
from gisph.core.logging import get_logger, log_with_source, setup_logging
from gisph.update.auto import UpdateNotice, auto_check_for_updates, is_auto_update_disabled

logger = get_logger(__name__)

app = typer.Typer(
    name="gisph",
    help="CLI tool for GIS.ph API",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)

# Register command groups
app.add_typer(regions_app, name="regions")
app.add_typer(config_app, name="config")
app.command("update")(update)

# Commands that skip the background update check
_NO_AUTO_CHECK = frozenset({"update"})


def print_update_notice(notice: UpdateNotice) -> None:
    """Announce a newer version. Goes to stderr so piped output stays clean."""
    err_console.print()
    err_console.print("[yellow]┌─────────────────────────────────────────┐[/yellow]")
    err_console.print("[yellow]│  🎉 Update Available!                   │[/yellow]")
    err_console.print("[yellow]│                                         │[/yellow]")
    err_console.print(f"[dim]│  Current: {notice.current_version:<29} │[/dim]")
    err_console.print(f"[green]│  Latest:  {notice.latest_version:<29} │[/green]")
    err_console.print("[yellow]│                                         │[/yellow]")
    err_console.print("[cyan]│  Run [bold]gisph update[/bold] to upgrade            │[/cyan]")
    err_console.print("[yellow]└─────────────────────────────────────────┘[/yellow]")


def run_auto_update_check(app_ctx: AppContext) -> None:
    """
    Background update check, run after the command's own output.

    Any failure is swallowed so it can never change the command's result.
    """
    try:
        if is_auto_update_disabled(app_ctx.store):
            return

        application = app_ctx.app_config.application
        checker = app_ctx.update_checker(timeout=application.timeouts.update_check)
        notice = asyncio.run(
            auto_check_for_updates(
                app_ctx.store,
                checker,
                interval_hours=application.update.check_interval_hours,
            )
        )
        if notice is not None:
            print_update_notice(notice)
    except Exception as e:
        log_with_source(logger, "cli", "debug", "Auto update check skipped", error=str(e))


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"{__app_name__} {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """
    CLI tool for GIS.ph API.

    Look up regions, manage local configuration, and keep the CLI up to date.
    """
    # Configure logging based on flags
    if debug:
        setup_logging(level="DEBUG")
        err_console.print("[dim]Debug mode enabled[/dim]")
    elif verbose:
        setup_logging(level="INFO")
    else:
        setup_logging()

    app_ctx = ctx.ensure_object(AppContext)

    if ctx.invoked_subcommand not in _NO_AUTO_CHECK:
        ctx.call_on_close(lambda: run_auto_update_check(app_ctx))


def main() -> None:
    """Console script entry point."""
    app()
