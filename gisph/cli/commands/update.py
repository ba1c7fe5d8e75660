"""
Update Command.

Checks GitHub for a newer release and, unless --check is given, replaces
the local installation with it.
"""

import asyncio

import typer
from rich.console import Console
from rich.markup import escape

from gisph.cli.context import AppContext
from gisph.core.exceptions import ApplicationError, InstallDirNotFoundError, UpdateError
from gisph.update.checker import UpdateCheckResult
from gisph.update.install_dir import default_probes, find_install_dir
from gisph.update.installer import SelfUpdater

console = Console()
err_console = Console(stderr=True)


def update(
    ctx: typer.Context,
    check: bool = typer.Option(False, "--check", help="Check for updates without installing"),
    force: bool = typer.Option(False, "--force", help="Force update even if already on latest version"),
) -> None:
    """
    Update the CLI to the latest version.

    Examples:
        gisph update --check
        gisph update
        gisph update --force
    """
    app_ctx = ctx.ensure_object(AppContext)

    if check:
        result = asyncio.run(_check(app_ctx))
        report_check_result(result)
        if result.error:
            raise typer.Exit(1)
        return

    asyncio.run(_perform_update(app_ctx, force))


async def _check(app_ctx: AppContext) -> UpdateCheckResult:
    with err_console.status("Checking for updates..."):
        return await app_ctx.update_checker().check_for_updates()


def report_check_result(result: UpdateCheckResult) -> None:
    """Print the outcome of an explicit update check."""
    if result.error:
        err_console.print("[red]✗ Failed to check for updates[/red]")
        err_console.print(f"[red]Error: {escape(result.error)}[/red]")
        return

    if result.update_available:
        console.print("[yellow]🎉 Update available![/yellow]")
        console.print(f"[dim]   Current: {result.current_version}[/dim]")
        console.print(f"[green]   Latest:  {result.latest_version}[/green]")
        console.print("[cyan]   Run [bold]gisph update[/bold] to upgrade[/cyan]")
    else:
        console.print(f"[green]✓ You're on the latest version ({result.current_version})[/green]")


def _print_reinstall_hint(app_ctx: AppContext, lead: str) -> None:
    script = app_ctx.app_config.application.update.install_script_url
    err_console.print(f"[yellow]{lead}[/yellow]")
    err_console.print(f"[cyan]curl -fsSL {script} | bash[/cyan]")


async def _perform_update(app_ctx: AppContext, force: bool) -> None:
    console.print("[blue]🔄 Updating CLI...[/blue]")

    if not force:
        result = await _check(app_ctx)
        if result.error:
            report_check_result(result)
            raise typer.Exit(1)
        if not result.update_available:
            console.print(f"[green]✓ Already on the latest version ({result.current_version})[/green]")
            console.print("[dim]Use --force to reinstall anyway[/dim]")
            return

    try:
        update_config = app_ctx.app_config.application.update
        install_dir = find_install_dir(
            default_probes(app_ctx.settings.myapi_install_dir, update_config.well_known_dirs)
        )
    except InstallDirNotFoundError as e:
        err_console.print("[red]✗ Update failed[/red]")
        err_console.print(f"[red]Error: {escape(e.message)}[/red]")
        _print_reinstall_hint(app_ctx, "Please reinstall using:")
        raise typer.Exit(1)

    updater = SelfUpdater(
        app_ctx.archive_url(),
        install_dir,
        timeout=app_ctx.app_config.application.timeouts.download,
        transport=app_ctx.transport,
    )

    try:
        with err_console.status("Downloading latest version..."):
            new_version = await updater.run()
    except ApplicationError as e:
        err_console.print("[red]✗ Update failed[/red]")
        err_console.print(f"[red]Error: {escape(e.message)}[/red]")
        if isinstance(e, UpdateError) and e.backup_path is not None:
            err_console.print(
                f"[yellow]Restore it with: mv {escape(str(e.backup_path))} {escape(str(install_dir))}[/yellow]"
            )
        _print_reinstall_hint(app_ctx, "If the problem persists, try reinstalling:")
        raise typer.Exit(1)

    console.print("[green]✓ Update complete![/green]")
    console.print(f"[green]✓ Successfully updated to version {escape(new_version)}[/green]")
    console.print("[dim]Changes will take effect the next time you run gisph.[/dim]")
