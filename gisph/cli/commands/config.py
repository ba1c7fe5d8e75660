"""
Config Commands.

Commands for reading and writing the per-user configuration store.
"""

import typer
from rich.console import Console
from rich.markup import escape

from gisph.cli.context import AppContext
from gisph.core.exceptions import ApplicationError
from gisph.core.store import AUTO_UPDATE_DISABLED_KEY, ConfigStore, mask_sensitive
from gisph.update.auto import (
    disable_auto_update_check,
    enable_auto_update_check,
    is_auto_update_disabled,
)

app = typer.Typer(help="Manage CLI configuration", no_args_is_help=True)
console = Console()
err_console = Console(stderr=True)


def _store(ctx: typer.Context) -> ConfigStore:
    return ctx.ensure_object(AppContext).store


def _is_internal(key: str) -> bool:
    """Bookkeeping keys that config list does not show."""
    return key.startswith("last") or key == AUTO_UPDATE_DISABLED_KEY


def _fail(error: ApplicationError) -> None:
    err_console.print(f"[red]Error: {escape(error.message)}[/red]")
    raise typer.Exit(1)


@app.command("set")
def set_value(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Configuration key (apiUrl, apiKey)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """
    Set a configuration value.

    Examples:
        gisph config set apiUrl https://api.gis.ph
        gisph config set apiKey sk_live_1234
    """
    try:
        _store(ctx).set(key, value)
    except ApplicationError as e:
        _fail(e)
    console.print(
        f"[green]✓ Configuration updated: {escape(key)} = {escape(mask_sensitive(key, value))}[/green]"
    )


@app.command("get")
def get_value(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Configuration key"),
) -> None:
    """
    Get a configuration value.
    """
    try:
        value = _store(ctx).get(key)
    except ApplicationError as e:
        _fail(e)

    if value is None:
        console.print(f'[yellow]Configuration key "{escape(key)}" not found[/yellow]')
    else:
        console.print(f"[cyan]{escape(key)}:[/cyan] {escape(mask_sensitive(key, value))}")


@app.command("list")
def list_values(ctx: typer.Context) -> None:
    """
    List all configuration values.

    Sensitive values (keys, tokens, passwords, secrets) are masked.
    """
    store = _store(ctx)
    try:
        entries = store.list()
    except ApplicationError as e:
        _fail(e)

    if not entries:
        console.print("[yellow]No configuration set[/yellow]")
        return

    console.print("[bold]Current Configuration:[/bold]")
    for key, value in entries.items():
        if _is_internal(key):
            continue
        console.print(f"  [cyan]{escape(key)}:[/cyan] {escape(mask_sensitive(key, value))}")

    status = "[red]disabled[/red]" if is_auto_update_disabled(store) else "[green]enabled[/green]"
    console.print(f"  [cyan]Auto-update checks:[/cyan] {status}")


@app.command("delete")
def delete_value(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Configuration key"),
) -> None:
    """
    Delete a configuration value.
    """
    try:
        _store(ctx).delete(key)
    except ApplicationError as e:
        _fail(e)
    console.print(f"[green]✓ Configuration deleted: {escape(key)}[/green]")


@app.command("path")
def show_path(ctx: typer.Context) -> None:
    """
    Show where the configuration file is stored.
    """
    typer.echo(str(_store(ctx).path))


@app.command("auto-update")
def auto_update(
    ctx: typer.Context,
    action: str = typer.Argument(..., help="Action: enable or disable"),
) -> None:
    """
    Enable or disable automatic update checks.

    Examples:
        gisph config auto-update disable
        gisph config auto-update enable
    """
    store = _store(ctx)
    try:
        if action == "enable":
            enable_auto_update_check(store)
            console.print("[green]✓ Automatic update checks enabled[/green]")
            console.print("[dim]  The CLI will check for updates once per day[/dim]")
        elif action == "disable":
            disable_auto_update_check(store)
            console.print("[yellow]✓ Automatic update checks disabled[/yellow]")
            console.print("[dim]  You can still manually check with: gisph update --check[/dim]")
        else:
            err_console.print(f"[red]Invalid action: {escape(action)}[/red]")
            err_console.print("[yellow]Usage: gisph config auto-update <enable|disable>[/yellow]")
            raise typer.Exit(1)
    except ApplicationError as e:
        _fail(e)
