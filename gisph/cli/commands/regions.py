"""
Region Commands.

Commands for listing and inspecting regions.
"""

import asyncio
import json
from enum import Enum
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape

from gisph.cli.context import AppContext
from gisph.cli.formatter import format_json, format_table
from gisph.core.exceptions import ApplicationError

app = typer.Typer(help="Manage and view regions", no_args_is_help=True)
err_console = Console(stderr=True)


class OutputFormat(str, Enum):
    table = "table"
    json = "json"


def parse_filter(expression: str) -> tuple[str, str] | None:
    """Split a ``field:value`` filter at the first colon. None when malformed."""
    field, sep, value = expression.partition(":")
    if not sep or not field:
        return None
    return field, value


def extract_regions(data: Any) -> list[Any]:
    """Accept a bare list or a list under ``data`` or ``regions``. Anything else is empty."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("data", "regions"):
            if isinstance(data.get(key), list):
                return data[key]
    return []


def region_rows(regions: list[Any]) -> list[dict[str, Any]]:
    return [
        {
            "ID": region.get("id") or "N/A",
            "Name": region.get("name") or "N/A",
            "Title": region.get("title") or "N/A",
            "Code": region.get("code") or "N/A",
        }
        for region in regions
        if isinstance(region, dict)
    ]


def field_rows(record: Any) -> list[dict[str, Any]]:
    if not isinstance(record, dict):
        return [{"Field": "value", "Value": record}]
    return [
        {
            "Field": key,
            "Value": json.dumps(value, ensure_ascii=False) if isinstance(value, (dict, list)) else value,
        }
        for key, value in record.items()
    ]


@app.command("list")
def list_regions(
    ctx: typer.Context,
    output_format: OutputFormat = typer.Option(OutputFormat.table, "--format", "-f", help="Output format"),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", min=1, help="Limit number of results"),
    filter_expr: Optional[str] = typer.Option(None, "--filter", help="Filter results (e.g., status:active)"),
) -> None:
    """
    List all regions.

    Examples:
        gisph regions list
        gisph regions list --format json --limit 5
        gisph regions list --filter code:NCR
    """
    params: dict[str, Any] = {}
    if limit is not None:
        params["limit"] = limit
    if filter_expr:
        parsed = parse_filter(filter_expr)
        if parsed is None:
            err_console.print(f"[red]Invalid filter: {escape(filter_expr)}[/red]")
            err_console.print("[yellow]Use the form field:value, e.g. status:active[/yellow]")
            raise typer.Exit(1)
        field, value = parsed
        params[field] = value

    app_ctx = ctx.ensure_object(AppContext)
    data = asyncio.run(_fetch(app_ctx, "Fetching regions...", "Failed to fetch regions", params=params))
    err_console.print("[green]✓[/green] Regions fetched successfully")

    if output_format == OutputFormat.json:
        typer.echo(format_json(data))
        return

    regions = extract_regions(data)
    if not regions:
        err_console.print("[yellow]No regions found.[/yellow]")
        return

    typer.echo(format_table(region_rows(regions)))
    err_console.print(f"[dim]Total: {len(regions)} region(s)[/dim]")


@app.command("get")
def get_region(
    ctx: typer.Context,
    region_id: str = typer.Argument(..., metavar="ID", help="Region ID"),
    output_format: OutputFormat = typer.Option(OutputFormat.json, "--format", "-f", help="Output format"),
) -> None:
    """
    Get details of a specific region.

    Examples:
        gisph regions get 13
        gisph regions get 13 --format table
    """
    app_ctx = ctx.ensure_object(AppContext)
    data = asyncio.run(
        _fetch(app_ctx, f"Fetching region {region_id}...", f"Failed to fetch region {region_id}", region_id=region_id)
    )
    err_console.print(f"[green]✓[/green] Region {escape(region_id)} fetched successfully")

    if output_format == OutputFormat.json:
        typer.echo(format_json(data))
        return

    record = data
    if isinstance(data, dict):
        record = data.get("data") or data.get("region") or data
    typer.echo(format_table(field_rows(record)))


async def _fetch(
    app_ctx: AppContext,
    status: str,
    failure: str,
    params: dict[str, Any] | None = None,
    region_id: str | None = None,
) -> Any:
    """Run one API call behind a spinner, exiting with 1 on any error."""
    try:
        async with app_ctx.api_client() as client:
            with err_console.status(escape(status)):
                if region_id is not None:
                    return await client.get_region_by_id(region_id)
                return await client.get_regions(params)
    except ApplicationError as e:
        err_console.print(f"[red]✗ {escape(failure)}[/red]")
        err_console.print(f"[red]Error: {escape(e.message)}[/red]")
        raise typer.Exit(1)
