"""
Output Formatting.

Pure functions that turn API data into text for stdout. Tables are built
with Rich and rendered to a plain string (no colour codes), so the result
can be echoed, piped, or compared in tests.
"""

import io
import json
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

NO_DATA = "No data to display"
_RENDER_WIDTH = 240


def format_table(rows: Any) -> str:
    """
    Format a list of dicts as a column-aligned table.

    Headers are taken from the first row; missing cells render empty.
    Empty or non-list input yields a neutral message instead of an error.
    """
    if not isinstance(rows, list) or not rows or not isinstance(rows[0], dict):
        return NO_DATA

    headers = list(rows[0].keys())

    table = Table(box=box.SQUARE, show_header=True)
    for header in headers:
        table.add_column(Text(str(header)))

    for row in rows:
        if not isinstance(row, dict):
            continue
        table.add_row(*(_cell(row.get(header)) for header in headers))

    buffer = io.StringIO()
    console = Console(file=buffer, width=_RENDER_WIDTH, color_system=None, highlight=False)
    console.print(table)
    return buffer.getvalue().rstrip("\n")


def _cell(value: Any) -> Text:
    if value is None:
        return Text("")
    if isinstance(value, (dict, list)):
        return Text(json.dumps(value, ensure_ascii=False))
    return Text(str(value))


def format_json(data: Any) -> str:
    """Format any JSON-serializable value as pretty-printed JSON."""
    return json.dumps(data, indent=2, ensure_ascii=False)


def format_key_value(data: Any) -> str:
    """Format a dict as ``key: value`` lines; other values are stringified."""
    if not isinstance(data, dict):
        return str(data)

    lines = []
    for key, value in data.items():
        if isinstance(value, (dict, list)):
            value = json.dumps(value, indent=2, ensure_ascii=False)
        lines.append(f"{key}: {value}")
    return "\n".join(lines)
