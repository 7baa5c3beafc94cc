from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any, Literal

import yaml
from rich.console import Console
from rich.table import Table

from hetzner_cli.utils.serialization import to_plain_data

OutputFormat = Literal["json", "yaml", "table"]


def _cell(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def _lookup(row: dict[str, Any], column: str) -> Any:
    """Resolve ``a.b`` style column names against nested rows."""

    current: Any = row
    for part in column.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current


def emit(
    value: Any,
    *,
    output: OutputFormat = "json",
    columns: Sequence[str] | None = None,
    console: Console | None = None,
) -> None:
    """Render SDK/CLI output as json, yaml, or table."""

    plain = to_plain_data(value)
    if output == "json":
        print(json.dumps(plain, indent=2))
        return
    if output == "yaml":
        print(yaml.safe_dump(plain, sort_keys=False), end="")
        return

    console = console or Console()
    if isinstance(plain, list) and all(isinstance(item, dict) for item in plain):
        if not plain:
            console.print("No results.")
            return
        keys: list[str] = list(columns or [])
        if not keys:
            for row in plain:
                for key in row:
                    key_str = str(key)
                    if key_str not in keys:
                        keys.append(key_str)
        table = Table(show_header=True, header_style="bold")
        for key in keys:
            table.add_column(key)
        for row in plain:
            table.add_row(*[_cell(_lookup(row, key)) for key in keys])
        console.print(table)
        return

    if isinstance(plain, dict):
        table = Table(show_header=True, header_style="bold")
        table.add_column("key")
        table.add_column("value")
        for key, val in plain.items():
            if columns and key not in columns:
                continue
            table.add_row(str(key), _cell(val))
        console.print(table)
        return

    console.print(str(plain))
