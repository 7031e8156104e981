"""Panel rendering helpers."""

from __future__ import annotations

from rich.panel import Panel
from rich.table import Table
from rich.text import Text


def empty_panel(title: str, message: str, theme: dict[str, str]) -> Panel:
    return Panel(Text(message, style=theme["muted"]), title=title_markup(title, theme), border_style=theme["border"])


def title_markup(title: str, theme: dict[str, str]) -> Text:
    return Text(title, style=theme["subheader"])


def kv_table(rows: list[tuple[str, str]]) -> Table:
    table = Table(box=None, show_header=False, expand=True, pad_edge=False)
    table.add_column("key", style="bold", no_wrap=True)
    table.add_column("value", style="default", overflow="fold")
    for key, value in rows:
        table.add_row(key, value)
    return table


def panel_from_table(title: str, table: Table, theme: dict[str, str], subtitle: str | None = None) -> Panel:
    return Panel(table, title=title_markup(title, theme), subtitle=subtitle, border_style=theme["border"])
