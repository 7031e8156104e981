"""Domain menu renderer."""

from __future__ import annotations

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from awstui_core.models import Domain
from awstui_core.panels import title_markup


def render(choices: list[Domain], cursor: int, theme: dict[str, str]) -> Panel:
    table = Table.grid(expand=True)
    table.add_column()
    for index, domain in enumerate(choices):
        if index == cursor:
            table.add_row(Text(f"› {domain.value}", style=theme["selected"]))
        else:
            table.add_row(Text(f"  {domain.value}"))
    return Panel(table, title=title_markup("Select a resource type", theme), border_style=theme["border"])
