"""Resource list renderer."""

from __future__ import annotations

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from awstui_core.controllers import ListView
from awstui_core.panels import empty_panel, title_markup


def render(listing: ListView, theme: dict[str, str], loading: bool = False) -> Panel:
    visible = listing.visible
    title = f"{listing.title} ({len(visible)})"
    if listing.filter_text or listing.filtering:
        cursor_mark = "_" if listing.filtering else ""
        title += f"  filter: {listing.filter_text}{cursor_mark}"

    if not visible:
        message = "Loading..." if loading else listing.empty_message
        return empty_panel(title, message, theme)

    table = Table.grid(expand=True)
    table.add_column()
    start, end = listing.window_bounds()
    for index in range(start, end):
        item = visible[index]
        selected = index == listing.cursor
        marker = "› " if selected else "  "
        row = Text(f"{marker}{item.title}", style=theme["selected"] if selected else "bold", no_wrap=True, overflow="ellipsis")
        row.append("\n")
        row.append(f"  {item.description}", style=theme["muted"])
        table.add_row(row)

    subtitle = f"{start + 1}-{end} of {len(visible)}" if len(visible) > listing.window else None
    return Panel(table, title=title_markup(title, theme), subtitle=subtitle, border_style=theme["border"])
