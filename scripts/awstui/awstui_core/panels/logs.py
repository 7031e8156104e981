"""Paged log output renderer."""

from __future__ import annotations

from rich.panel import Panel
from rich.text import Text

from awstui_core.pagination import Paginator
from awstui_core.panels import empty_panel, title_markup


def render(paginator: Paginator, theme: dict[str, str], loading: bool = False) -> Panel:
    if paginator.total_lines == 0:
        return empty_panel("Logs", "Loading..." if loading else "No logs found.", theme)

    body = Text(no_wrap=True, overflow="ellipsis")
    for line in paginator.visible_lines():
        body.append(line + "\n", style=theme["accent"] if line.startswith("--- Log Stream:") else "default")
    return Panel(
        body,
        title=title_markup(f"Logs ({paginator.total_lines} lines)", theme),
        subtitle=paginator.indicator() or None,
        border_style=theme["border"],
    )
