"""Resource details renderer."""

from __future__ import annotations

from rich.panel import Panel

from awstui_core.panels import empty_panel, kv_table, panel_from_table


def render(title: str, rows: list[tuple[str, str]], theme: dict[str, str]) -> Panel:
    if not rows:
        return empty_panel(title, "No details available.", theme)
    return panel_from_table(title, kv_table(rows), theme)
