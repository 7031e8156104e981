"""Header renderer."""

from __future__ import annotations

from rich.text import Text

APP_TITLE = "AWS Resource Manager"
SEPARATOR = " › "


def render(breadcrumb: list[str], theme: dict[str, str], session_label: str = "") -> Text:
    text = Text(APP_TITLE, style=theme["header"])
    if session_label:
        text.append(f"  [{session_label}]", style=theme["muted"])
    text.append("\n")
    if breadcrumb:
        text.append(SEPARATOR.join(part for part in breadcrumb if part), style=theme["subheader"])
    return text
