"""Status line renderer."""

from __future__ import annotations

from rich.console import Group
from rich.spinner import Spinner
from rich.text import Text


def render(status: str, error: str | None, busy: bool, confirming: bool, help_text: str, theme: dict[str, str]):
    if error:
        line = Text(f"Error: {error}", style=theme["error"])
    elif confirming:
        line = Text(status, style=theme["confirm"])
    elif busy:
        line = Spinner("dots", text=Text(status, style=theme["muted"]), style=theme["accent"])
    else:
        line = Text(f"Status: {status}", style=theme["muted"])
    return Group(line, Text(help_text, style=theme["muted"]))
