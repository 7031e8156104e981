"""Terminal-size derived sizing for list windows and log pages."""

from __future__ import annotations

# header, breadcrumb, status line, help line and panel borders
CHROME_ROWS = 9
ROWS_PER_ITEM = 2


def page_size_for_height(height: int) -> int:
    return max(1, height - CHROME_ROWS)


def list_window_for_height(height: int) -> int:
    return max(1, page_size_for_height(height) // ROWS_PER_ITEM)
