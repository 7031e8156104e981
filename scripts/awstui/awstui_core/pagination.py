"""Page windowing over long text such as fetched log output."""

from __future__ import annotations

import math


class Paginator:
    def __init__(self, per_page: int = 20):
        self.per_page = max(1, int(per_page))
        self.lines: list[str] = []
        self.page = 0

    @property
    def total_lines(self) -> int:
        return len(self.lines)

    @property
    def page_count(self) -> int:
        return math.ceil(self.total_lines / self.per_page)

    def set_text(self, text: str) -> None:
        self.lines = text.splitlines()
        self.page = 0

    def set_per_page(self, per_page: int) -> None:
        per_page = max(1, int(per_page))
        if per_page != self.per_page:
            self.per_page = per_page
            self.page = 0

    def clear(self) -> None:
        self.set_text("")

    def page_bounds(self, page_index: int) -> tuple[int, int]:
        if self.total_lines == 0:
            return (0, 0)
        page_index = min(max(0, page_index), self.page_count - 1)
        start = page_index * self.per_page
        end = min(start + self.per_page, self.total_lines)
        return (start, end)

    def visible_lines(self) -> list[str]:
        start, end = self.page_bounds(self.page)
        return self.lines[start:end]

    def next_page(self) -> None:
        if self.page < self.page_count - 1:
            self.page += 1

    def prev_page(self) -> None:
        if self.page > 0:
            self.page -= 1

    def indicator(self) -> str:
        if self.page_count <= 1:
            return ""
        return f"{self.page + 1}/{self.page_count}"
