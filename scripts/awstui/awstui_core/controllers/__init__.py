"""Domain controller base: list views, back navigation, confirmation, failure handling."""

from __future__ import annotations

import enum
import logging
from typing import Callable, Iterable

from awstui_core.commands import DEFAULT_SETTLE_SECONDS, Command
from awstui_core.confirm import ACCEPT_KEYS, REJECT_KEYS, ConfirmationOverlay
from awstui_core.layout import list_window_for_height, page_size_for_height
from awstui_core.models import ActionKind, AsyncResult, Domain, Failed, PendingAction, ResourceItem
from awstui_core.pagination import Paginator

logger = logging.getLogger(__name__)

READY = "Ready"
CANCELLED = "Action cancelled."
BACK_KEYS = {"esc", "backspace"}
UP_KEYS = {"up", "k"}
DOWN_KEYS = {"down", "j"}
PAGE_UP_KEYS = {"pgup", "left"}
PAGE_DOWN_KEYS = {"pgdown", "right"}
FILTER_KEY = "/"

PROGRESS_VERBS = {
    ActionKind.STOP: "Stopping",
    ActionKind.START: "Starting",
    ActionKind.PULL: "Pulling",
    ActionKind.PUSH: "Pushing",
    ActionKind.FORCE_DEPLOY: "Force-deploying",
}


class ViewKind(enum.Enum):
    LIST = "list"
    DETAILS = "details"
    LOGS = "logs"


class ListView:
    """Cursor, incremental filter and scroll window over resource items."""

    def __init__(self, title: str, empty_message: str):
        self.title = title
        self.empty_message = empty_message
        self.items: list[ResourceItem] = []
        self.cursor = 0
        self.filter_text = ""
        self.filtering = False
        self.window = 10

    @property
    def visible(self) -> list[ResourceItem]:
        if not self.filter_text:
            return self.items
        needle = self.filter_text.lower()
        return [item for item in self.items if needle in item.filter_value.lower()]

    def set_items(self, items: Iterable[ResourceItem]) -> None:
        self.items = list(items)
        self._clamp()

    def clear(self) -> None:
        self.items = []
        self.cursor = 0
        self.filter_text = ""
        self.filtering = False

    def selected(self) -> ResourceItem | None:
        visible = self.visible
        if not visible:
            return None
        return visible[min(self.cursor, len(visible) - 1)]

    def window_bounds(self) -> tuple[int, int]:
        total = len(self.visible)
        start = (self.cursor // self.window) * self.window if total else 0
        return start, min(total, start + self.window)

    def handle_key(self, key: str) -> bool:
        if self.filtering:
            self._filter_key(key)
            return True
        if key in UP_KEYS:
            self.cursor = max(0, self.cursor - 1)
        elif key in DOWN_KEYS:
            self.cursor = min(max(0, len(self.visible) - 1), self.cursor + 1)
        elif key in PAGE_UP_KEYS:
            self.cursor = max(0, self.cursor - self.window)
        elif key in PAGE_DOWN_KEYS:
            self.cursor = min(max(0, len(self.visible) - 1), self.cursor + self.window)
        elif key == FILTER_KEY:
            self.filtering = True
        else:
            return False
        return True

    def _filter_key(self, key: str) -> None:
        if key == "enter":
            self.filtering = False
        elif key == "esc":
            self.filtering = False
            self.filter_text = ""
        elif key == "backspace":
            self.filter_text = self.filter_text[:-1]
        elif len(key) == 1 and key.isprintable():
            self.filter_text += key
        self.cursor = 0

    def _clamp(self) -> None:
        self.cursor = min(self.cursor, max(0, len(self.visible) - 1))


class DomainController:
    """Per-domain state machine shared shape.

    Subclasses declare ``ROOT``, ``PARENTS`` (state -> state reached on back,
    ``None`` at the root), ``LIST_STATES`` and ``VIEWS``, and implement
    ``load``, ``on_key``, ``on_result`` and ``action_factories``.
    """

    domain: Domain
    ROOT: enum.Enum
    PARENTS: dict = {}
    LIST_STATES: frozenset = frozenset()
    VIEWS: dict = {}

    def __init__(self, settle_seconds: float = DEFAULT_SETTLE_SECONDS):
        self.settle_seconds = settle_seconds
        self.state = self.ROOT
        self.status = READY
        self.paginator = Paginator()
        self.confirm = ConfirmationOverlay(self.action_factories())

    # lifecycle

    def init(self) -> list[Command]:
        self.reset()
        return self.load()

    def reset(self) -> None:
        self.confirm.reject()
        while self.PARENTS.get(self.state) is not None:
            self.leave(self.state)
            self.state = self.PARENTS[self.state]
        self.leave(self.state)
        self.status = READY

    def load(self) -> list[Command]:
        raise NotImplementedError

    def action_factories(self) -> dict[ActionKind, Callable[[PendingAction], Command]]:
        return {}

    def leave(self, state: enum.Enum) -> None:
        """Drop data owned by ``state`` when navigating out of it."""

    # navigation

    @property
    def view_kind(self) -> ViewKind:
        return self.VIEWS.get(self.state, ViewKind.LIST)

    @property
    def at_root(self) -> bool:
        return not self.confirm.active and self.PARENTS.get(self.state) is None

    def depth(self) -> int:
        depth, state = 1, self.state
        while self.PARENTS.get(state) is not None:
            depth += 1
            state = self.PARENTS[state]
        return depth + (1 if self.confirm.active else 0)

    def back(self) -> bool:
        if self.confirm.active:
            self.confirm.back()
            self.status = CANCELLED
            return True
        parent = self.PARENTS.get(self.state)
        if parent is None:
            return False
        self.leave(self.state)
        self.state = parent
        self.status = READY
        return True

    def active_list(self) -> ListView | None:
        return None

    def breadcrumb(self) -> list[str]:
        return [self.domain.value]

    def detail_rows(self) -> list[tuple[str, str]]:
        return []

    # input

    def handle_key(self, key: str) -> list[Command]:
        if self.confirm.active:
            return self._confirm_key(key)

        listing = self.active_list() if self.view_kind is ViewKind.LIST else None
        if listing is not None and listing.filtering:
            listing.handle_key(key)
            return []

        if key in BACK_KEYS:
            self.back()
            return []

        if self.view_kind is ViewKind.LOGS:
            if key in PAGE_DOWN_KEYS or key in {"l", "j", "down"}:
                self.paginator.next_page()
            elif key in PAGE_UP_KEYS or key in {"h", "k", "up"}:
                self.paginator.prev_page()
            return []

        cmds = self.on_key(key)
        if cmds is None:
            if listing is not None:
                listing.handle_key(key)
            return []
        return cmds

    def on_key(self, key: str) -> list[Command] | None:
        """Return commands for a handled key, ``None`` to fall through to the list."""
        return None

    def _confirm_key(self, key: str) -> list[Command]:
        if key in ACCEPT_KEYS:
            pending = self.confirm.pending
            cmd = self.confirm.accept()
            self.status = f"{PROGRESS_VERBS[pending.kind]} {pending.payload.get('name', pending.target_id)}..."
            return [cmd]
        if key in REJECT_KEYS or key in BACK_KEYS:
            self.confirm.reject()
            self.status = CANCELLED
        return []

    def still_selected(self, state: enum.Enum, listing: ListView, id_key: str, item: dict) -> bool:
        """True while ``state`` is current and ``listing`` still points at ``item``."""
        selected = listing.selected()
        if (
            self.state is state
            and not self.confirm.active
            and selected is not None
            and selected.resource.get(id_key) == item.get(id_key)
        ):
            return True
        logger.debug("%s dropped late result for %s in state %s", self.domain.name, item.get(id_key), self.state)
        return False

    def begin_action(self, kind: ActionKind, target_id: str, prompt: str, **payload) -> list[Command]:
        self.confirm.begin(kind, target_id, prompt, **payload)
        self.status = prompt
        return []

    # results

    def handle_result(self, result: AsyncResult) -> list[Command]:
        if isinstance(result, Failed):
            self.fail(result.error)
            return []
        return self.on_result(result)

    def on_result(self, result: AsyncResult) -> list[Command]:
        raise NotImplementedError

    def fail(self, error: str) -> None:
        logger.debug("%s failure in state %s: %s", self.domain.name, self.state, error)
        self.confirm.reject()
        while self.state not in self.LIST_STATES and self.PARENTS.get(self.state) is not None:
            self.leave(self.state)
            self.state = self.PARENTS[self.state]
        self.status = "Error"

    # sizing

    def resize(self, width: int, height: int) -> None:
        self.paginator.set_per_page(page_size_for_height(height))
        window = list_window_for_height(height)
        for listing in self.all_lists():
            listing.window = window

    def all_lists(self) -> list[ListView]:
        return []
