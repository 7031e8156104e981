"""Top-level event router between the domain menu and the active controller."""

from __future__ import annotations

import logging
from typing import Mapping

from awstui_core.commands import Command
from awstui_core.controllers import DomainController
from awstui_core.models import Domain, Event, Failed, KeyEvent, ResizeEvent, ResultEvent, TickEvent

logger = logging.getLogger(__name__)

MENU_STATUS = "Select an option."
QUIT_KEYS = {"ctrl+c"}
MENU_QUIT_KEYS = {"q", "ctrl+c"}


class Dispatcher:
    """Owns navigation between menu and domains, the error slot and the busy count.

    ``handle`` processes one event to completion and returns the commands the
    caller must execute. Each command is stamped with the domain and that
    domain's entry epoch; results carrying any other stamp are discarded.
    """

    def __init__(self, controllers: Mapping[Domain, DomainController]):
        self.controllers = dict(controllers)
        self.choices: list[Domain] = [d for d in Domain if d in self.controllers]
        self.cursor = 0
        self.active: Domain | None = None
        self.epochs: dict[Domain, int] = {d: 0 for d in self.choices}
        self.error: str | None = None
        self.in_flight = 0
        self.running = True
        self.size = (80, 24)

    @property
    def busy(self) -> bool:
        return self.in_flight > 0

    @property
    def controller(self) -> DomainController | None:
        if self.active is None:
            return None
        return self.controllers[self.active]

    @property
    def status(self) -> str:
        controller = self.controller
        return controller.status if controller else MENU_STATUS

    def handle(self, event: Event) -> list[Command]:
        if isinstance(event, KeyEvent):
            return self._stamp(self._handle_key(event.key))
        if isinstance(event, ResultEvent):
            return self._stamp(self._handle_result(event))
        if isinstance(event, ResizeEvent):
            self.size = (event.width, event.height)
            for controller in self.controllers.values():
                controller.resize(event.width, event.height)
            return []
        if isinstance(event, TickEvent):
            return []
        raise TypeError(f"unsupported event: {event!r}")

    # navigation

    def enter(self, domain: Domain) -> list[Command]:
        self.active = domain
        self.epochs[domain] += 1
        self.error = None
        logger.info("entering %s (epoch %s)", domain.name, self.epochs[domain])
        return self.controllers[domain].init()

    def leave(self) -> None:
        if self.active is None:
            return
        logger.info("leaving %s", self.active.name)
        self.controllers[self.active].reset()
        self.active = None
        self.error = None

    def _handle_key(self, key: str) -> list[Command]:
        controller = self.controller
        if controller is None:
            return self._menu_key(key)
        if key in QUIT_KEYS:
            self.running = False
            return []
        if key in {"esc", "backspace"} and controller.at_root and not self._filtering(controller):
            self.leave()
            return []
        return controller.handle_key(key)

    def _menu_key(self, key: str) -> list[Command]:
        if key in {"up", "k"}:
            self.cursor = max(0, self.cursor - 1)
        elif key in {"down", "j"}:
            self.cursor = min(len(self.choices) - 1, self.cursor + 1)
        elif key == "enter" and self.choices:
            return self.enter(self.choices[self.cursor])
        elif key in MENU_QUIT_KEYS:
            self.running = False
        return []

    @staticmethod
    def _filtering(controller: DomainController) -> bool:
        listing = controller.active_list()
        return listing is not None and listing.filtering

    # results

    def _handle_result(self, event: ResultEvent) -> list[Command]:
        self.in_flight = max(0, self.in_flight - 1)
        if event.domain is None or event.domain != self.active or event.epoch != self.epochs.get(event.domain):
            logger.debug("discarding stale result for %s epoch %s", event.domain, event.epoch)
            return []
        if isinstance(event.result, Failed):
            self.error = event.result.error
        else:
            self.error = None
        return self.controllers[event.domain].handle_result(event.result)

    def _stamp(self, cmds: list[Command]) -> list[Command]:
        if not cmds or self.active is None:
            return []
        stamped = [cmd.stamped(self.active, self.epochs[self.active]) for cmd in cmds]
        self.in_flight += len(stamped)
        return stamped

    # introspection for tests and views

    def depth(self) -> int:
        controller = self.controller
        return 0 if controller is None else controller.depth()
