"""Yes/no gate in front of mutating actions."""

from __future__ import annotations

from typing import Callable, Mapping

from awstui_core.commands import Command
from awstui_core.models import ActionKind, PendingAction

ACCEPT_KEYS = {"y", "Y"}
REJECT_KEYS = {"n", "N"}


class ConfirmationOverlay:
    def __init__(self, factories: Mapping[ActionKind, Callable[[PendingAction], Command]]):
        self._factories = dict(factories)
        self.pending: PendingAction | None = None

    @property
    def active(self) -> bool:
        return self.pending is not None

    @property
    def prompt(self) -> str:
        return self.pending.prompt if self.pending else ""

    def begin(self, kind: ActionKind, target_id: str, prompt: str, **payload) -> None:
        if kind not in self._factories:
            raise ValueError(f"no command registered for action {kind.value}")
        self.pending = PendingAction(kind=kind, target_id=target_id, prompt=prompt, payload=payload)

    def accept(self) -> Command:
        if self.pending is None:
            raise RuntimeError("no pending action to accept")
        action, self.pending = self.pending, None
        return self._factories[action.kind](action)

    def reject(self) -> None:
        self.pending = None

    back = reject
