"""Step name resolution for Step Functions execution histories.

Only state Entered/Exited events carry a step name. Every other event
(task scheduled/started/succeeded, lambda invocations, heartbeats, ...) is
attributed to the step whose Entered event is its nearest ancestor along the
``previous_event_id`` chain.
"""

from __future__ import annotations

from typing import Iterable

from awstui_core.models import STATE_MACHINE_LABEL, HistoryEvent, ResolvedStep

STEP_KINDS = ("Task", "Pass", "Choice", "Parallel", "Map")
ENTERED_TYPES = frozenset(f"{kind}StateEntered" for kind in STEP_KINDS)
EXITED_TYPES = frozenset(f"{kind}StateExited" for kind in STEP_KINDS)
BOUNDARY_TYPES = ENTERED_TYPES | EXITED_TYPES


def index_events(events: Iterable[HistoryEvent]) -> dict[int, HistoryEvent]:
    return {event.id: event for event in events}


def walk_back_to_entered(event: HistoryEvent, index: dict[int, HistoryEvent]) -> str:
    """Follow back-pointers until an Entered event; empty string if none.

    The walk is bounded by the number of indexed events, so a cyclic or
    self-referential chain terminates.
    """
    current_id = event.previous_event_id
    for _ in range(len(index)):
        if not current_id:
            return ""
        current = index.get(current_id)
        if current is None:
            return ""
        if current.type in ENTERED_TYPES:
            return current.name
        current_id = current.previous_event_id
    return ""


def step_name(event: HistoryEvent, index: dict[int, HistoryEvent]) -> str:
    if event.id == 1:
        return STATE_MACHINE_LABEL
    if event.type in BOUNDARY_TYPES:
        return event.name
    return walk_back_to_entered(event, index)


def resolve_history(events: Iterable[HistoryEvent]) -> list[ResolvedStep]:
    index = index_events(events)
    return [
        ResolvedStep(
            id=event_id,
            name=step_name(index[event_id], index),
            type=index[event_id].type,
            timestamp=index[event_id].timestamp,
        )
        for event_id in sorted(index)
        if event_id >= 1
    ]
