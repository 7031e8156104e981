"""Shared model contracts for the console's event and data flow."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Union


class Domain(enum.Enum):
    COMPUTE = "EC2 Instances"
    CLUSTER_SERVICE = "ECS Clusters"
    REGISTRY = "ECR Repositories"
    WORKFLOW = "Step Functions"
    BATCH_QUEUE = "Batch Job Queues"


class ActionKind(enum.Enum):
    STOP = "stop"
    START = "start"
    PULL = "pull"
    PUSH = "push"
    FORCE_DEPLOY = "force-deploy"


class ResourceKind(enum.Enum):
    INSTANCES = "instances"
    INSTANCE = "instance"
    CLUSTERS = "clusters"
    SERVICES = "services"
    REPOSITORIES = "repositories"
    IMAGES = "images"
    STATE_MACHINES = "state machines"
    EXECUTIONS = "executions"
    HISTORY = "history"
    JOB_QUEUES = "job queues"
    JOBS = "jobs"
    JOB = "job"


@dataclass(frozen=True)
class ResourceItem:
    """One display row backed by the raw resource snapshot it was built from."""

    title: str
    description: str
    filter_value: str
    resource: Any = None


@dataclass(frozen=True)
class PendingAction:
    kind: ActionKind
    target_id: str
    prompt: str
    payload: dict[str, Any] = field(default_factory=dict)


# Async results. Exactly one is produced per executed command.


@dataclass(frozen=True)
class ListFetched:
    kind: ResourceKind
    items: list[Any]


@dataclass(frozen=True)
class DetailFetched:
    kind: ResourceKind
    item: Any


@dataclass(frozen=True)
class ActionCompleted:
    label: str
    target_id: str = ""


@dataclass(frozen=True)
class LogsFetched:
    text: str


@dataclass(frozen=True)
class Failed:
    error: str


AsyncResult = Union[ListFetched, DetailFetched, ActionCompleted, LogsFetched, Failed]


# Loop events.


@dataclass(frozen=True)
class KeyEvent:
    key: str


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


@dataclass(frozen=True)
class TickEvent:
    pass


@dataclass(frozen=True)
class ResultEvent:
    domain: Domain | None
    epoch: int
    result: AsyncResult


Event = Union[KeyEvent, ResizeEvent, TickEvent, ResultEvent]


# Workflow history.

STATE_MACHINE_LABEL = "State Machine"


@dataclass(frozen=True)
class HistoryEvent:
    id: int
    type: str
    previous_event_id: int | None = None
    name: str = ""
    timestamp: datetime | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "HistoryEvent":
        details = payload.get("stateEnteredEventDetails") or payload.get("stateExitedEventDetails") or {}
        return cls(
            id=int(payload.get("id", 0)),
            type=str(payload.get("type", "")),
            previous_event_id=payload.get("previousEventId"),
            name=str(details.get("name", "")),
            timestamp=payload.get("timestamp"),
        )


@dataclass(frozen=True)
class ResolvedStep:
    id: int
    name: str
    type: str
    timestamp: datetime | None = None
