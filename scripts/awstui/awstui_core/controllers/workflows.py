"""Step Functions state machines, executions and history controller."""

from __future__ import annotations

import enum

from awstui_core.collectors.workflows import WorkflowCollector
from awstui_core.commands import DEFAULT_SETTLE_SECONDS, Command, command, mutation
from awstui_core.controllers import READY, DomainController, ListView
from awstui_core.formatting import format_timestamp
from awstui_core.history import resolve_history
from awstui_core.models import (
    ActionCompleted,
    ActionKind,
    Domain,
    ListFetched,
    PendingAction,
    ResolvedStep,
    ResourceItem,
    ResourceKind,
)

DEFAULT_EXECUTION_INPUT = "{}"


class WorkflowState(enum.Enum):
    STATE_MACHINE_LIST = "StateMachineList"
    EXECUTION_LIST = "ExecutionList"
    EXECUTION_HISTORY = "ExecutionHistory"


def state_machine_item(machine: dict) -> ResourceItem:
    name = machine.get("name", "")
    return ResourceItem(
        title=name,
        description=f"Type: {machine.get('type', '')} | Created: {format_timestamp(machine.get('creationDate'))}",
        filter_value=name,
        resource=machine,
    )


def execution_item(execution: dict) -> ResourceItem:
    name = execution.get("name", "")
    status = execution.get("status", "")
    return ResourceItem(
        title=name,
        description=(
            f"Status: {status} | Started: {format_timestamp(execution.get('startDate'))} | "
            f"Stopped: {format_timestamp(execution.get('stopDate'))}"
        ),
        filter_value=f"{name} {status}",
        resource=execution,
    )


def step_item(step: ResolvedStep) -> ResourceItem:
    return ResourceItem(
        title=step.name or "-",
        description=f"ID: {step.id} | Type: {step.type} | Timestamp {format_timestamp(step.timestamp)}",
        filter_value=f"{step.name} {step.type}",
        resource=step,
    )


class WorkflowController(DomainController):
    domain = Domain.WORKFLOW
    ROOT = WorkflowState.STATE_MACHINE_LIST
    PARENTS = {
        WorkflowState.STATE_MACHINE_LIST: None,
        WorkflowState.EXECUTION_LIST: WorkflowState.STATE_MACHINE_LIST,
        WorkflowState.EXECUTION_HISTORY: WorkflowState.EXECUTION_LIST,
    }
    LIST_STATES = frozenset(WorkflowState)

    def __init__(self, collector: WorkflowCollector, settle_seconds: float = DEFAULT_SETTLE_SECONDS):
        self.collector = collector
        self.state_machines = ListView("Step Functions", "No Step Functions state machines found in this region.")
        self.executions = ListView("Executions", "No executions found for this state machine.")
        self.history = ListView("History", "No execution history found for this execution.")
        self.state_machine: dict | None = None
        self.execution: dict | None = None
        super().__init__(settle_seconds)

    def load(self) -> list[Command]:
        self.status = "Loading state machines..."
        return [self._fetch_state_machines()]

    def leave(self, state) -> None:
        if state is WorkflowState.STATE_MACHINE_LIST:
            self.state_machines.clear()
        elif state is WorkflowState.EXECUTION_LIST:
            self.executions.clear()
            self.state_machine = None
        elif state is WorkflowState.EXECUTION_HISTORY:
            self.history.clear()
            self.execution = None

    def active_list(self) -> ListView | None:
        return {
            WorkflowState.STATE_MACHINE_LIST: self.state_machines,
            WorkflowState.EXECUTION_LIST: self.executions,
            WorkflowState.EXECUTION_HISTORY: self.history,
        }[self.state]

    def all_lists(self) -> list[ListView]:
        return [self.state_machines, self.executions, self.history]

    def _name(self, resource: dict | None) -> str:
        return (resource or {}).get("name", "")

    # commands

    def _fetch_state_machines(self) -> Command:
        collector = self.collector
        return command(
            "fetch state machines",
            lambda: ListFetched(ResourceKind.STATE_MACHINES, collector.list_state_machines()),
        )

    def _fetch_executions(self) -> Command:
        collector, arn = self.collector, (self.state_machine or {}).get("stateMachineArn", "")
        return command(f"fetch executions {arn}", lambda: ListFetched(ResourceKind.EXECUTIONS, collector.list_executions(arn)))

    def _fetch_history(self) -> Command:
        collector, arn = self.collector, (self.execution or {}).get("executionArn", "")
        return command(f"fetch history {arn}", lambda: ListFetched(ResourceKind.HISTORY, collector.execution_history(arn)))

    def action_factories(self):
        collector, settle = self.collector, self.settle_seconds

        def start(action: PendingAction) -> Command:
            payload = action.payload.get("input", DEFAULT_EXECUTION_INPUT)
            return mutation(
                f"start execution {action.target_id}",
                lambda: collector.start_execution(action.target_id, payload),
                "started a new execution",
                action.payload.get("name", action.target_id),
                settle,
            )

        return {ActionKind.START: start}

    # input

    def on_key(self, key: str):
        if self.state is WorkflowState.STATE_MACHINE_LIST:
            if key == "r":
                self.status = "Refreshing state machines..."
                return [self._fetch_state_machines()]
            if key == "enter":
                selected = self.state_machines.selected()
                if selected is None:
                    return []
                self.state_machine = selected.resource
                self.executions.clear()
                self.state = WorkflowState.EXECUTION_LIST
                self.status = f"Loading executions for {self._name(self.state_machine)}..."
                return [self._fetch_executions()]
            return None

        if self.state is WorkflowState.EXECUTION_LIST:
            if key == "r":
                self.status = "Refreshing executions..."
                return [self._fetch_executions()]
            if key == "e":
                machine = self.state_machine or {}
                name = self._name(machine)
                return self.begin_action(
                    ActionKind.START,
                    machine.get("stateMachineArn", ""),
                    f"Confirm starting a new execution of {name}? (y/N)",
                    name=name,
                    input=DEFAULT_EXECUTION_INPUT,
                )
            if key == "enter":
                selected = self.executions.selected()
                if selected is None:
                    return []
                self.execution = selected.resource
                self.history.clear()
                self.state = WorkflowState.EXECUTION_HISTORY
                self.status = f"Loading execution history for {self._name(self.execution)}..."
                return [self._fetch_history()]
            return None

        if key == "r":
            self.status = "Refreshing execution history..."
            return [self._fetch_history()]
        return None

    # results

    def on_result(self, result) -> list[Command]:
        if isinstance(result, ListFetched):
            if result.kind is ResourceKind.STATE_MACHINES:
                self.state_machines.set_items(state_machine_item(m) for m in result.items)
            elif result.kind is ResourceKind.EXECUTIONS:
                self.executions.set_items(execution_item(e) for e in result.items)
            elif result.kind is ResourceKind.HISTORY:
                self.history.set_items(step_item(step) for step in resolve_history(result.items))
            self.status = READY
        elif isinstance(result, ActionCompleted):
            if self.state_machine is None:
                self.status = f"{result.target_id}: {result.label}."
                return []
            self.status = f"{result.target_id}: {result.label}. Refreshing..."
            return [self._fetch_executions()]
        return []

    def breadcrumb(self) -> list[str]:
        crumbs = [self.domain.value]
        if self.state is not WorkflowState.STATE_MACHINE_LIST:
            crumbs += [self._name(self.state_machine), "Executions"]
        if self.state is WorkflowState.EXECUTION_HISTORY:
            crumbs += [self._name(self.execution), "History"]
        return crumbs
