"""EC2 instances controller."""

from __future__ import annotations

import enum

from awstui_core.collectors.compute import ComputeCollector, run_ssh
from awstui_core.commands import DEFAULT_SETTLE_SECONDS, Command, command, mutation
from awstui_core.controllers import READY, DomainController, ListView, ViewKind
from awstui_core.formatting import format_timestamp, instance_name, security_group_names, text_or_na
from awstui_core.models import (
    ActionCompleted,
    ActionKind,
    DetailFetched,
    Domain,
    ListFetched,
    PendingAction,
    ResourceItem,
    ResourceKind,
)


class ComputeState(enum.Enum):
    INSTANCE_LIST = "InstanceList"
    INSTANCE_DETAILS = "InstanceDetails"


def instance_state(instance: dict) -> str:
    return str((instance.get("State") or {}).get("Name", "unknown"))


def instance_item(instance: dict) -> ResourceItem:
    name = instance_name(instance)
    instance_id = instance.get("InstanceId", "")
    state = instance_state(instance)
    return ResourceItem(
        title=f"{name} ({instance_id})",
        description=(
            f"Type: {instance.get('InstanceType', '')} | State: {state} | "
            f"Public IP: {instance.get('PublicIpAddress', '')}"
        ),
        filter_value=f"{name} {instance_id} {state}",
        resource=instance,
    )


class ComputeController(DomainController):
    domain = Domain.COMPUTE
    ROOT = ComputeState.INSTANCE_LIST
    PARENTS = {ComputeState.INSTANCE_LIST: None, ComputeState.INSTANCE_DETAILS: ComputeState.INSTANCE_LIST}
    LIST_STATES = frozenset({ComputeState.INSTANCE_LIST})
    VIEWS = {ComputeState.INSTANCE_DETAILS: ViewKind.DETAILS}

    def __init__(self, collector: ComputeCollector, settle_seconds: float = DEFAULT_SETTLE_SECONDS):
        self.collector = collector
        self.instances = ListView("EC2 Instances", "No EC2 instances found in this region.")
        self.detail: dict | None = None
        super().__init__(settle_seconds)

    def load(self) -> list[Command]:
        self.status = "Loading instances..."
        return [self._fetch_instances()]

    def leave(self, state) -> None:
        if state is ComputeState.INSTANCE_DETAILS:
            self.detail = None
        elif state is ComputeState.INSTANCE_LIST:
            self.instances.clear()

    def active_list(self) -> ListView | None:
        return self.instances

    def all_lists(self) -> list[ListView]:
        return [self.instances]

    # commands

    def _fetch_instances(self) -> Command:
        collector = self.collector
        return command("fetch instances", lambda: ListFetched(ResourceKind.INSTANCES, collector.list_instances()))

    def _fetch_details(self, instance_id: str) -> Command:
        collector = self.collector
        return command(
            f"describe instance {instance_id}",
            lambda: DetailFetched(ResourceKind.INSTANCE, collector.describe_instance(instance_id)),
        )

    def _ssh(self, public_ip: str, key_name: str, instance_id: str) -> Command:
        def run() -> ActionCompleted:
            run_ssh(public_ip, key_name)
            return ActionCompleted(label="SSH session ended", target_id=instance_id)

        return Command(label=f"ssh {instance_id}", fn=run, interactive=True)

    def action_factories(self):
        collector, settle = self.collector, self.settle_seconds

        def stop(action: PendingAction) -> Command:
            return mutation(f"stop {action.target_id}", lambda: collector.stop_instance(action.target_id), "stopped", action.target_id, settle)

        def start(action: PendingAction) -> Command:
            return mutation(f"start {action.target_id}", lambda: collector.start_instance(action.target_id), "started", action.target_id, settle)

        return {ActionKind.STOP: stop, ActionKind.START: start}

    # input

    def on_key(self, key: str):
        if self.state is not ComputeState.INSTANCE_LIST:
            return []
        if key == "r":
            self.status = "Refreshing instances..."
            return [self._fetch_instances()]

        selected = self.instances.selected()
        if key not in {"s", "t", "d", "x"}:
            return None
        if selected is None:
            return []
        instance = selected.resource
        instance_id = instance.get("InstanceId", "")
        name = instance_name(instance)
        state = instance_state(instance)

        if key == "s":
            if state != "running":
                self.status = f"Instance {name} is not running. Cannot stop."
                return []
            return self.begin_action(
                ActionKind.STOP, instance_id, f"Confirm stopping instance {name} ({instance_id})? (y/N)", name=name
            )
        if key == "t":
            if state != "stopped":
                self.status = f"Instance {name} is not stopped. Cannot start."
                return []
            return self.begin_action(
                ActionKind.START, instance_id, f"Confirm starting instance {name} ({instance_id})? (y/N)", name=name
            )
        if key == "d":
            self.status = "Fetching instance details..."
            return [self._fetch_details(instance_id)]

        public_ip = instance.get("PublicIpAddress")
        if not public_ip:
            self.status = "Selected instance has no public IP address for SSH."
            return []
        self.status = f"Attempting to SSH into {name} ({public_ip})..."
        return [self._ssh(public_ip, instance.get("KeyName", ""), instance_id)]

    # results

    def on_result(self, result) -> list[Command]:
        if isinstance(result, ListFetched) and result.kind is ResourceKind.INSTANCES:
            self.instances.set_items(instance_item(instance) for instance in result.items)
            self.status = READY
        elif isinstance(result, DetailFetched) and result.kind is ResourceKind.INSTANCE:
            if not self.still_selected(ComputeState.INSTANCE_LIST, self.instances, "InstanceId", result.item):
                return []
            self.detail = result.item
            self.state = ComputeState.INSTANCE_DETAILS
            self.status = READY
        elif isinstance(result, ActionCompleted):
            self.status = f"Instance {result.target_id} {result.label}. Refreshing..."
            return [self._fetch_instances()]
        return []

    # view data

    def breadcrumb(self) -> list[str]:
        crumbs = [self.domain.value]
        if self.state is ComputeState.INSTANCE_DETAILS and self.detail:
            crumbs.append(instance_name(self.detail))
        return crumbs

    def detail_rows(self) -> list[tuple[str, str]]:
        instance = self.detail
        if not instance:
            return []
        return [
            ("Instance ID", text_or_na(instance.get("InstanceId"))),
            ("Name", instance_name(instance)),
            ("State", instance_state(instance)),
            ("Type", text_or_na(instance.get("InstanceType"))),
            ("Launch Time", format_timestamp(instance.get("LaunchTime"))),
            ("Public IP", text_or_na(instance.get("PublicIpAddress"))),
            ("Private IP", text_or_na(instance.get("PrivateIpAddress"))),
            ("Availability Zone", text_or_na((instance.get("Placement") or {}).get("AvailabilityZone"))),
            ("VPC ID", text_or_na(instance.get("VpcId"))),
            ("Subnet ID", text_or_na(instance.get("SubnetId"))),
            ("Security Groups", security_group_names(instance)),
            ("Key Name", text_or_na(instance.get("KeyName"))),
        ]
