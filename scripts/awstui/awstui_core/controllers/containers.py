"""ECS clusters and services controller."""

from __future__ import annotations

import enum

from awstui_core.collectors.containers import ContainerCollector
from awstui_core.commands import DEFAULT_SETTLE_SECONDS, Command, command, mutation
from awstui_core.controllers import READY, DomainController, ListView, ViewKind
from awstui_core.formatting import format_timestamp, text_or_na
from awstui_core.models import (
    ActionCompleted,
    ActionKind,
    Domain,
    ListFetched,
    LogsFetched,
    PendingAction,
    ResourceItem,
    ResourceKind,
)

LOG_LOOKBACK_HOURS = 24


class ClusterServiceState(enum.Enum):
    CLUSTER_LIST = "ClusterList"
    SERVICE_LIST = "ServiceList"
    SERVICE_DETAILS = "ServiceDetails"
    SERVICE_LOGS = "ServiceLogs"


def cluster_item(cluster: dict) -> ResourceItem:
    name = cluster.get("clusterName", "")
    status = cluster.get("status", "")
    return ResourceItem(
        title=name,
        description=(
            f"Status: {status} | Services: {cluster.get('activeServicesCount', 0)} | "
            f"Tasks: {cluster.get('runningTasksCount', 0)} | "
            f"Container Instances: {cluster.get('registeredContainerInstancesCount', 0)}"
        ),
        filter_value=f"{name} {status}",
        resource=cluster,
    )


def service_item(service: dict) -> ResourceItem:
    name = service.get("serviceName", "")
    status = service.get("status", "")
    return ResourceItem(
        title=name,
        description=(
            f"Status: {status} | Desired: {service.get('desiredCount', 0)} | "
            f"Running: {service.get('runningCount', 0)} | Pending: {service.get('pendingCount', 0)}"
        ),
        filter_value=f"{name} {status}",
        resource=service,
    )


class ClusterServiceController(DomainController):
    domain = Domain.CLUSTER_SERVICE
    ROOT = ClusterServiceState.CLUSTER_LIST
    PARENTS = {
        ClusterServiceState.CLUSTER_LIST: None,
        ClusterServiceState.SERVICE_LIST: ClusterServiceState.CLUSTER_LIST,
        ClusterServiceState.SERVICE_DETAILS: ClusterServiceState.SERVICE_LIST,
        ClusterServiceState.SERVICE_LOGS: ClusterServiceState.SERVICE_LIST,
    }
    LIST_STATES = frozenset({ClusterServiceState.CLUSTER_LIST, ClusterServiceState.SERVICE_LIST})
    VIEWS = {
        ClusterServiceState.SERVICE_DETAILS: ViewKind.DETAILS,
        ClusterServiceState.SERVICE_LOGS: ViewKind.LOGS,
    }

    def __init__(
        self,
        collector: ContainerCollector,
        settle_seconds: float = DEFAULT_SETTLE_SECONDS,
        lookback_hours: int = LOG_LOOKBACK_HOURS,
    ):
        self.collector = collector
        self.lookback_hours = lookback_hours
        self.clusters = ListView("ECS Clusters", "No ECS clusters found in this region.")
        self.services = ListView("Services", "No ECS services found in this cluster.")
        self.cluster: dict | None = None
        self.service: dict | None = None
        super().__init__(settle_seconds)

    def load(self) -> list[Command]:
        self.status = "Loading clusters..."
        return [self._fetch_clusters()]

    def leave(self, state) -> None:
        if state is ClusterServiceState.CLUSTER_LIST:
            self.clusters.clear()
        elif state is ClusterServiceState.SERVICE_LIST:
            self.services.clear()
            self.cluster = None
        elif state is ClusterServiceState.SERVICE_DETAILS:
            self.service = None
        elif state is ClusterServiceState.SERVICE_LOGS:
            self.service = None
            self.paginator.clear()

    def active_list(self) -> ListView | None:
        if self.state is ClusterServiceState.CLUSTER_LIST:
            return self.clusters
        if self.state is ClusterServiceState.SERVICE_LIST:
            return self.services
        return None

    def all_lists(self) -> list[ListView]:
        return [self.clusters, self.services]

    @property
    def cluster_arn(self) -> str:
        return (self.cluster or {}).get("clusterArn", "")

    @property
    def cluster_name(self) -> str:
        return (self.cluster or {}).get("clusterName", "")

    # commands

    def _fetch_clusters(self) -> Command:
        collector = self.collector
        return command("fetch clusters", lambda: ListFetched(ResourceKind.CLUSTERS, collector.list_clusters()))

    def _fetch_services(self) -> Command:
        collector, cluster_arn = self.collector, self.cluster_arn
        return command(
            f"fetch services {cluster_arn}",
            lambda: ListFetched(ResourceKind.SERVICES, collector.list_services(cluster_arn)),
        )

    def _fetch_logs(self, service: dict) -> Command:
        collector, hours = self.collector, self.lookback_hours
        return command(
            f"fetch logs {service.get('serviceName', '')}",
            lambda: LogsFetched(collector.service_logs(service, lookback_hours=hours)),
        )

    def action_factories(self):
        collector, settle = self.collector, self.settle_seconds

        def stop(action: PendingAction) -> Command:
            cluster_arn, name = action.payload["cluster_arn"], action.payload["name"]
            return mutation(
                f"stop service {name}",
                lambda: collector.stop_service(cluster_arn, action.target_id),
                "stopped",
                name,
                settle,
            )

        def force_deploy(action: PendingAction) -> Command:
            cluster_arn, name = action.payload["cluster_arn"], action.payload["name"]
            return mutation(
                f"force deploy service {name}",
                lambda: collector.force_deploy(cluster_arn, action.target_id),
                "force-deployed",
                name,
                settle,
            )

        return {ActionKind.STOP: stop, ActionKind.FORCE_DEPLOY: force_deploy}

    # input

    def on_key(self, key: str):
        if self.state is ClusterServiceState.CLUSTER_LIST:
            return self._cluster_list_key(key)
        if self.state is ClusterServiceState.SERVICE_LIST:
            return self._service_list_key(key)
        return []

    def _cluster_list_key(self, key: str):
        if key == "r":
            self.status = "Refreshing ECS clusters..."
            return [self._fetch_clusters()]
        if key == "enter":
            selected = self.clusters.selected()
            if selected is None:
                return []
            self.cluster = selected.resource
            self.services.clear()
            self.state = ClusterServiceState.SERVICE_LIST
            self.status = f"Loading services for cluster {self.cluster_name}..."
            return [self._fetch_services()]
        return None

    def _service_list_key(self, key: str):
        if key == "r":
            self.status = f"Refreshing services for cluster {self.cluster_name}..."
            return [self._fetch_services()]
        if key not in {"d", "l", "s", "f"}:
            return None
        selected = self.services.selected()
        if selected is None:
            return []
        service = selected.resource
        name = service.get("serviceName", "")

        if key == "d":
            self.service = service
            self.state = ClusterServiceState.SERVICE_DETAILS
            self.status = "Showing service details."
            return []
        if key == "l":
            self.service = service
            self.paginator.clear()
            self.state = ClusterServiceState.SERVICE_LOGS
            self.status = f"Fetching logs for service {name}..."
            return [self._fetch_logs(service)]
        if key == "s":
            desired = int(service.get("desiredCount", 0))
            if desired <= 0:
                self.status = f"Service {name} is already stopped (Desired: 0)."
                return []
            return self.begin_action(
                ActionKind.STOP,
                service.get("serviceArn", ""),
                f"Confirm stopping service {name} (Desired: {desired})? (y/N)",
                name=name,
                cluster_arn=self.cluster_arn,
            )
        return self.begin_action(
            ActionKind.FORCE_DEPLOY,
            service.get("serviceArn", ""),
            f"Confirm force deployment of service {name}? (y/N)",
            name=name,
            cluster_arn=self.cluster_arn,
        )

    # results

    def on_result(self, result) -> list[Command]:
        if isinstance(result, ListFetched):
            if result.kind is ResourceKind.CLUSTERS:
                self.clusters.set_items(cluster_item(c) for c in result.items)
            elif result.kind is ResourceKind.SERVICES:
                self.services.set_items(service_item(s) for s in result.items)
            self.status = READY
        elif isinstance(result, LogsFetched):
            self.paginator.set_text(result.text)
            self.status = READY
        elif isinstance(result, ActionCompleted):
            if self.cluster is None:
                self.status = f"Service {result.target_id} {result.label}."
                return []
            self.status = f"Service {result.target_id} {result.label}. Refreshing..."
            return [self._fetch_services()]
        return []

    # view data

    def breadcrumb(self) -> list[str]:
        crumbs = [self.domain.value]
        if self.state is not ClusterServiceState.CLUSTER_LIST:
            crumbs += [self.cluster_name, "Services"]
        if self.state is ClusterServiceState.SERVICE_DETAILS and self.service:
            crumbs.append(self.service.get("serviceName", ""))
        elif self.state is ClusterServiceState.SERVICE_LOGS and self.service:
            crumbs += [self.service.get("serviceName", ""), "Logs"]
        return crumbs

    def detail_rows(self) -> list[tuple[str, str]]:
        service = self.service
        if not service:
            return []
        return [
            ("Service Name", text_or_na(service.get("serviceName"))),
            ("Service ARN", text_or_na(service.get("serviceArn"))),
            ("Status", text_or_na(service.get("status"))),
            ("Desired Count", str(service.get("desiredCount", 0))),
            ("Running Count", str(service.get("runningCount", 0))),
            ("Pending Count", str(service.get("pendingCount", 0))),
            ("Launch Type", text_or_na(service.get("launchType"))),
            ("Task Definition", text_or_na(service.get("taskDefinition"))),
            ("Created At", format_timestamp(service.get("createdAt"))),
        ]
