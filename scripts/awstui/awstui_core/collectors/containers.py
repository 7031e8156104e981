"""ECS cluster/service collector, including CloudWatch service logs."""

from __future__ import annotations

import time

import boto3

from awstui_core.collectors import CollectorError, aws_call, format_log_event, stream_header

LOG_STREAM_LIMIT = 20
LOG_EVENTS_PER_STREAM = 50


class ContainerCollector:
    def __init__(self, session: boto3.Session):
        self.ecs = session.client("ecs")
        self.logs = session.client("logs")

    def list_clusters(self) -> list[dict]:
        listed = aws_call("failed to list ECS clusters", self.ecs.list_clusters)
        arns = listed.get("clusterArns") or []
        if not arns:
            return []
        described = aws_call("failed to describe ECS clusters", self.ecs.describe_clusters, clusters=arns)
        return described.get("clusters", [])

    def list_services(self, cluster_arn: str) -> list[dict]:
        listed = aws_call(
            f"failed to list ECS services for cluster {cluster_arn}",
            self.ecs.list_services,
            cluster=cluster_arn,
        )
        arns = listed.get("serviceArns") or []
        if not arns:
            return []
        described = aws_call(
            f"failed to describe ECS services for cluster {cluster_arn}",
            self.ecs.describe_services,
            cluster=cluster_arn,
            services=arns,
        )
        return described.get("services", [])

    def stop_service(self, cluster_arn: str, service_arn: str) -> None:
        aws_call(
            f"failed to stop ECS service {service_arn}",
            self.ecs.update_service,
            cluster=cluster_arn,
            service=service_arn,
            desiredCount=0,
        )

    def force_deploy(self, cluster_arn: str, service_arn: str) -> None:
        aws_call(
            f"failed to force deploy ECS service {service_arn}",
            self.ecs.update_service,
            cluster=cluster_arn,
            service=service_arn,
            forceNewDeployment=True,
        )

    def log_target(self, service: dict) -> tuple[str, str]:
        """Resolve the awslogs group and stream prefix from the task definition."""
        name = service.get("serviceName", "")
        task_definition = service.get("taskDefinition")
        if not task_definition:
            raise CollectorError(f"service {name} has no associated task definition")
        described = aws_call(
            f"failed to describe task definition {task_definition} for service {name}",
            self.ecs.describe_task_definition,
            taskDefinition=task_definition,
        )
        for container in (described.get("taskDefinition") or {}).get("containerDefinitions", []):
            log_config = container.get("logConfiguration") or {}
            if log_config.get("logDriver") == "awslogs":
                options = log_config.get("options") or {}
                group = options.get("awslogs-group", "")
                if group:
                    return group, options.get("awslogs-stream-prefix", "")
                break
        raise CollectorError(f"awslogs log group not found in task definition for service {name}")

    def service_logs(self, service: dict, lookback_hours: int = 24) -> str:
        group, _prefix = self.log_target(service)
        name = service.get("serviceName", "")
        streams = aws_call(
            f"failed to describe log streams for service {name} (group: {group})",
            self.logs.describe_log_streams,
            logGroupName=group,
            orderBy="LastEventTime",
            descending=True,
            limit=LOG_STREAM_LIMIT,
        ).get("logStreams", [])
        if not streams:
            return f"No log streams found for this service in the last {lookback_hours} hours. ({group})"

        start_ms = int((time.time() - lookback_hours * 3600) * 1000)
        blocks: list[str] = []
        for stream in streams:
            stream_name = stream.get("logStreamName", "")
            events = aws_call(
                f"failed to get log events from {stream_name}",
                self.logs.get_log_events,
                logGroupName=group,
                logStreamName=stream_name,
                startTime=start_ms,
                limit=LOG_EVENTS_PER_STREAM,
            ).get("events", [])
            if not events:
                continue
            blocks.append(stream_header(stream_name))
            blocks.extend(format_log_event(event) for event in events)
            blocks.append("")

        if not blocks:
            return f"No logs found for this service in the last {lookback_hours} hours."
        return "\n".join(blocks)
