"""In-memory collector doubles shared by the controller and dispatcher tests."""

from __future__ import annotations

from awstui_core.collectors import CollectorError
from awstui_core.models import HistoryEvent


class FakeCompute:
    def __init__(self, instances):
        self.instances = instances
        self.calls = []

    def list_instances(self):
        self.calls.append("list")
        return list(self.instances)

    def describe_instance(self, instance_id):
        for instance in self.instances:
            if instance["InstanceId"] == instance_id:
                return instance
        raise CollectorError(f"instance {instance_id} not found")

    def stop_instance(self, instance_id):
        self.calls.append(("stop", instance_id))

    def start_instance(self, instance_id):
        self.calls.append(("start", instance_id))


def ec2_instance(instance_id, name, state, public_ip=None):
    instance = {
        "InstanceId": instance_id,
        "InstanceType": "t3.micro",
        "State": {"Name": state},
        "Tags": [{"Key": "Name", "Value": name}],
        "KeyName": "deploy",
    }
    if public_ip:
        instance["PublicIpAddress"] = public_ip
    return instance


class FakeContainers:
    def __init__(self):
        self.calls = []
        self.services = [
            {"serviceName": "api", "serviceArn": "arn:svc/api", "status": "ACTIVE", "desiredCount": 2, "runningCount": 2},
            {"serviceName": "idle", "serviceArn": "arn:svc/idle", "status": "ACTIVE", "desiredCount": 0, "runningCount": 0},
        ]
        self.log_error = None

    def list_clusters(self):
        return [{"clusterName": "prod", "clusterArn": "arn:cluster/prod", "status": "ACTIVE"}]

    def list_services(self, cluster_arn):
        self.calls.append(("services", cluster_arn))
        return list(self.services)

    def stop_service(self, cluster_arn, service_arn):
        self.calls.append(("stop", cluster_arn, service_arn))

    def force_deploy(self, cluster_arn, service_arn):
        self.calls.append(("deploy", cluster_arn, service_arn))

    def service_logs(self, service, lookback_hours=24):
        if self.log_error:
            raise CollectorError(self.log_error)
        return "\n".join(f"line {n}" for n in range(45))


class FakeRegistry:
    def __init__(self):
        self.calls = []

    def list_repositories(self):
        return [{"repositoryName": "app", "repositoryUri": "123.dkr.ecr.us-east-1.amazonaws.com/app"}]

    def list_images(self, name):
        return [{"imageTags": ["latest", "v1"], "imageDigest": "sha256:a"}, {"imageDigest": "sha256:b"}]

    def pull(self, uri, tag):
        self.calls.append(("pull", uri, tag))

    def push(self, uri, tag):
        self.calls.append(("push", uri, tag))


class FakeWorkflows:
    def __init__(self):
        self.started = []

    def list_state_machines(self):
        return [{"name": "etl", "stateMachineArn": "arn:sm/etl"}]

    def list_executions(self, arn):
        return [{"name": "run-1", "executionArn": "arn:exec/run-1", "status": "SUCCEEDED"}]

    def execution_history(self, arn):
        return [
            HistoryEvent(id=1, type="ExecutionStarted"),
            HistoryEvent(id=2, type="TaskStateEntered", previous_event_id=1, name="Fetch"),
            HistoryEvent(id=3, type="TaskStarted", previous_event_id=2),
        ]

    def start_execution(self, arn, payload="{}"):
        self.started.append((arn, payload))
        return "arn:exec/run-2"


class FakeBatch:
    def __init__(self, jobs_by_status=None, failing=None):
        self.jobs_by_status = jobs_by_status or {}
        self.failing = failing
        self.terminated = []
        self.log_text = "--- Log Stream: s ---\n[00:00:00] hi\n"

    def list_job_queues(self):
        return [{"jobQueueName": "default", "status": "VALID", "state": "ENABLED", "priority": 1}]

    def list_jobs(self, queue, status):
        if status == self.failing:
            raise CollectorError(f"failed to list Batch jobs ({status}): throttled")
        return list(self.jobs_by_status.get(status, []))

    def describe_job(self, job_id):
        return {"jobId": job_id, "jobName": "nightly", "status": "RUNNING"}

    def terminate_job(self, job_id, reason):
        self.terminated.append((job_id, reason))

    def job_logs(self, job_id):
        return self.log_text


JOBS = {
    "RUNNING": [{"jobId": "j-2", "jobName": "nightly", "status": "RUNNING", "createdAt": 2000}],
    "SUCCEEDED": [{"jobId": "j-1", "jobName": "old", "status": "SUCCEEDED", "createdAt": 1000}],
    "SUBMITTED": [{"jobId": "j-3", "jobName": "fresh", "status": "SUBMITTED", "createdAt": 3000}],
}
