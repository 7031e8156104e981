"""AWS Batch collector, including job logs from CloudWatch."""

from __future__ import annotations

import boto3

from awstui_core.collectors import CollectorError, aws_call, format_log_event, stream_header

JOB_STATUSES = (
    "SUBMITTED",
    "PENDING",
    "RUNNABLE",
    "STARTING",
    "RUNNING",
    "SUCCEEDED",
    "FAILED",
)
JOB_LOG_GROUP = "/aws/batch/job"


class BatchCollector:
    def __init__(self, session: boto3.Session):
        self.batch = session.client("batch")
        self.logs = session.client("logs")

    def list_job_queues(self) -> list[dict]:
        return aws_call("failed to describe Batch job queues", self.batch.describe_job_queues).get("jobQueues", [])

    def list_jobs(self, job_queue: str, status: str) -> list[dict]:
        return aws_call(
            f"failed to list Batch jobs ({status})",
            self.batch.list_jobs,
            jobQueue=job_queue,
            jobStatus=status,
        ).get("jobSummaryList", [])

    def describe_job(self, job_id: str) -> dict:
        jobs = aws_call(f"failed to describe Batch job {job_id}", self.batch.describe_jobs, jobs=[job_id]).get("jobs")
        if not jobs:
            raise CollectorError(f"Batch job {job_id} not found")
        return jobs[0]

    def terminate_job(self, job_id: str, reason: str) -> None:
        aws_call(f"failed to stop Batch job {job_id}", self.batch.terminate_job, jobId=job_id, reason=reason)

    def job_logs(self, job_id: str) -> str:
        job = self.describe_job(job_id)
        stream_name = (job.get("container") or {}).get("logStreamName")
        if not stream_name:
            raise CollectorError(f"job {job_id} has no container log stream")
        return self.stream_logs(stream_name)

    def stream_logs(self, stream_name: str) -> str:
        lines: list[str] = []
        token: str | None = None
        while True:
            kwargs = {"logGroupName": JOB_LOG_GROUP, "logStreamName": stream_name, "startFromHead": True}
            if token:
                kwargs["nextToken"] = token
            result = aws_call(f"failed to get log events for stream {stream_name}", self.logs.get_log_events, **kwargs)
            lines.extend(format_log_event(event) for event in result.get("events", []))
            next_token = result.get("nextForwardToken")
            # an unchanged forward token marks the end of the stream
            if not next_token or next_token == token:
                break
            token = next_token

        if not lines:
            return "No logs found for this job."
        return "\n".join([stream_header(stream_name), *lines, ""])
