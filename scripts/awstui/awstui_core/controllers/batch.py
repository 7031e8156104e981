"""AWS Batch job queues and jobs controller."""

from __future__ import annotations

import enum
import functools
from typing import Sequence

from awstui_core.collectors.batch import JOB_STATUSES, BatchCollector
from awstui_core.commands import DEFAULT_SETTLE_SECONDS, Command, command, gather_all, mutation
from awstui_core.controllers import READY, DomainController, ListView, ViewKind
from awstui_core.formatting import format_timestamp, text_or_na
from awstui_core.models import (
    ActionCompleted,
    ActionKind,
    DetailFetched,
    Domain,
    ListFetched,
    LogsFetched,
    PendingAction,
    ResourceItem,
    ResourceKind,
)

TERMINATE_REASON = "Terminated by user"
FINISHED_STATUSES = {"SUCCEEDED", "FAILED"}


class BatchState(enum.Enum):
    JOB_QUEUE_LIST = "JobQueueList"
    JOB_LIST = "JobList"
    JOB_DETAILS = "JobDetails"
    JOB_LOGS = "JobLogs"


def sort_jobs_newest_first(jobs: list[dict]) -> list[dict]:
    """Order by ``createdAt`` descending; jobs without one go last."""
    return sorted(
        jobs,
        key=lambda job: (job.get("createdAt") is not None, job.get("createdAt") or 0),
        reverse=True,
    )


def fetch_all_jobs(collector: BatchCollector, job_queue: str, statuses: Sequence[str] = JOB_STATUSES) -> list[dict]:
    """List a queue's jobs across every status concurrently.

    Any failing status fails the whole listing; partial results are dropped.
    """
    calls = [functools.partial(collector.list_jobs, job_queue, status) for status in statuses]
    merged = [job for batch in gather_all(calls) for job in batch]
    return sort_jobs_newest_first(merged)


def job_queue_item(queue: dict) -> ResourceItem:
    name = queue.get("jobQueueName", "")
    return ResourceItem(
        title=name,
        description=f"Status: {queue.get('status', '')} | State: {queue.get('state', '')} | Priority: {queue.get('priority', '')}",
        filter_value=name,
        resource=queue,
    )


def job_item(job: dict) -> ResourceItem:
    name = job.get("jobName", "")
    return ResourceItem(
        title=name,
        description=f"ID: {job.get('jobId', '')} | Status: {job.get('status', '')} | Created: {format_timestamp(job.get('createdAt'))}",
        filter_value=name,
        resource=job,
    )


class BatchQueueController(DomainController):
    domain = Domain.BATCH_QUEUE
    ROOT = BatchState.JOB_QUEUE_LIST
    PARENTS = {
        BatchState.JOB_QUEUE_LIST: None,
        BatchState.JOB_LIST: BatchState.JOB_QUEUE_LIST,
        BatchState.JOB_DETAILS: BatchState.JOB_LIST,
        BatchState.JOB_LOGS: BatchState.JOB_LIST,
    }
    LIST_STATES = frozenset({BatchState.JOB_QUEUE_LIST, BatchState.JOB_LIST})
    VIEWS = {BatchState.JOB_DETAILS: ViewKind.DETAILS, BatchState.JOB_LOGS: ViewKind.LOGS}

    def __init__(self, collector: BatchCollector, settle_seconds: float = DEFAULT_SETTLE_SECONDS):
        self.collector = collector
        self.job_queues = ListView("Batch Job Queues", "No Batch job queues found in this region.")
        self.jobs = ListView("Jobs", "No Batch jobs found in this job queue.")
        self.job_queue: dict | None = None
        self.job: dict | None = None
        super().__init__(settle_seconds)

    def load(self) -> list[Command]:
        self.status = "Loading job queues..."
        return [self._fetch_job_queues()]

    def leave(self, state) -> None:
        if state is BatchState.JOB_QUEUE_LIST:
            self.job_queues.clear()
        elif state is BatchState.JOB_LIST:
            self.jobs.clear()
            self.job_queue = None
        elif state is BatchState.JOB_DETAILS:
            self.job = None
        elif state is BatchState.JOB_LOGS:
            self.paginator.clear()

    def active_list(self) -> ListView | None:
        if self.state is BatchState.JOB_QUEUE_LIST:
            return self.job_queues
        if self.state is BatchState.JOB_LIST:
            return self.jobs
        return None

    def all_lists(self) -> list[ListView]:
        return [self.job_queues, self.jobs]

    @property
    def queue_name(self) -> str:
        return (self.job_queue or {}).get("jobQueueName", "")

    # commands

    def _fetch_job_queues(self) -> Command:
        collector = self.collector
        return command("fetch job queues", lambda: ListFetched(ResourceKind.JOB_QUEUES, collector.list_job_queues()))

    def _fetch_jobs(self) -> Command:
        collector, queue = self.collector, self.queue_name
        return command(f"fetch jobs {queue}", lambda: ListFetched(ResourceKind.JOBS, fetch_all_jobs(collector, queue)))

    def _fetch_job(self, job_id: str) -> Command:
        collector = self.collector
        return command(f"describe job {job_id}", lambda: DetailFetched(ResourceKind.JOB, collector.describe_job(job_id)))

    def _fetch_logs(self, job_id: str) -> Command:
        collector = self.collector
        return command(f"fetch job logs {job_id}", lambda: LogsFetched(collector.job_logs(job_id)))

    def action_factories(self):
        collector, settle = self.collector, self.settle_seconds

        def stop(action: PendingAction) -> Command:
            return mutation(
                f"terminate job {action.target_id}",
                lambda: collector.terminate_job(action.target_id, TERMINATE_REASON),
                "stopped",
                action.target_id,
                settle,
            )

        return {ActionKind.STOP: stop}

    # input

    def on_key(self, key: str):
        if self.state is BatchState.JOB_QUEUE_LIST:
            if key == "r":
                self.status = "Refreshing Batch job queues..."
                return [self._fetch_job_queues()]
            if key == "enter":
                selected = self.job_queues.selected()
                if selected is None:
                    return []
                self.job_queue = selected.resource
                self.jobs.clear()
                self.state = BatchState.JOB_LIST
                self.status = f"Loading jobs for job queue {self.queue_name}..."
                return [self._fetch_jobs()]
            return None

        if self.state is not BatchState.JOB_LIST:
            return []
        if key == "r":
            self.status = f"Refreshing jobs for job queue {self.queue_name}..."
            return [self._fetch_jobs()]
        if key not in {"s", "l", "d"}:
            return None
        selected = self.jobs.selected()
        if selected is None:
            return []
        job = selected.resource
        job_id, name = job.get("jobId", ""), job.get("jobName", "")

        if key == "s":
            status = job.get("status", "")
            if status in FINISHED_STATUSES:
                self.status = f"Job {name} has already finished ({status})."
                return []
            return self.begin_action(ActionKind.STOP, job_id, f"Confirm stopping job {name} ({job_id})? (y/N)")
        if key == "l":
            self.paginator.clear()
            self.state = BatchState.JOB_LOGS
            self.status = f"Fetching logs for job {name}..."
            return [self._fetch_logs(job_id)]
        self.status = f"Fetching details for job {name}..."
        return [self._fetch_job(job_id)]

    # results

    def on_result(self, result) -> list[Command]:
        if isinstance(result, ListFetched):
            if result.kind is ResourceKind.JOB_QUEUES:
                self.job_queues.set_items(job_queue_item(q) for q in result.items)
            elif result.kind is ResourceKind.JOBS:
                self.jobs.set_items(job_item(j) for j in result.items)
            self.status = READY
        elif isinstance(result, DetailFetched) and result.kind is ResourceKind.JOB:
            if not self.still_selected(BatchState.JOB_LIST, self.jobs, "jobId", result.item):
                return []
            self.job = result.item
            self.state = BatchState.JOB_DETAILS
            self.status = READY
        elif isinstance(result, LogsFetched):
            self.paginator.set_text(result.text)
            self.status = READY
        elif isinstance(result, ActionCompleted):
            if self.job_queue is None:
                self.status = f"Job {result.target_id} {result.label}."
                return []
            self.status = f"Job {result.target_id} {result.label}. Refreshing..."
            return [self._fetch_jobs()]
        return []

    def breadcrumb(self) -> list[str]:
        crumbs = [self.domain.value]
        if self.state is not BatchState.JOB_QUEUE_LIST:
            crumbs += [self.queue_name, "Jobs"]
        if self.state is BatchState.JOB_DETAILS and self.job:
            crumbs.append(self.job.get("jobName", ""))
        elif self.state is BatchState.JOB_LOGS:
            selected = self.jobs.selected()
            crumbs += [selected.title if selected else "", "Logs"]
        return crumbs

    def detail_rows(self) -> list[tuple[str, str]]:
        job = self.job
        if not job:
            return []
        container = job.get("container") or {}
        return [
            ("Job Name", text_or_na(job.get("jobName"))),
            ("Job ID", text_or_na(job.get("jobId"))),
            ("Status", text_or_na(job.get("status"))),
            ("Status Reason", text_or_na(job.get("statusReason"))),
            ("Job Definition", text_or_na(job.get("jobDefinition"))),
            ("Created At", format_timestamp(job.get("createdAt"))),
            ("Started At", format_timestamp(job.get("startedAt"))),
            ("Stopped At", format_timestamp(job.get("stoppedAt"))),
            ("Image", text_or_na(container.get("image"))),
            ("Log Stream", text_or_na(container.get("logStreamName"))),
        ]
