"""Step Functions collector."""

from __future__ import annotations

import boto3

from awstui_core.collectors import aws_call
from awstui_core.models import HistoryEvent

HISTORY_MAX_RESULTS = 1000


class WorkflowCollector:
    def __init__(self, session: boto3.Session, history_max_results: int = HISTORY_MAX_RESULTS):
        self.sfn = session.client("stepfunctions")
        self.history_max_results = history_max_results

    def list_state_machines(self) -> list[dict]:
        return aws_call("failed to list state machines", self.sfn.list_state_machines).get("stateMachines", [])

    def list_executions(self, state_machine_arn: str) -> list[dict]:
        return aws_call(
            "failed to list executions",
            self.sfn.list_executions,
            stateMachineArn=state_machine_arn,
        ).get("executions", [])

    def execution_history(self, execution_arn: str) -> list[HistoryEvent]:
        result = aws_call(
            "failed to get execution history",
            self.sfn.get_execution_history,
            executionArn=execution_arn,
            maxResults=self.history_max_results,
        )
        return [HistoryEvent.from_api(event) for event in result.get("events", [])]

    def start_execution(self, state_machine_arn: str, payload: str = "{}") -> str:
        result = aws_call(
            "failed to start execution",
            self.sfn.start_execution,
            stateMachineArn=state_machine_arn,
            input=payload,
        )
        return result.get("executionArn", "")
