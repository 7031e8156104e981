from __future__ import annotations

import base64
import unittest
from datetime import datetime, timezone
from pathlib import Path
import sys
from unittest import mock

import boto3
from botocore.stub import Stubber

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from awstui_core.collectors import CollectorError, format_log_event, stream_header  # noqa: E402
from awstui_core.collectors.batch import JOB_LOG_GROUP, BatchCollector  # noqa: E402
from awstui_core.collectors.compute import ComputeCollector, run_ssh, ssh_command  # noqa: E402
from awstui_core.collectors.registry import RegistryCollector  # noqa: E402
from awstui_core.collectors.workflows import WorkflowCollector  # noqa: E402


def fake_session() -> boto3.Session:
    return boto3.Session(aws_access_key_id="testing", aws_secret_access_key="testing", region_name="us-east-1")


class ComputeCollectorTests(unittest.TestCase):
    def setUp(self):
        self.collector = ComputeCollector(fake_session())
        self.stubber = Stubber(self.collector.ec2)

    def test_list_excludes_terminated(self):
        self.stubber.add_response(
            "describe_instances",
            {
                "Reservations": [
                    {"Instances": [{"InstanceId": "i-1", "State": {"Name": "running"}}]},
                    {"Instances": [{"InstanceId": "i-2", "State": {"Name": "terminated"}}]},
                    {"Instances": [{"InstanceId": "i-3", "State": {"Name": "stopped"}}]},
                ]
            },
            {},
        )
        with self.stubber:
            instances = self.collector.list_instances()
        self.assertEqual([i["InstanceId"] for i in instances], ["i-1", "i-3"])

    def test_describe_missing_instance(self):
        self.stubber.add_response("describe_instances", {"Reservations": []}, {"InstanceIds": ["i-9"]})
        with self.stubber:
            with self.assertRaises(CollectorError) as ctx:
                self.collector.describe_instance("i-9")
        self.assertEqual(str(ctx.exception), "instance i-9 not found")

    def test_client_error_is_wrapped(self):
        self.stubber.add_client_error("stop_instances", service_error_code="UnauthorizedOperation", service_message="denied")
        with self.stubber:
            with self.assertRaises(CollectorError) as ctx:
                self.collector.stop_instance("i-1")
        self.assertTrue(str(ctx.exception).startswith("failed to stop instance i-1:"))

    def test_ssh_command_uses_key_file(self):
        cmd = ssh_command("1.2.3.4", "deploy")
        self.assertEqual(cmd[0], "ssh")
        self.assertTrue(cmd[2].endswith("/.ssh/deploy.pem"))
        self.assertEqual(cmd[3], "ec2-user@1.2.3.4")

    def test_ssh_nonzero_exit_is_returned(self):
        with mock.patch("awstui_core.collectors.compute.subprocess.run") as run:
            run.return_value = mock.Mock(returncode=1)
            self.assertEqual(run_ssh("1.2.3.4", "deploy"), 1)

    def test_missing_ssh_client_raises(self):
        with mock.patch("awstui_core.collectors.compute.subprocess.run", side_effect=FileNotFoundError("ssh")):
            with self.assertRaises(CollectorError) as ctx:
                run_ssh("1.2.3.4", "deploy")
        self.assertEqual(str(ctx.exception), "ssh client not installed")


class BatchCollectorTests(unittest.TestCase):
    def setUp(self):
        self.collector = BatchCollector(fake_session())
        self.batch = Stubber(self.collector.batch)
        self.logs = Stubber(self.collector.logs)

    def test_list_jobs_error_names_status(self):
        self.batch.add_client_error("list_jobs", service_error_code="ClientException", service_message="throttled")
        with self.batch:
            with self.assertRaises(CollectorError) as ctx:
                self.collector.list_jobs("queue", "FAILED")
        self.assertIn("(FAILED)", str(ctx.exception))

    def test_stream_logs_follows_forward_token(self):
        base = {"logGroupName": JOB_LOG_GROUP, "logStreamName": "job/default/abc", "startFromHead": True}
        self.logs.add_response(
            "get_log_events",
            {"events": [{"timestamp": 1700000000000, "message": "first"}], "nextForwardToken": "f/1"},
            base,
        )
        self.logs.add_response(
            "get_log_events",
            {"events": [{"timestamp": 1700000001000, "message": "second"}], "nextForwardToken": "f/2"},
            dict(base, nextToken="f/1"),
        )
        self.logs.add_response("get_log_events", {"events": [], "nextForwardToken": "f/2"}, dict(base, nextToken="f/2"))
        with self.logs:
            text = self.collector.stream_logs("job/default/abc")
        self.logs.assert_no_pending_responses()
        lines = text.splitlines()
        self.assertEqual(lines[0], stream_header("job/default/abc"))
        self.assertTrue(lines[1].endswith("] first"))
        self.assertTrue(lines[2].endswith("] second"))

    def test_stream_logs_empty(self):
        self.logs.add_response("get_log_events", {"events": [], "nextForwardToken": "f/0"})
        self.logs.add_response("get_log_events", {"events": [], "nextForwardToken": "f/0"})
        with self.logs:
            self.assertEqual(self.collector.stream_logs("s"), "No logs found for this job.")

    def test_job_without_stream(self):
        self.batch.add_response(
            "describe_jobs",
            {
                "jobs": [
                    {
                        "jobName": "nightly",
                        "jobId": "job-1",
                        "jobQueue": "queue",
                        "status": "RUNNABLE",
                        "startedAt": 0,
                        "jobDefinition": "def:1",
                    }
                ]
            },
            {"jobs": ["job-1"]},
        )
        with self.batch:
            with self.assertRaises(CollectorError) as ctx:
                self.collector.job_logs("job-1")
        self.assertEqual(str(ctx.exception), "job job-1 has no container log stream")


class RegistryCollectorTests(unittest.TestCase):
    def test_login_password_strips_user(self):
        collector = RegistryCollector(fake_session())
        stubber = Stubber(collector.ecr)
        token = base64.b64encode(b"AWS:s3cret").decode()
        stubber.add_response("get_authorization_token", {"authorizationData": [{"authorizationToken": token}]}, {})
        with stubber:
            self.assertEqual(collector.login_password(), "s3cret")

    def test_pull_logs_in_then_pulls(self):
        collector = RegistryCollector(fake_session())
        with mock.patch.object(collector, "login_password", return_value="pw"), mock.patch(
            "awstui_core.collectors.registry.subprocess.run"
        ) as run:
            run.return_value = mock.Mock(returncode=0, stdout="", stderr="")
            collector.pull("123.dkr.ecr.us-east-1.amazonaws.com/app", "latest")
        login, pull = (call.args[0] for call in run.call_args_list)
        self.assertEqual(login, ["docker", "login", "-u", "AWS", "--password-stdin", "123.dkr.ecr.us-east-1.amazonaws.com"])
        self.assertEqual(run.call_args_list[0].kwargs["input"], "pw")
        self.assertEqual(pull, ["docker", "pull", "123.dkr.ecr.us-east-1.amazonaws.com/app:latest"])

    def test_docker_failure_reports_last_stderr_line(self):
        collector = RegistryCollector(fake_session())
        with mock.patch.object(collector, "login_password", return_value="pw"), mock.patch(
            "awstui_core.collectors.registry.subprocess.run"
        ) as run:
            run.return_value = mock.Mock(returncode=1, stdout="", stderr="Error: unauthorized\n")
            with self.assertRaises(CollectorError) as ctx:
                collector.push("123.dkr.ecr.us-east-1.amazonaws.com/app", "v1")
        self.assertEqual(str(ctx.exception), "failed to login to ECR: Error: unauthorized")


class WorkflowCollectorTests(unittest.TestCase):
    def test_history_is_converted(self):
        collector = WorkflowCollector(fake_session(), history_max_results=50)
        stubber = Stubber(collector.sfn)
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        stubber.add_response(
            "get_execution_history",
            {
                "events": [
                    {"id": 1, "type": "ExecutionStarted", "timestamp": now},
                    {
                        "id": 2,
                        "type": "TaskStateEntered",
                        "previousEventId": 1,
                        "timestamp": now,
                        "stateEnteredEventDetails": {"name": "Fetch"},
                    },
                ]
            },
            {"executionArn": "arn:exec", "maxResults": 50},
        )
        with stubber:
            events = collector.execution_history("arn:exec")
        self.assertEqual([(e.id, e.type, e.name) for e in events], [(1, "ExecutionStarted", ""), (2, "TaskStateEntered", "Fetch")])


class LogFormattingTests(unittest.TestCase):
    def test_format_log_event_strips_trailing_newline(self):
        line = format_log_event({"timestamp": 0, "message": "hello\n"})
        self.assertTrue(line.startswith("["))
        self.assertTrue(line.endswith("] hello"))


if __name__ == "__main__":
    unittest.main()
