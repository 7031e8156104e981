"""EC2 instance collector."""

from __future__ import annotations

import logging
import os
import subprocess

import boto3

from awstui_core.collectors import CollectorError, aws_call

logger = logging.getLogger(__name__)

TERMINATED = "terminated"


class ComputeCollector:
    def __init__(self, session: boto3.Session):
        self.ec2 = session.client("ec2")

    def list_instances(self) -> list[dict]:
        result = aws_call("failed to describe instances", self.ec2.describe_instances)
        instances = []
        for reservation in result.get("Reservations", []):
            for instance in reservation.get("Instances", []):
                if (instance.get("State") or {}).get("Name") != TERMINATED:
                    instances.append(instance)
        return instances

    def describe_instance(self, instance_id: str) -> dict:
        result = aws_call(
            f"failed to describe instance {instance_id} details",
            self.ec2.describe_instances,
            InstanceIds=[instance_id],
        )
        reservations = result.get("Reservations") or []
        if reservations and reservations[0].get("Instances"):
            return reservations[0]["Instances"][0]
        raise CollectorError(f"instance {instance_id} not found")

    def start_instance(self, instance_id: str) -> None:
        aws_call(f"failed to start instance {instance_id}", self.ec2.start_instances, InstanceIds=[instance_id])

    def stop_instance(self, instance_id: str) -> None:
        aws_call(f"failed to stop instance {instance_id}", self.ec2.stop_instances, InstanceIds=[instance_id])


def ssh_command(public_ip: str, key_name: str, user: str = "ec2-user") -> list[str]:
    key_path = os.path.expanduser(f"~/.ssh/{key_name}.pem")
    return ["ssh", "-i", key_path, f"{user}@{public_ip}"]


def run_ssh(public_ip: str, key_name: str) -> int:
    """Run an interactive SSH session in the foreground; returns its exit code."""
    try:
        completed = subprocess.run(ssh_command(public_ip, key_name), check=False)
    except FileNotFoundError as exc:
        raise CollectorError("ssh client not installed") from exc
    if completed.returncode != 0:
        logger.info("ssh to %s exited with status %d", public_ip, completed.returncode)
    return completed.returncode
