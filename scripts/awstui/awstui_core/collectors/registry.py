"""ECR repository collector and docker pull/push side effects."""

from __future__ import annotations

import base64
import logging
import subprocess

import boto3

from awstui_core.collectors import CollectorError, aws_call

logger = logging.getLogger(__name__)

DOCKER_TIMEOUT_SECONDS = 900


class RegistryCollector:
    def __init__(self, session: boto3.Session):
        self.ecr = session.client("ecr")

    def list_repositories(self) -> list[dict]:
        return aws_call("failed to describe ECR repositories", self.ecr.describe_repositories).get("repositories", [])

    def list_images(self, repository_name: str) -> list[dict]:
        return aws_call(
            "failed to describe ECR images",
            self.ecr.describe_images,
            repositoryName=repository_name,
        ).get("imageDetails", [])

    def login_password(self) -> str:
        result = aws_call("failed to get ECR authorization token", self.ecr.get_authorization_token)
        data = result.get("authorizationData") or []
        if not data:
            raise CollectorError("failed to get ECR authorization token: empty response")
        try:
            decoded = base64.b64decode(data[0]["authorizationToken"]).decode()
        except (KeyError, ValueError) as exc:
            raise CollectorError(f"failed to decode ECR authorization token: {exc}") from exc
        # token is "AWS:<password>"
        return decoded.split(":", 1)[1] if ":" in decoded else decoded

    def pull(self, repository_uri: str, tag: str) -> None:
        self._login(repository_uri)
        _docker(["pull", f"{repository_uri}:{tag}"], "failed to pull docker image")

    def push(self, repository_uri: str, tag: str) -> None:
        self._login(repository_uri)
        _docker(["push", f"{repository_uri}:{tag}"], "failed to push docker image")

    def _login(self, repository_uri: str) -> None:
        registry = repository_uri.split("/", 1)[0]
        _docker(
            ["login", "-u", "AWS", "--password-stdin", registry],
            "failed to login to ECR",
            stdin=self.login_password(),
        )


def _docker(args: list[str], message: str, stdin: str | None = None) -> None:
    cmd = ["docker", *args]
    try:
        proc = subprocess.run(
            cmd,
            input=stdin,
            capture_output=True,
            text=True,
            timeout=DOCKER_TIMEOUT_SECONDS,
            check=False,
        )
    except FileNotFoundError as exc:
        raise CollectorError(f"{message}: docker CLI not installed") from exc
    except subprocess.TimeoutExpired as exc:
        raise CollectorError(f"{message}: timed out") from exc

    logger.info("docker %s exited with %s", args[0], proc.returncode)
    if proc.returncode != 0:
        detail = (proc.stderr or proc.stdout or "").strip().splitlines()
        raise CollectorError(f"{message}: {detail[-1] if detail else f'exit status {proc.returncode}'}")
