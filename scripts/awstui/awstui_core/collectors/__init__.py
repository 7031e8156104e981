"""Collector helpers and package exports.

Collectors are thin adapters over the AWS APIs. They return plain boto3
response dicts and raise ``CollectorError`` with an operator-facing message.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable

import boto3
from botocore.exceptions import BotoCoreError, ClientError


class CollectorError(Exception):
    pass


def make_session(profile: str | None = None, region: str | None = None) -> boto3.Session:
    if profile or region:
        return boto3.Session(profile_name=profile, region_name=region)
    return boto3.Session()


def aws_call(message: str, fn: Callable[..., Any], **kwargs) -> Any:
    """Invoke ``fn`` and re-raise botocore failures as ``CollectorError``."""
    try:
        return fn(**kwargs)
    except (ClientError, BotoCoreError) as exc:
        raise CollectorError(f"{message}: {exc}") from exc


def format_log_event(event: dict) -> str:
    stamp = datetime.fromtimestamp(int(event.get("timestamp", 0)) / 1000).strftime("%H:%M:%S")
    return f"[{stamp}] {str(event.get('message', '')).rstrip()}"


def stream_header(stream_name: str) -> str:
    return f"--- Log Stream: {stream_name} ---"
