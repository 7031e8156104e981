"""Shared text and time formatting helpers for human-facing views."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

NOT_AVAILABLE = "N/A"


def instance_name(instance: dict) -> str:
    for tag in instance.get("Tags") or []:
        if tag.get("Key") == "Name":
            return str(tag.get("Value", ""))
    return NOT_AVAILABLE


def security_group_names(instance: dict) -> str:
    names = [str(group.get("GroupName", "")) for group in instance.get("SecurityGroups") or []]
    return ", ".join(names) if names else NOT_AVAILABLE


def join_values(values: list[Any] | None) -> str:
    return ", ".join(str(v) for v in values or [])


def text_or_na(value: Any) -> str:
    if value is None or value == "":
        return NOT_AVAILABLE
    return str(value)


def to_datetime(value: Any) -> datetime | None:
    """Accept boto datetimes, epoch milliseconds or ISO strings."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    return parse_iso_timestamp(str(value))


def format_timestamp(value: Any) -> str:
    parsed = to_datetime(value)
    if parsed is None:
        return NOT_AVAILABLE
    return parsed.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def parse_iso_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    text = value.strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
