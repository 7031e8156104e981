"""User preference loading and built-in themes."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_THEME = "tokyo_night"

THEMES: dict[str, dict[str, str]] = {
    "tokyo_night": {
        "header": "bold #BB9AF7",
        "subheader": "bold #9EEB49",
        "selected": "#7AA2F7 on #1F2335",
        "muted": "#737AA2",
        "error": "bold #F7768E",
        "confirm": "bold #9EEB49",
        "border": "#7AA2F7",
        "accent": "#7DCFFF",
    },
    "dracula": {
        "header": "bold #BD93F9",
        "subheader": "bold #50FA7B",
        "selected": "#F8F8F2 on #44475A",
        "muted": "#6272A4",
        "error": "bold #FF5555",
        "confirm": "bold #50FA7B",
        "border": "#BD93F9",
        "accent": "#8BE9FD",
    },
    "gruvbox": {
        "header": "bold #D3869B",
        "subheader": "bold #B8BB26",
        "selected": "#FABD2F on #3C3836",
        "muted": "#928374",
        "error": "bold #FB4934",
        "confirm": "bold #B8BB26",
        "border": "#83A598",
        "accent": "#8EC07C",
    },
    "monochrome": {
        "header": "bold",
        "subheader": "bold underline",
        "selected": "reverse",
        "muted": "dim",
        "error": "bold",
        "confirm": "bold",
        "border": "default",
        "accent": "default",
    },
}

DEFAULTS: dict = {
    "theme": DEFAULT_THEME,
    "refresh_seconds": 1,
    "settle_seconds": 2.0,
    "history_max_results": 1000,
    "log_lookback_hours": 24,
}


def default_config_path() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "awstui" / "config.json"


def load_user_config(path: str | None) -> dict:
    """Read the JSON preference file.

    An explicit ``path`` must exist and parse; the default location is
    optional and falls back to built-in defaults when missing or malformed.
    """
    if path:
        config_path = Path(path)
        if not config_path.exists():
            raise ValueError(f"config path not found: {config_path}")
        try:
            data = json.loads(config_path.read_text())
        except json.JSONDecodeError as exc:
            raise ValueError(f"invalid JSON config: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError("invalid JSON config: top level must be an object")
        return data

    config_path = default_config_path()
    try:
        data = json.loads(config_path.read_text())
    except FileNotFoundError:
        return {}
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("ignoring unreadable config %s: %s", config_path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("ignoring config %s: top level is not an object", config_path)
        return {}
    return data


def _bounded(value, cast, low, high, fallback):
    try:
        number = cast(value)
    except (TypeError, ValueError):
        return fallback
    if high is not None:
        number = min(number, high)
    return max(low, number)


def resolve_settings(config_path: str | None = None) -> dict:
    resolved = dict(DEFAULTS)
    user_config = load_user_config(config_path)

    theme = user_config.get("theme")
    if theme in THEMES:
        resolved["theme"] = theme
    elif theme is not None:
        logger.warning("unknown theme %r, using %s", theme, DEFAULT_THEME)

    if "refresh_seconds" in user_config:
        resolved["refresh_seconds"] = _bounded(user_config["refresh_seconds"], int, 1, None, DEFAULTS["refresh_seconds"])
    if "settle_seconds" in user_config:
        resolved["settle_seconds"] = _bounded(user_config["settle_seconds"], float, 0.0, None, DEFAULTS["settle_seconds"])
    if "history_max_results" in user_config:
        resolved["history_max_results"] = _bounded(
            user_config["history_max_results"], int, 1, 1000, DEFAULTS["history_max_results"]
        )
    if "log_lookback_hours" in user_config:
        resolved["log_lookback_hours"] = _bounded(user_config["log_lookback_hours"], int, 1, None, DEFAULTS["log_lookback_hours"])

    return resolved


def theme_styles(name: str) -> dict[str, str]:
    return THEMES.get(name, THEMES[DEFAULT_THEME])
