"""File logging for the console; nothing is written to the terminal while it is live."""

from __future__ import annotations

import logging
import os
from pathlib import Path

LOGGER_NAME = "awstui_core"
_HANDLER: logging.Handler | None = None


def default_log_path() -> Path:
    base = os.environ.get("XDG_STATE_HOME") or str(Path.home() / ".local" / "state")
    return Path(base) / "awstui" / "awstui.log"


def configure_logging(log_path: str | None = None, debug: bool = False) -> Path:
    """Attach a file handler; the terminal is owned by the live screen."""
    global _HANDLER
    path = Path(log_path) if log_path else default_log_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.propagate = False

    if _HANDLER is not None:
        logger.removeHandler(_HANDLER)
        _HANDLER.close()
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter("ts=%(asctime)s level=%(levelname)s logger=%(name)s msg=%(message)s"))
    logger.addHandler(handler)
    _HANDLER = handler
    return path
