#!/usr/bin/env python3
"""Thin entrypoint for the interactive AWS resource console."""

from __future__ import annotations

from awstui_core.app import main


if __name__ == "__main__":
    raise SystemExit(main())
