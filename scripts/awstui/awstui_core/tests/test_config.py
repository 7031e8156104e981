from __future__ import annotations

import json
import logging
import os
import tempfile
import unittest
from pathlib import Path
import sys
from unittest import mock

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from awstui_core.config import DEFAULT_THEME, DEFAULTS, THEMES, load_user_config, resolve_settings, theme_styles  # noqa: E402
from awstui_core.logging_setup import LOGGER_NAME, configure_logging  # noqa: E402


class ConfigTests(unittest.TestCase):
    def test_defaults_without_file(self):
        with tempfile.TemporaryDirectory() as tmp, mock.patch.dict(os.environ, {"XDG_CONFIG_HOME": tmp}):
            settings = resolve_settings()
        self.assertEqual(settings, DEFAULTS)
        self.assertEqual(settings["theme"], "tokyo_night")

    def test_malformed_default_file_falls_back(self):
        with tempfile.TemporaryDirectory() as tmp, mock.patch.dict(os.environ, {"XDG_CONFIG_HOME": tmp}):
            cfg_path = Path(tmp) / "awstui" / "config.json"
            cfg_path.parent.mkdir(parents=True)
            cfg_path.write_text("{not json")
            settings = resolve_settings()
        self.assertEqual(settings["theme"], DEFAULT_THEME)

    def test_explicit_overrides(self):
        with tempfile.TemporaryDirectory() as tmp:
            cfg_path = Path(tmp) / "cfg.json"
            cfg_path.write_text(
                json.dumps({"theme": "dracula", "settle_seconds": 0.5, "history_max_results": 5000, "log_lookback_hours": 6})
            )
            settings = resolve_settings(str(cfg_path))
        self.assertEqual(settings["theme"], "dracula")
        self.assertEqual(settings["settle_seconds"], 0.5)
        self.assertEqual(settings["history_max_results"], 1000)
        self.assertEqual(settings["log_lookback_hours"], 6)

    def test_unknown_theme_falls_back(self):
        with tempfile.TemporaryDirectory() as tmp:
            cfg_path = Path(tmp) / "cfg.json"
            cfg_path.write_text(json.dumps({"theme": "solarized", "refresh_seconds": "soon"}))
            settings = resolve_settings(str(cfg_path))
        self.assertEqual(settings["theme"], DEFAULT_THEME)
        self.assertEqual(settings["refresh_seconds"], DEFAULTS["refresh_seconds"])

    def test_explicit_missing_path_raises(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ValueError):
                load_user_config(str(Path(tmp) / "missing.json"))

    def test_explicit_invalid_json_raises(self):
        with tempfile.TemporaryDirectory() as tmp:
            cfg_path = Path(tmp) / "cfg.json"
            cfg_path.write_text("[1, 2]")
            with self.assertRaises(ValueError):
                load_user_config(str(cfg_path))

    def test_every_theme_defines_every_role(self):
        roles = set(THEMES[DEFAULT_THEME])
        for name, styles in THEMES.items():
            self.assertEqual(set(styles), roles, name)
        self.assertEqual(theme_styles("nope"), THEMES[DEFAULT_THEME])


class LoggingSetupTests(unittest.TestCase):
    def test_file_handler_only(self):
        with tempfile.TemporaryDirectory() as tmp:
            log_path = Path(tmp) / "nested" / "awstui.log"
            returned = configure_logging(str(log_path), debug=True)
            logger = logging.getLogger(LOGGER_NAME)
            try:
                self.assertEqual(returned, log_path)
                self.assertFalse(logger.propagate)
                self.assertEqual(logger.level, logging.DEBUG)
                self.assertEqual(len(logger.handlers), 1)
                logging.getLogger(f"{LOGGER_NAME}.commands").info("dispatching")
                logger.handlers[0].flush()
                self.assertIn("level=INFO logger=awstui_core.commands msg=dispatching", log_path.read_text())
            finally:
                for handler in list(logger.handlers):
                    logger.removeHandler(handler)
                    handler.close()


if __name__ == "__main__":
    unittest.main()
