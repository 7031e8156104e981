from __future__ import annotations

import io
import unittest
from datetime import datetime, timezone
from pathlib import Path
import sys

from rich.console import Console
from rich.panel import Panel

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from awstui_core.config import theme_styles  # noqa: E402
from awstui_core.controllers import ListView  # noqa: E402
from awstui_core.controllers.compute import ComputeController  # noqa: E402
from awstui_core.dispatcher import Dispatcher  # noqa: E402
from awstui_core.formatting import format_timestamp, instance_name, security_group_names, text_or_na, to_datetime  # noqa: E402
from awstui_core.keys import HELP, STATE_HELP, decode_keys  # noqa: E402
from awstui_core.models import Domain, KeyEvent, ResourceItem  # noqa: E402
from awstui_core.pagination import Paginator  # noqa: E402
from awstui_core.panels import kv_table  # noqa: E402
from awstui_core.panels.listing import render as render_listing  # noqa: E402
from awstui_core.panels.logs import render as render_logs  # noqa: E402
from awstui_core.panels.screen import help_text, render as render_screen  # noqa: E402
from awstui_core.tests.fakes import FakeCompute, ec2_instance  # noqa: E402

THEME = theme_styles("monochrome")


def as_text(renderable, width: int = 100) -> str:
    buffer = io.StringIO()
    Console(file=buffer, width=width, color_system=None).print(renderable)
    return buffer.getvalue()


def settle(dispatcher, cmds):
    pending = list(cmds)
    while pending:
        pending.extend(dispatcher.handle(pending.pop(0).event()))


class PanelTests(unittest.TestCase):
    def test_listing_marks_selected_row(self):
        listing = ListView("Things", "Nothing here.")
        listing.set_items(ResourceItem(title=t, description=f"about {t}", filter_value=t) for t in ["alpha", "beta"])
        listing.handle_key("down")
        text = as_text(render_listing(listing, THEME))
        self.assertIn("Things (2)", text)
        self.assertIn("› beta", text)
        self.assertIn("about alpha", text)

    def test_listing_empty_message(self):
        text = as_text(render_listing(ListView("Things", "Nothing here."), THEME))
        self.assertIn("Nothing here.", text)

    def test_logs_panel_shows_page_indicator(self):
        paginator = Paginator(per_page=2)
        paginator.set_text("a\nb\nc")
        panel = render_logs(paginator, THEME)
        self.assertIsInstance(panel, Panel)
        self.assertEqual(panel.subtitle, "1/2")

    def test_kv_table_has_two_columns(self):
        table = kv_table([("Name", "web"), ("State", "running")])
        self.assertEqual(len(table.columns), 2)
        self.assertEqual(table.row_count, 2)


class ScreenTests(unittest.TestCase):
    def setUp(self):
        controller = ComputeController(FakeCompute([ec2_instance("i-123", "webserver", "running")]), settle_seconds=0)
        self.dispatcher = Dispatcher({Domain.COMPUTE: controller})

    def test_menu_screen(self):
        text = as_text(render_screen(self.dispatcher, THEME, "default · us-east-1"))
        self.assertIn("EC2 Instances", text)
        self.assertIn("default · us-east-1", text)
        self.assertEqual(help_text(None), HELP["menu"])

    def test_domain_screen_with_breadcrumb_and_confirm(self):
        settle(self.dispatcher, self.dispatcher.handle(KeyEvent("enter")))
        text = as_text(render_screen(self.dispatcher, THEME))
        self.assertIn("webserver (i-123)", text)
        self.assertEqual(help_text(self.dispatcher.controller), STATE_HELP["InstanceList"])

        self.dispatcher.handle(KeyEvent("s"))
        text = as_text(render_screen(self.dispatcher, THEME))
        self.assertIn("Confirm stopping instance webserver (i-123)? (y/N)", text)
        self.assertEqual(help_text(self.dispatcher.controller), HELP["confirm"])

    def test_confirm_prompt_survives_late_refresh(self):
        settle(self.dispatcher, self.dispatcher.handle(KeyEvent("enter")))
        refresh = self.dispatcher.handle(KeyEvent("r"))
        self.dispatcher.handle(KeyEvent("s"))
        self.dispatcher.handle(refresh[0].event())
        self.assertTrue(self.dispatcher.controller.confirm.active)
        self.assertIn("Confirm stopping instance webserver (i-123)? (y/N)", as_text(render_screen(self.dispatcher, THEME)))

    def test_error_slot_rendered(self):
        settle(self.dispatcher, self.dispatcher.handle(KeyEvent("enter")))
        self.dispatcher.error = "failed to describe instances: denied"
        self.assertIn("Error: failed to describe instances: denied", as_text(render_screen(self.dispatcher, THEME)))


class FormattingTests(unittest.TestCase):
    def test_instance_name_from_tag(self):
        self.assertEqual(instance_name({"Tags": [{"Key": "env", "Value": "prod"}, {"Key": "Name", "Value": "web"}]}), "web")
        self.assertEqual(instance_name({}), "N/A")

    def test_security_groups_joined(self):
        instance = {"SecurityGroups": [{"GroupName": "ssh"}, {"GroupName": "web"}]}
        self.assertEqual(security_group_names(instance), "ssh, web")
        self.assertEqual(security_group_names({}), "N/A")

    def test_timestamp_inputs(self):
        self.assertEqual(format_timestamp(None), "N/A")
        self.assertEqual(to_datetime(0), datetime(1970, 1, 1, tzinfo=timezone.utc))
        self.assertEqual(to_datetime("2024-01-01T00:00:00Z"), datetime(2024, 1, 1, tzinfo=timezone.utc))
        self.assertIsNone(to_datetime("yesterday"))
        self.assertEqual(text_or_na(""), "N/A")


class KeyDecodingTests(unittest.TestCase):
    def test_arrows_and_controls(self):
        self.assertEqual(decode_keys("\x1b[A\x1b[Bq\r\x7f"), ["up", "down", "q", "enter", "backspace"])

    def test_page_keys(self):
        self.assertEqual(decode_keys("\x1b[5~\x1b[6~"), ["pgup", "pgdown"])

    def test_lone_escape(self):
        self.assertEqual(decode_keys("\x1b"), ["esc"])

    def test_unknown_sequence_swallowed(self):
        self.assertEqual(decode_keys("\x1b[1;5Cx"), ["x"])


if __name__ == "__main__":
    unittest.main()
