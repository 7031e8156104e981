"""Interactive AWS resource console entrypoint."""

from __future__ import annotations

import argparse
import logging
import queue
import sys
import time

import boto3
from botocore.exceptions import BotoCoreError
from rich.console import Console
from rich.live import Live

from awstui_core.collectors import make_session
from awstui_core.collectors.batch import BatchCollector
from awstui_core.collectors.compute import ComputeCollector
from awstui_core.collectors.containers import ContainerCollector
from awstui_core.collectors.registry import RegistryCollector
from awstui_core.collectors.workflows import WorkflowCollector
from awstui_core.commands import Command, CommandRunner
from awstui_core.config import resolve_settings, theme_styles
from awstui_core.controllers import DomainController
from awstui_core.controllers.batch import BatchQueueController
from awstui_core.controllers.compute import ComputeController
from awstui_core.controllers.containers import ClusterServiceController
from awstui_core.controllers.registry import RegistryController
from awstui_core.controllers.workflows import WorkflowController
from awstui_core.dispatcher import Dispatcher
from awstui_core.keys import TerminalKeys
from awstui_core.logging_setup import configure_logging
from awstui_core.models import Domain, KeyEvent, ResizeEvent, TickEvent
from awstui_core.panels.screen import render as render_screen

logger = logging.getLogger(__name__)

POLL_SECONDS = 0.1


def build_controllers(session: boto3.Session, settings: dict) -> dict[Domain, DomainController]:
    settle = settings["settle_seconds"]
    return {
        Domain.COMPUTE: ComputeController(ComputeCollector(session), settle),
        Domain.CLUSTER_SERVICE: ClusterServiceController(
            ContainerCollector(session), settle, lookback_hours=settings["log_lookback_hours"]
        ),
        Domain.REGISTRY: RegistryController(RegistryCollector(session), settle),
        Domain.WORKFLOW: WorkflowController(
            WorkflowCollector(session, history_max_results=settings["history_max_results"]), settle
        ),
        Domain.BATCH_QUEUE: BatchQueueController(BatchCollector(session), settle),
    }


def session_label(session: boto3.Session) -> str:
    return f"{session.profile_name or 'default'} · {session.region_name or 'no region'}"


class ConsoleLoop:
    """Feeds key, resize, tick and result events into the dispatcher and redraws."""

    def __init__(self, dispatcher: Dispatcher, console: Console, theme: dict[str, str], label: str, refresh_seconds: int):
        self.dispatcher = dispatcher
        self.console = console
        self.theme = theme
        self.label = label
        self.refresh_seconds = refresh_seconds
        self.results: queue.Queue = queue.Queue()
        self.runner = CommandRunner(self.results.put)
        self._size: tuple[int, int] | None = None
        self._live: Live | None = None
        self._keys: TerminalKeys | None = None

    def renderable(self):
        return render_screen(self.dispatcher, self.theme, self.label)

    def run(self) -> int:
        last_tick = time.monotonic()
        try:
            with TerminalKeys() as keys, Live(
                self.renderable(), console=self.console, refresh_per_second=10, screen=True
            ) as live:
                self._keys, self._live = keys, live
                while self.dispatcher.running:
                    self._check_size()
                    for key in keys.poll(POLL_SECONDS):
                        self.execute(self.dispatcher.handle(KeyEvent(key)))
                        if not self.dispatcher.running:
                            break
                    self._drain_results()
                    now = time.monotonic()
                    if now - last_tick >= self.refresh_seconds:
                        last_tick = now
                        self.dispatcher.handle(TickEvent())
                    live.update(self.renderable())
        except KeyboardInterrupt:
            pass
        finally:
            self.runner.shutdown()
            self._keys, self._live = None, None
        return 0

    def execute(self, cmds: list[Command]) -> None:
        pending = list(cmds)
        while pending:
            cmd = pending.pop(0)
            if cmd.interactive:
                pending.extend(self._run_foreground(cmd))
            else:
                self.runner.submit(cmd)

    def _run_foreground(self, cmd: Command) -> list[Command]:
        logger.info("handing terminal to %r", cmd.label)
        if self._live is not None:
            self._live.stop()
        try:
            if self._keys is not None:
                with self._keys.suspended():
                    event = cmd.event()
            else:
                event = cmd.event()
        finally:
            if self._live is not None:
                self._live.start(refresh=True)
        return self.dispatcher.handle(event)

    def _check_size(self) -> None:
        size = (self.console.size.width, self.console.size.height)
        if size != self._size:
            self._size = size
            self.dispatcher.handle(ResizeEvent(width=size[0], height=size[1]))

    def _drain_results(self) -> None:
        while True:
            try:
                event = self.results.get_nowait()
            except queue.Empty:
                return
            self.execute(self.dispatcher.handle(event))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Interactive console for EC2, ECS, ECR, Step Functions and Batch")
    parser.add_argument("--profile", help="AWS shared-config profile name")
    parser.add_argument("--region", help="AWS region override")
    parser.add_argument("--config", help="JSON preference file (theme, refresh and fetch limits)")
    parser.add_argument("--log-file", help="Log file path override")
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level")
    args = parser.parse_args(argv)

    log_path = configure_logging(args.log_file, debug=args.debug)

    try:
        settings = resolve_settings(args.config)
    except ValueError as exc:
        print(f"awstui: {exc}", file=sys.stderr)
        return 2

    try:
        session = make_session(args.profile, args.region)
        controllers = build_controllers(session, settings)
    except BotoCoreError as exc:
        print(f"awstui: AWS session setup failed: {exc}", file=sys.stderr)
        return 2

    label = session_label(session)
    logger.info("starting session %s theme=%s log=%s", label, settings["theme"], log_path)
    loop = ConsoleLoop(
        Dispatcher(controllers),
        Console(),
        theme_styles(settings["theme"]),
        label,
        settings["refresh_seconds"],
    )
    return loop.run()


if __name__ == "__main__":
    raise SystemExit(main())
