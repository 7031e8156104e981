"""Async commands: units of backend work that yield exactly one result."""

from __future__ import annotations

import concurrent.futures
import logging
import time
from dataclasses import dataclass, replace
from typing import Any, Callable, Sequence

from awstui_core.collectors import CollectorError
from awstui_core.models import ActionCompleted, AsyncResult, Domain, Failed, ResultEvent

logger = logging.getLogger(__name__)

DEFAULT_SETTLE_SECONDS = 2.0
MAX_WORKERS = 8


@dataclass(frozen=True)
class Command:
    label: str
    fn: Callable[[], AsyncResult]
    domain: Domain | None = None
    epoch: int = 0
    interactive: bool = False

    def stamped(self, domain: Domain, epoch: int) -> "Command":
        return replace(self, domain=domain, epoch=epoch)

    def run(self) -> AsyncResult:
        try:
            return self.fn()
        except CollectorError as exc:
            logger.warning("command %r failed: %s", self.label, exc)
            return Failed(str(exc))
        except Exception as exc:
            logger.exception("command %r raised unexpectedly", self.label)
            return Failed(f"unexpected error: {exc}")

    def event(self) -> ResultEvent:
        return ResultEvent(domain=self.domain, epoch=self.epoch, result=self.run())


def command(label: str, fn: Callable[[], AsyncResult]) -> Command:
    return Command(label=label, fn=fn)


def mutation(label: str, action: Callable[[], Any], done_label: str, target_id: str, settle_seconds: float) -> Command:
    """Wrap a mutating call; completion waits ``settle_seconds`` before reporting."""

    def run() -> AsyncResult:
        action()
        if settle_seconds > 0:
            time.sleep(settle_seconds)
        return ActionCompleted(label=done_label, target_id=target_id)

    return Command(label=label, fn=run)


def gather_all(calls: Sequence[Callable[[], Any]], max_workers: int | None = None) -> list[Any]:
    """Run every call concurrently and wait for all of them.

    Results are returned in completion order. If any call raised, the first
    failure to complete is re-raised once all calls have finished and every
    partial result is discarded.
    """
    if not calls:
        return []
    results: list[Any] = []
    first_error: BaseException | None = None
    workers = max_workers or len(calls)
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers, thread_name_prefix="awstui-fanout") as pool:
        futures = [pool.submit(call) for call in calls]
        for future in concurrent.futures.as_completed(futures):
            error = future.exception()
            if error is not None:
                if first_error is None:
                    first_error = error
                continue
            results.append(future.result())
    if first_error is not None:
        raise first_error
    return results


class CommandRunner:
    """Executes commands on worker threads and posts their results."""

    def __init__(self, post: Callable[[ResultEvent], None], max_workers: int = MAX_WORKERS):
        self._post = post
        self._pool = concurrent.futures.ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="awstui-cmd")

    def submit(self, cmd: Command) -> None:
        logger.debug("dispatching %r (domain=%s epoch=%s)", cmd.label, cmd.domain, cmd.epoch)
        self._pool.submit(self._execute, cmd)

    def _execute(self, cmd: Command) -> None:
        self._post(cmd.event())

    def shutdown(self) -> None:
        self._pool.shutdown(wait=False, cancel_futures=True)
