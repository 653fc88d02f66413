"""The Linting engine: runs rule instances against one document."""
from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from types import MappingProxyType
from typing import Any

from svglint.constants import LintingEvent, LintState
from svglint.diagnostics import Diagnostic, DiagnosticCollection
from svglint.parser import Document
from svglint.reporter import Reporter
from svglint.rules.base import RuleInstance

logger: logging.Logger = logging.getLogger(__name__)

LintingCallback = Callable[["Linting"], None]


class Linting:
    """
    One run of a set of rule instances over one parsed document.

    The Linting starts in RUNNING and moves to exactly one terminal state
    once every rule instance has finished. Observers subscribed to DONE are
    notified once; observers subscribing later are called immediately.
    """

    def __init__(
        self,
        *,
        file: Path | None,
        document: Document,
        rules: Mapping[str, Sequence[RuleInstance]],
        timeout: float | None = None,
    ) -> None:
        self.file: Path | None = file
        self.document: Document = document
        self.timeout: float | None = timeout
        self._rules: dict[str, tuple[RuleInstance, ...]] = {
            name: tuple(instances) for name, instances in rules.items()
        }
        self._diagnostics: DiagnosticCollection = DiagnosticCollection()
        for name in self._rules:
            self._diagnostics.declare(rule=name)
        self._state: LintState = LintState.RUNNING
        self._task: asyncio.Task[None] | None = None
        self._supervisors: set[asyncio.Task[None]] = set()
        self._pending: int = 0
        self._settled: asyncio.Event = asyncio.Event()
        self._fired: set[LintingEvent] = set()
        self._observers: dict[LintingEvent, list[LintingCallback]] = {
            event: [] for event in LintingEvent
        }

    @property
    def name(self) -> str:
        return str(self.file) if self.file is not None else "<source>"

    @property
    def state(self) -> LintState:
        return self._state

    @property
    def diagnostics(self) -> MappingProxyType[str, tuple[Diagnostic, ...]]:
        """Diagnostics grouped by rule name, in configured rule order."""
        return self._diagnostics.by_rule

    @property
    def error_count(self) -> int:
        return self._diagnostics.error_count

    @property
    def warning_count(self) -> int:
        return self._diagnostics.warning_count

    @property
    def started(self) -> bool:
        return self._task is not None

    def start(self) -> Linting:
        """Schedule the run on the running event loop and return immediately."""
        if self._task is not None:
            raise RuntimeError(f"Linting of {self.name} was already started")
        self._task = asyncio.get_running_loop().create_task(self._run())
        self._emit(LintingEvent.STARTED)
        return self

    async def wait(self) -> LintState:
        """Wait until the Linting is terminal and return its state."""
        if self._task is None:
            raise RuntimeError(f"Linting of {self.name} has not been started")
        await self._task
        return self._state

    def subscribe(self, *, event: LintingEvent, callback: LintingCallback) -> None:
        """Register an observer. Events that already fired are delivered now."""
        if event in self._fired:
            callback(self)
            return
        self._observers[event].append(callback)

    def _emit(self, event: LintingEvent) -> None:
        self._fired.add(event)
        callbacks: list[LintingCallback] = self._observers[event]
        self._observers[event] = []
        errors: list[Exception] = []
        for callback in callbacks:
            try:
                callback(self)
            except Exception as e:
                errors.append(e)
        if errors:
            raise ExceptionGroup(
                f"{len(errors)} {event.value} observer(s) of {self.name} failed",
                errors,
            )

    async def _run(self) -> None:
        self._pending = sum(len(instances) for instances in self._rules.values())
        for name, instances in self._rules.items():
            for index, instance in enumerate(instances):
                self._invoke(rule=name, index=index, instance=instance)

        if self._pending > 0:
            await self._settled.wait()

        self._finish()

    def _invoke(self, *, rule: str, index: int, instance: RuleInstance) -> None:
        closed: asyncio.Event = asyncio.Event()

        def _on_done(reporter: Reporter) -> None:
            closed.set()
            self._on_instance_done(reporter)

        reporter: Reporter = Reporter(
            rule=rule,
            instance=index,
            on_report=self._on_report,
            on_done=_on_done,
        )
        logger.debug("Running rule '%s' (#%d) on %s", rule, index, self.name)

        try:
            result: Any = instance(reporter, self.document)
        except Exception as e:
            reporter.exception(e)
            reporter.done()
            return

        if not inspect.isawaitable(result):
            reporter.done()
            return

        future: asyncio.Future[Any] = asyncio.ensure_future(result)
        supervisor: asyncio.Task[None] = asyncio.get_running_loop().create_task(
            self._supervise(reporter=reporter, future=future, closed=closed),
        )
        self._supervisors.add(supervisor)
        supervisor.add_done_callback(self._supervisors.discard)

    def _idle_left(self, *, reporter: Reporter, since: float) -> float | None:
        """Seconds until the inactivity bound is hit, or None without a bound."""
        if self.timeout is None:
            return None
        last: float = max(since, reporter.last_report_at or since)
        return max(0.0, last + self.timeout - time.monotonic())

    async def _supervise(
        self,
        *,
        reporter: Reporter,
        future: asyncio.Future[Any],
        closed: asyncio.Event,
    ) -> None:
        """Settle a reporter when its rule's awaitable completes or goes idle."""
        since: float = time.monotonic()
        closing: asyncio.Task[bool] = asyncio.get_running_loop().create_task(
            closed.wait(),
        )
        try:
            while not future.done():
                await asyncio.wait(
                    {future, closing},
                    timeout=self._idle_left(reporter=reporter, since=since),
                    return_when=asyncio.FIRST_COMPLETED,
                )
                if future.done():
                    break
                if reporter.finished:
                    future.add_done_callback(
                        lambda f: self._on_late_settle(reporter=reporter, future=f),
                    )
                    return
                if self._idle_left(reporter=reporter, since=since) == 0.0:
                    future.cancel()
                    future.add_done_callback(
                        lambda f: self._on_late_settle(reporter=reporter, future=f),
                    )
                    reporter.error(
                        f"Rule did not finish after {self.timeout:g}s without reporting",
                    )
                    reporter.done()
                    return
        finally:
            closing.cancel()

        if future.cancelled():
            reporter.error("Rule was cancelled before it finished")
        elif (exc := future.exception()) is not None:
            reporter.exception(exc)
        reporter.done()

    def _on_late_settle(self, *, reporter: Reporter, future: asyncio.Future[Any]) -> None:
        """Retrieve the outcome of a rule that kept running after it was done."""
        if future.cancelled():
            return
        exc: BaseException | None = future.exception()
        if exc is not None:
            logger.warning(
                "Rule '%s' (#%d) failed on %s after it was done: %r",
                reporter.rule,
                reporter.instance,
                self.name,
                exc,
            )

    def _on_report(self, diagnostic: Diagnostic) -> None:
        self._diagnostics.add(diagnostic=diagnostic)

    def _on_instance_done(self, reporter: Reporter) -> None:
        self._pending -= 1
        logger.debug(
            "Rule '%s' (#%d) done on %s, %d to go",
            reporter.rule,
            reporter.instance,
            self.name,
            self._pending,
        )
        if self._pending == 0:
            self._settled.set()

    def _finish(self) -> None:
        self._diagnostics.freeze()
        self._state = self._diagnostics.state
        logger.debug("Linting of %s finished: %s", self.name, self._state.value)
        self._emit(LintingEvent.DONE)
