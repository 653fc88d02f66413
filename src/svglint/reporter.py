"""Per-instance diagnostic channel handed to running rules."""
from __future__ import annotations

import logging
import time
import xml.etree.ElementTree as ET
from collections.abc import Callable

from svglint.constants import Severity
from svglint.diagnostics import Diagnostic
from svglint.parser import describe

logger: logging.Logger = logging.getLogger(__name__)

Node = ET.Element | str | None


class Reporter:
    """
    Collects the diagnostics of one rule instance during one Linting.

    A rule may report any number of times until the reporter is done.
    ``done()`` is final: later reports are dropped with a warning so a
    misbehaving rule cannot alter a settled Linting.
    """

    def __init__(
        self,
        *,
        rule: str,
        instance: int,
        on_report: Callable[[Diagnostic], None],
        on_done: Callable[[Reporter], None],
    ) -> None:
        self.rule: str = rule
        self.instance: int = instance
        self._on_report: Callable[[Diagnostic], None] = on_report
        self._on_done: Callable[[Reporter], None] = on_done
        self._finished: bool = False
        self._activity: int = 0
        self._last_report_at: float | None = None

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def activity(self) -> int:
        """Number of reports accepted so far."""
        return self._activity

    @property
    def last_report_at(self) -> float | None:
        """``time.monotonic()`` of the latest accepted report, if any."""
        return self._last_report_at

    def error(self, message: str, node: Node = None) -> None:
        self._report(severity=Severity.ERROR, message=message, node=node)

    def warn(self, message: str, node: Node = None) -> None:
        self._report(severity=Severity.WARN, message=message, node=node)

    def info(self, message: str, node: Node = None) -> None:
        self._report(severity=Severity.INFO, message=message, node=node)

    def exception(self, exc: BaseException, node: Node = None) -> None:
        """Report an exception raised by the rule as an error."""
        message: str = f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__
        self._report(severity=Severity.ERROR, message=message, node=node)

    def done(self) -> None:
        """Mark the instance as finished. Calling it again has no effect."""
        if self._finished:
            return
        self._finished = True
        self._on_done(self)

    def _report(self, *, severity: Severity, message: str, node: Node) -> None:
        if self._finished:
            logger.warning(
                "Rule '%s' reported after it was done; ignoring: %s",
                self.rule,
                message,
            )
            return
        self._activity += 1
        self._last_report_at = time.monotonic()
        self._on_report(
            Diagnostic(
                rule=self.rule,
                instance=self.instance,
                severity=severity,
                message=message,
                node=describe(node) if isinstance(node, ET.Element) else node,
            ),
        )
