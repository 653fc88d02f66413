"""Output formatting and progress display for SVGLint runs."""
from __future__ import annotations

import json
import logging
from typing import Protocol

import click

from svglint.constants import LintingEvent, LintState, OutputFormat, Severity
from svglint.diagnostics import Diagnostic
from svglint.linting import Linting
from svglint.runner import RunResult

logger: logging.Logger = logging.getLogger(__name__)

_STATE_STYLES: dict[LintState, tuple[str, str]] = {
    LintState.RUNNING: ("…", "blue"),
    LintState.PASSING: ("✓", "green"),
    LintState.WARNING: ("!", "yellow"),
    LintState.ERROR: ("✖", "red"),
}

_SEVERITY_COLORS: dict[Severity, str] = {
    Severity.ERROR: "red",
    Severity.WARN: "yellow",
    Severity.INFO: "blue",
}


def _format_diagnostic(diag: Diagnostic, *, multiple: bool, color: bool) -> str:
    label: str = f"{diag.rule}#{diag.instance}" if multiple else diag.rule
    severity: str = diag.severity.value.upper()
    if color:
        severity = click.style(severity, fg=_SEVERITY_COLORS[diag.severity], bold=True)
    line: str = f"    {label}: {severity} {diag.message}"
    if diag.node is not None:
        line += f" {diag.node}"
    return line


def format_linting(linting: Linting, *, color: bool = False) -> str:
    """Format one Linting: a status line, then its diagnostics by rule."""
    symbol, fg = _STATE_STYLES[linting.state]
    header: str = f"{symbol} {linting.name}: {linting.state.value}"
    lines: list[str] = [click.style(header, fg=fg) if color else header]
    for diagnostics in linting.diagnostics.values():
        multiple: bool = len({d.instance for d in diagnostics}) > 1
        lines.extend(
            _format_diagnostic(d, multiple=multiple, color=color) for d in diagnostics
        )
    return "\n".join(lines)


def format_summary(*, result: RunResult) -> str:
    counts: dict[LintState, int] = {state: 0 for state in LintState}
    for linting in result.lintings:
        counts[linting.state] += 1

    suffix: str = "s" if result.files_checked != 1 else ""
    summary: str = (
        f"Linted {result.files_checked} file{suffix}: "
        f"{counts[LintState.PASSING]} passing, "
        f"{counts[LintState.WARNING]} with warnings, "
        f"{counts[LintState.ERROR]} with errors."
    )
    if result.skipped:
        skipped: int = len(result.skipped)
        summary += f" Skipped {skipped} unparsable file{'s' if skipped != 1 else ''}."
    return summary


def format_skipped(*, result: RunResult) -> str:
    return "\n".join(f"? {s.file}: {s.reason}" for s in result.skipped)


class Formatter(Protocol):
    def format(self, *, result: RunResult, color: bool) -> str: ...


class TextFormatter:
    def format(self, *, result: RunResult, color: bool) -> str:
        parts: list[str] = [
            format_linting(linting, color=color) for linting in result.lintings
        ]
        if result.skipped:
            parts.append(format_skipped(result=result))
        parts.append(format_summary(result=result))
        return "\n".join(parts)


class JsonFormatter:
    def format(self, *, result: RunResult, color: bool) -> str:
        data: dict[str, object] = {
            "lintings": [
                {
                    "file": linting.name,
                    "state": linting.state.value,
                    "diagnostics": {
                        rule: [
                            {
                                "instance": d.instance,
                                "severity": d.severity.value,
                                "message": d.message,
                                "node": d.node,
                            }
                            for d in diagnostics
                        ]
                        for rule, diagnostics in linting.diagnostics.items()
                    },
                }
                for linting in result.lintings
            ],
            "skipped": [
                {"file": str(s.file), "reason": s.reason} for s in result.skipped
            ],
            "exit_code": int(result.exit_code),
        }
        return json.dumps(data, indent=2)


def get_formatter(*, output_format: OutputFormat) -> Formatter:
    if output_format == OutputFormat.JSON:
        return JsonFormatter()
    return TextFormatter()


class ConsoleDisplay:
    """
    Renders Lintings as they progress.

    In interactive mode each Linting is printed as soon as it is done and
    only the summary is printed at the end. In CI mode, or with JSON
    output, everything is printed once when the run is finished.
    """

    def __init__(
        self,
        *,
        ci: bool = False,
        output_format: OutputFormat = OutputFormat.TEXT,
        color: bool | None = None,
    ) -> None:
        self.ci: bool = ci
        self.output_format: OutputFormat = output_format
        # None lets click strip styles when stdout is not a terminal.
        self.color: bool | None = color

    @property
    def _styled(self) -> bool:
        return self.color is not False

    @property
    def _streaming(self) -> bool:
        return not self.ci and self.output_format == OutputFormat.TEXT

    def add_linting(self, linting: Linting) -> None:
        linting.subscribe(event=LintingEvent.STARTED, callback=self._on_started)
        linting.subscribe(event=LintingEvent.DONE, callback=self._on_done)

    def _on_started(self, linting: Linting) -> None:
        logger.debug("Linting %s", linting.name)

    def _on_done(self, linting: Linting) -> None:
        if self._streaming:
            click.echo(format_linting(linting, color=self._styled), color=self.color)

    def finish(self, *, result: RunResult) -> None:
        if self._streaming:
            if result.skipped:
                click.echo(format_skipped(result=result), color=self.color)
            click.echo(format_summary(result=result), color=self.color)
            return
        formatter: Formatter = get_formatter(output_format=self.output_format)
        click.echo(formatter.format(result=result, color=self._styled), color=self.color)
