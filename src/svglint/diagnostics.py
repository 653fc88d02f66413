"""Diagnostic data model for SVGLint."""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from types import MappingProxyType

from svglint.constants import LintState, Severity


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single message reported by a rule instance.

    ``instance`` is the position of the reporting instance among the
    instances configured for ``rule`` (0 unless the rule was given a list).
    """

    rule: str
    instance: int
    severity: Severity
    message: str
    node: str | None = None


def compute_state(diagnostics: Iterable[Diagnostic]) -> LintState:
    """Derive the terminal state from a set of diagnostics.

    Only severities are considered, so the result does not depend on the
    order the diagnostics were reported in.
    """
    severities: set[Severity] = {d.severity for d in diagnostics}
    if Severity.ERROR in severities:
        return LintState.ERROR
    if Severity.WARN in severities:
        return LintState.WARNING
    return LintState.PASSING


@dataclass(slots=True)
class DiagnosticCollection:
    """Diagnostics of one Linting, grouped by rule name."""

    _groups: dict[str, list[Diagnostic]] = field(default_factory=dict)
    _frozen: bool = False

    def declare(self, *, rule: str) -> None:
        """Reserve a group so groups keep the order rules were configured in."""
        self._groups.setdefault(rule, [])

    def add(self, *, diagnostic: Diagnostic) -> None:
        """Add a single diagnostic."""
        if self._frozen:
            raise RuntimeError("Cannot add diagnostics to a frozen collection")
        self._groups.setdefault(diagnostic.rule, []).append(diagnostic)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def by_rule(self) -> MappingProxyType[str, tuple[Diagnostic, ...]]:
        """Read-only view of the diagnostics grouped by rule name."""
        return MappingProxyType({
            rule: tuple(diagnostics) for rule, diagnostics in self._groups.items()
        })

    @property
    def state(self) -> LintState:
        return compute_state(self)

    @property
    def error_count(self) -> int:
        """Count of ERROR severity diagnostics."""
        return sum(1 for d in self if d.severity == Severity.ERROR)

    @property
    def warning_count(self) -> int:
        """Count of WARN severity diagnostics."""
        return sum(1 for d in self if d.severity == Severity.WARN)

    def __len__(self) -> int:
        return sum(len(diagnostics) for diagnostics in self._groups.values())

    def __iter__(self) -> Iterator[Diagnostic]:
        for diagnostics in self._groups.values():
            yield from diagnostics
