"""Rule capability protocols for SVGLint."""
from __future__ import annotations

from collections.abc import Awaitable
from typing import Any, Protocol, runtime_checkable

from svglint.parser import Document
from svglint.reporter import Reporter


@runtime_checkable
class RuleInstance(Protocol):
    """
    One configured, runnable rule.

    The instance is finished once the call settles: it returns, it raises,
    or the awaitable it returned completes. Calling ``reporter.done()``
    earlier finishes it at that point instead.
    """

    def __call__(
        self,
        reporter: Reporter,
        document: Document,
    ) -> Awaitable[None] | None: ...


@runtime_checkable
class RuleDefinition(Protocol):
    """Structural interface for rules: a named factory of rule instances."""

    @property
    def name(self) -> str: ...

    def instantiate(self, config: Any) -> RuleInstance: ...
