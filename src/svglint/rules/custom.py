"""custom: run a user-supplied function as a rule."""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from svglint.parser import Document
from svglint.reporter import Reporter

CustomCheck = Callable[[Reporter, Document], Awaitable[None] | None]


@dataclass(frozen=True, slots=True)
class _CustomInstance:
    check: CustomCheck

    def __call__(self, reporter: Reporter, document: Document) -> Awaitable[None] | None:
        return self.check(reporter, document)


class CustomRule:
    """Wrap a plain or async function taking ``(reporter, document)``."""

    @property
    def name(self) -> str:
        return "custom"

    def instantiate(self, config: Any) -> _CustomInstance:
        if not callable(config):
            raise ValueError(
                f"custom: config must be a callable, got {type(config).__name__}"
            )
        return _CustomInstance(check=config)
