"""elm: require, forbid or count the elements matching selectors."""
from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from svglint.parser import Document
from svglint.reporter import Reporter

# True: at least one, False: none, int: exactly n, (min, max): inclusive range.
Expectation = bool | int | tuple[int, int]


@dataclass(frozen=True, slots=True)
class _ElmInstance:
    expectations: tuple[tuple[str, Expectation], ...]

    def __call__(self, reporter: Reporter, document: Document) -> None:
        for selector, expected in self.expectations:
            _check(
                reporter=reporter,
                selector=selector,
                expected=expected,
                matches=document.select(selector),
            )


def _check(
    *,
    reporter: Reporter,
    selector: str,
    expected: Expectation,
    matches: list[ET.Element],
) -> None:
    count: int = len(matches)
    if expected is True:
        if count == 0:
            reporter.error(f"Expected element '{selector}', none found")
    elif expected is False:
        for element in matches:
            reporter.error(f"Element '{selector}' is not allowed", element)
    elif isinstance(expected, int):
        if count != expected:
            reporter.error(
                f"Found {count} elements for '{selector}', expected {expected}"
            )
    else:
        low, high = expected
        if not low <= count <= high:
            reporter.error(
                f"Found {count} elements for '{selector}', "
                f"expected between {low} and {high}"
            )


def _parse_expectation(selector: str, value: Any) -> Expectation:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"elm: count for '{selector}' must not be negative")
        return value
    if (
        isinstance(value, (list, tuple))
        and len(value) == 2
        and all(isinstance(v, int) and not isinstance(v, bool) for v in value)
    ):
        low, high = value
        if low > high:
            raise ValueError(f"elm: range for '{selector}' has min > max")
        return (low, high)
    raise ValueError(
        f"elm: expectation for '{selector}' must be a boolean, an integer "
        f"or a [min, max] pair, got {value!r}"
    )


class ElmRule:
    """Check element presence and counts by selector."""

    @property
    def name(self) -> str:
        return "elm"

    def instantiate(self, config: Any) -> _ElmInstance:
        if not isinstance(config, Mapping):
            raise ValueError(
                f"elm: config must be a table of selectors, got {type(config).__name__}"
            )
        return _ElmInstance(
            expectations=tuple(
                (str(selector), _parse_expectation(str(selector), value))
                for selector, value in config.items()
            ),
        )
