"""attr: require, forbid, or constrain attributes on selected elements."""
from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final

from svglint.parser import Document
from svglint.reporter import Reporter

SELECTOR_KEY: Final[str] = "rule::selector"
WHITELIST_KEY: Final[str] = "rule::whitelist"

# True: required, False: forbidden, str: exact value, frozenset: allowed values.
Constraint = bool | str | frozenset[str]


@dataclass(frozen=True, slots=True)
class _AttrInstance:
    selector: str
    constraints: tuple[tuple[str, Constraint], ...]
    whitelist: bool

    def __call__(self, reporter: Reporter, document: Document) -> None:
        allowed: frozenset[str] = frozenset(
            name for name, constraint in self.constraints if constraint is not False
        )
        for element in document.select(self.selector):
            for name, constraint in self.constraints:
                _check(reporter=reporter, element=element, name=name, constraint=constraint)
            if self.whitelist:
                for name in element.attrib:
                    if name not in allowed:
                        reporter.error(f"Attribute '{name}' is not allowed", element)


def _check(
    *,
    reporter: Reporter,
    element: ET.Element,
    name: str,
    constraint: Constraint,
) -> None:
    value: str | None = element.get(name)
    if constraint is False:
        if value is not None:
            reporter.error(f"Attribute '{name}' is not allowed", element)
        return
    if value is None:
        reporter.error(f"Expected attribute '{name}', not found", element)
        return
    if isinstance(constraint, str) and value != constraint:
        reporter.error(
            f"Expected attribute '{name}' to be '{constraint}', was '{value}'",
            element,
        )
    elif isinstance(constraint, frozenset) and value not in constraint:
        options: str = ", ".join(f"'{v}'" for v in sorted(constraint))
        reporter.error(
            f"Expected attribute '{name}' to be one of {options}, was '{value}'",
            element,
        )


def _parse_constraint(name: str, value: Any) -> Constraint:
    if isinstance(value, (bool, str)):
        return value
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return frozenset(value)
    raise ValueError(
        f"attr: constraint for '{name}' must be a boolean, a string or a list "
        f"of strings, got {value!r}"
    )


class AttrRule:
    """Check the attributes of the elements matching a selector."""

    @property
    def name(self) -> str:
        return "attr"

    def instantiate(self, config: Any) -> _AttrInstance:
        if not isinstance(config, Mapping):
            raise ValueError(
                f"attr: config must be a table of attributes, got {type(config).__name__}"
            )
        selector: Any = config.get(SELECTOR_KEY, "*")
        if not isinstance(selector, str):
            raise ValueError(f"attr: '{SELECTOR_KEY}' must be a string")
        whitelist: Any = config.get(WHITELIST_KEY, False)
        if not isinstance(whitelist, bool):
            raise ValueError(f"attr: '{WHITELIST_KEY}' must be a boolean")
        return _AttrInstance(
            selector=selector,
            constraints=tuple(
                (str(name), _parse_constraint(str(name), value))
                for name, value in config.items()
                if name not in (SELECTOR_KEY, WHITELIST_KEY)
            ),
            whitelist=whitelist,
        )
