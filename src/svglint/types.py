"""Common types and dataclasses for SVGLint."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from svglint.rules.base import RuleInstance


@dataclass(frozen=True, slots=True)
class SVGLintConfig:
    """User-provided configuration, after defaults are merged in.

    ``rules`` maps a rule name to a config value, a list of config values
    (one rule instance per element) or ``False`` to disable the rule.
    """

    rules: MappingProxyType[str, Any] = field(
        default_factory=lambda: MappingProxyType({})
    )
    ignore: tuple[str, ...] = ()
    timeout: float | None = None
    config_path: Path | None = None


@dataclass(frozen=True, slots=True)
class NormalizedConfig:
    """Configuration with every enabled rule resolved and instantiated."""

    rules: MappingProxyType[str, tuple[RuleInstance, ...]]
    ignore: tuple[str, ...] = ()
    timeout: float | None = None

    @property
    def instance_count(self) -> int:
        return sum(len(instances) for instances in self.rules.values())


class ConfigError(Exception):
    """Error during configuration loading or validation."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        self.path: Path | None = path
        super().__init__(message)
