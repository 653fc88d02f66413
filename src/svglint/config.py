"""Configuration loading, default merging and rule normalization for SVGLint."""
from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from svglint.constants import PYPROJECT_FILE_NAME, RC_FILE_NAME
from svglint.rules.base import RuleDefinition, RuleInstance
from svglint.rules.registry import RuleRegistry, UnknownRuleError, default_registry
from svglint.types import ConfigError, NormalizedConfig, SVGLintConfig

logger: logging.Logger = logging.getLogger(__name__)


def default_config() -> dict[str, Any]:
    """Return a fresh copy of the default configuration values."""
    return {
        "rules": {},
        "ignore": [],
        "timeout": None,
    }


def merge_defaults(config: Mapping[str, Any] | None) -> dict[str, Any]:
    """Shallow-merge user config over the defaults. User keys always win."""
    merged: dict[str, Any] = default_config()
    if config is not None:
        merged.update(config)
    return merged


class ConfigLoader:
    """Loads and validates SVGLint configuration."""

    @staticmethod
    def find_config_file(start_path: Path | None = None) -> Path | None:
        """
        Find a configuration file by walking up from start_path.

        In each directory a ``.svglintrc.toml`` is preferred over a
        ``pyproject.toml``; the latter only counts if it has a
        ``[tool.svglint]`` table.

        Args:
            start_path: Directory to start searching from. Defaults to cwd.

        Returns:
            Path to the configuration file if found, None otherwise.
        """
        if start_path is None:
            start_path = Path.cwd()

        start_path = start_path.resolve()

        for directory in [start_path, *start_path.parents]:
            rc_path: Path = directory / RC_FILE_NAME
            if rc_path.is_file():
                return rc_path
            pyproject_path: Path = directory / PYPROJECT_FILE_NAME
            if pyproject_path.is_file() and _has_tool_table(pyproject_path):
                return pyproject_path

        return None

    @staticmethod
    def load(path: Path | None = None) -> SVGLintConfig:
        """
        Load configuration from a TOML file.

        Args:
            path: Explicit configuration file. If None, searches upward.

        Returns:
            Validated SVGLintConfig instance.

        Raises:
            ConfigError: If an explicit file is missing or any file is invalid.
        """
        if path is not None and not path.is_file():
            raise ConfigError("Configuration file not found", path=path)

        if path is None:
            path = ConfigLoader.find_config_file()

        if path is None:
            logger.debug("No configuration file found, using defaults")
            return SVGLintConfig()

        logger.debug("Loading configuration from %s", path)
        data: Any = _read_toml(path)
        if path.name == PYPROJECT_FILE_NAME:
            data = _tool_table(data)
            if not isinstance(data, Mapping):
                raise ConfigError("[tool.svglint] must be a table", path=path)

        return ConfigLoader.parse(data, config_path=path)

    @staticmethod
    def parse(
        data: Mapping[str, Any],
        *,
        config_path: Path | None = None,
    ) -> SVGLintConfig:
        """Merge defaults into a configuration mapping and validate it."""
        if not isinstance(data, Mapping):
            raise ConfigError(
                f"Configuration must be a table, got {type(data).__name__}",
                path=config_path,
            )
        errors: list[str] = []
        merged: dict[str, Any] = merge_defaults(data)

        rules: dict[str, Any] = {}
        raw_rules: Any = merged["rules"]
        if isinstance(raw_rules, Mapping):
            rules = dict(raw_rules)
        else:
            errors.append(f"rules must be a table, got {type(raw_rules).__name__}")

        ignore: tuple[str, ...] = ()
        raw_ignore: Any = merged["ignore"]
        if isinstance(raw_ignore, (list, tuple)) and all(
            isinstance(pattern, str) for pattern in raw_ignore
        ):
            ignore = tuple(raw_ignore)
        else:
            errors.append("ignore must be a list of strings")

        timeout: float | None = None
        raw_timeout: Any = merged["timeout"]
        if raw_timeout is not None:
            if (
                isinstance(raw_timeout, (int, float))
                and not isinstance(raw_timeout, bool)
                and raw_timeout > 0
            ):
                timeout = float(raw_timeout)
            else:
                errors.append("timeout must be a positive number")

        unknown_keys: list[str] = sorted(set(merged) - set(default_config()))
        if unknown_keys:
            errors.append(f"unknown configuration keys: {unknown_keys}")

        if errors:
            error_msg: str = "Configuration errors:\n" + "\n".join(
                f"  - {e}" for e in errors
            )
            raise ConfigError(error_msg, path=config_path)

        return SVGLintConfig(
            rules=MappingProxyType(rules),
            ignore=ignore,
            timeout=timeout,
            config_path=config_path,
        )


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML: {e}", path=path) from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {e}", path=path) from e


def _tool_table(data: dict[str, Any]) -> Any:
    tool: Any = data.get("tool", {})
    if not isinstance(tool, Mapping):
        return None
    return tool.get("svglint", {})


def _has_tool_table(path: Path) -> bool:
    tool: Any = _read_toml(path).get("tool", {})
    return isinstance(tool, Mapping) and "svglint" in tool


def normalize_rules(
    rules: Mapping[str, Any],
    *,
    registry: RuleRegistry | None = None,
) -> MappingProxyType[str, tuple[RuleInstance, ...]]:
    """
    Turn a rules mapping into rule instances, keyed by rule name.

    ``False`` disables a rule, a list creates one instance per element, and
    any other value creates a single instance. Unknown rule names are
    skipped with a warning. Declaration order is preserved.

    Raises:
        ConfigError: If a rule rejects its configuration value.
    """
    if registry is None:
        registry = default_registry()

    normalized: dict[str, tuple[RuleInstance, ...]] = {}
    for name, value in rules.items():
        if value is False:
            logger.debug("Rule '%s' is disabled", name)
            continue

        try:
            definition: RuleDefinition = registry.resolve(name)
        except UnknownRuleError:
            logger.warning("Unknown rule '%s'.", name)
            continue

        values: list[Any] = list(value) if isinstance(value, list) else [value]
        try:
            normalized[name] = tuple(definition.instantiate(v) for v in values)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration for rule '{name}': {e}") from e

    return MappingProxyType(normalized)


def normalize_config(
    config: SVGLintConfig | Mapping[str, Any] | None = None,
    *,
    registry: RuleRegistry | None = None,
) -> NormalizedConfig:
    """Validate a user config if needed, then normalize its rules."""
    if not isinstance(config, SVGLintConfig):
        config = ConfigLoader.parse(config or {})
    return NormalizedConfig(
        rules=normalize_rules(config.rules, registry=registry),
        ignore=config.ignore,
        timeout=config.timeout,
    )


def load_config(path: Path | None = None) -> SVGLintConfig:
    """
    Convenience function to load configuration.

    Args:
        path: Optional explicit path to a configuration file.

    Returns:
        Validated configuration.
    """
    return ConfigLoader.load(path)
