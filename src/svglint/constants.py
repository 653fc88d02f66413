"""Constants and enums for SVGLint."""
from __future__ import annotations

from enum import Enum, IntEnum
from typing import Final

__version__: Final[str] = "0.1.0"


class Severity(Enum):
    """Diagnostic severity levels."""

    ERROR = "error"
    WARN = "warn"
    INFO = "info"


class LintState(Enum):
    """Lifecycle states of a Linting. Everything but RUNNING is terminal."""

    RUNNING = "running"
    PASSING = "passing"
    WARNING = "warning"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self is not LintState.RUNNING


class LintingEvent(Enum):
    """Lifecycle events observers can subscribe to."""

    STARTED = "started"
    DONE = "done"


class ExitCode(IntEnum):
    """Process exit statuses."""

    SUCCESS = 0
    VIOLATIONS = 1
    UNEXPECTED = 2
    INTERRUPTED = 3
    CONFIGURATION = 4


class OutputFormat(Enum):
    """Output format options."""

    TEXT = "text"
    JSON = "json"


RC_FILE_NAME: Final[str] = ".svglintrc.toml"
PYPROJECT_FILE_NAME: Final[str] = "pyproject.toml"
