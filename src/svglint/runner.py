"""Lint entry points and the multi-file run coordinator for SVGLint."""
from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from svglint.config import normalize_config
from svglint.constants import ExitCode, LintingEvent, LintState
from svglint.linting import Linting
from svglint.parser import Document, ParseError, parse_file, parse_source
from svglint.rules.registry import RuleRegistry
from svglint.types import NormalizedConfig, SVGLintConfig

logger: logging.Logger = logging.getLogger(__name__)

UserConfig = SVGLintConfig | NormalizedConfig | Mapping[str, Any] | None


def _normalized(config: UserConfig, registry: RuleRegistry | None) -> NormalizedConfig:
    if isinstance(config, NormalizedConfig):
        return config
    return normalize_config(config, registry=registry)


def lint_document(
    document: Document,
    config: UserConfig = None,
    *,
    registry: RuleRegistry | None = None,
) -> Linting:
    """Start linting a parsed document. Returns before the Linting is done."""
    normalized: NormalizedConfig = _normalized(config, registry)
    linting: Linting = Linting(
        file=document.file,
        document=document,
        rules=normalized.rules,
        timeout=normalized.timeout,
    )
    return linting.start()


def lint_source(
    source: str,
    config: UserConfig = None,
    *,
    registry: RuleRegistry | None = None,
) -> Linting:
    """
    Lint a single SVG string.

    Must be called from a running event loop. The returned Linting is still
    running; await ``Linting.wait()`` or subscribe to its DONE event.

    Raises:
        ParseError: If the source is not well-formed.
        ConfigError: If the config is invalid.
    """
    return lint_document(parse_source(source), config, registry=registry)


async def lint_file(
    file: Path,
    config: UserConfig = None,
    *,
    registry: RuleRegistry | None = None,
) -> Linting:
    """
    Lint a single file.

    Resolves once the file is parsed and the Linting has started, not when
    the Linting is done.

    Raises:
        ParseError: If the file cannot be read or is not well-formed.
        ConfigError: If the config is invalid.
    """
    document: Document = await parse_file(file)
    return lint_document(document, config, registry=registry)


@dataclass(frozen=True, slots=True)
class SkippedSource:
    """A source that could not be parsed and was not linted."""

    file: Path
    reason: str


@dataclass(frozen=True, slots=True)
class RunResult:
    lintings: tuple[Linting, ...]
    skipped: tuple[SkippedSource, ...]
    error_count: int
    exit_code: ExitCode

    @property
    def files_checked(self) -> int:
        return len(self.lintings)


@dataclass(slots=True)
class _Tally:
    """Outcome counter shared by all Lintings of one run."""

    remaining: int = 0
    errors: int = 0

    def on_done(self, linting: Linting) -> None:
        self.remaining -= 1
        if linting.state is LintState.ERROR:
            self.errors += 1
        logger.debug("Linting done, %d to go", self.remaining)


async def run_lintings(
    *,
    files: Sequence[Path],
    config: NormalizedConfig,
    on_linting: Callable[[Linting], None] | None = None,
) -> RunResult:
    """
    Lint every file with one rule set and wait until all Lintings are done.

    Files that fail to parse are skipped and reported separately; they do
    not make the run fail.

    Args:
        files: Files to lint.
        config: Normalized configuration shared by all Lintings.
        on_linting: Called with each Linting right after it starts.
    """
    start: float = time.perf_counter()
    tally: _Tally = _Tally()
    skipped: list[SkippedSource] = []

    async def _start(file: Path) -> Linting | None:
        try:
            linting: Linting = await lint_file(file, config)
        except ParseError as e:
            logger.error("Failed to lint file %s: %s", file, e)
            skipped.append(SkippedSource(file=file, reason=str(e)))
            return None
        tally.remaining += 1
        linting.subscribe(event=LintingEvent.DONE, callback=tally.on_done)
        if on_linting is not None:
            on_linting(linting)
        return linting

    started: list[Linting | None] = await asyncio.gather(*(_start(f) for f in files))
    lintings: tuple[Linting, ...] = tuple(
        linting for linting in started if linting is not None
    )

    await asyncio.gather(*(linting.wait() for linting in lintings))

    logger.info("Completed in %.2fs", time.perf_counter() - start)
    return RunResult(
        lintings=lintings,
        skipped=tuple(sorted(skipped, key=lambda s: str(s.file))),
        error_count=tally.errors,
        exit_code=ExitCode.VIOLATIONS if tally.errors else ExitCode.SUCCESS,
    )
