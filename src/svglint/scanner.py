"""Input discovery for SVGLint: glob expansion and ignore filtering."""
from __future__ import annotations

import glob
import logging
from fnmatch import fnmatch
from pathlib import Path

logger: logging.Logger = logging.getLogger(__name__)

_GLOB_CHARS: frozenset[str] = frozenset("*?[")


def _is_pattern(value: str) -> bool:
    return any(char in _GLOB_CHARS for char in value)


def _collect_svg_files(*, path: Path) -> list[Path]:
    """Recursively collect all .svg files under a directory, sorted."""
    return sorted(p for p in path.rglob("*.svg") if p.is_file())


def _expand(*, value: str, base: Path) -> list[Path]:
    if _is_pattern(value):
        pattern: str = value if Path(value).is_absolute() else str(base / value)
        matches: list[Path] = [Path(m) for m in sorted(glob.glob(pattern, recursive=True))]
        if not matches:
            logger.warning("No files match '%s'", value)
        return [m for m in matches if m.is_file()]
    path: Path = Path(value)
    if not path.is_absolute():
        path = base / path
    if path.is_dir():
        return _collect_svg_files(path=path)
    # Missing files are kept so they surface as unparsable sources.
    return [path]


def is_ignored(*, path: Path, patterns: tuple[str, ...], base: Path) -> bool:
    """Check if path matches any of the ignore globs."""
    try:
        rel_str: str = path.relative_to(base).as_posix()
    except ValueError:
        rel_str = path.as_posix()
    return any(
        fnmatch(rel_str, pattern) or fnmatch(path.as_posix(), pattern)
        for pattern in patterns
    )


def scan_files(
    *,
    inputs: tuple[str, ...],
    ignore: tuple[str, ...] = (),
    base: Path | None = None,
) -> list[Path]:
    """
    Expand file arguments into the list of files to lint.

    Args:
        inputs: File paths, directories or glob patterns.
        ignore: Glob patterns of files to skip.
        base: Directory relative inputs are resolved against. Defaults to cwd.

    Returns:
        Resolved files in input order, without duplicates.
    """
    if base is None:
        base = Path.cwd()
    base = base.resolve()

    files: list[Path] = []
    seen: set[Path] = set()
    for value in inputs:
        for path in _expand(value=value, base=base):
            resolved: Path = path.resolve()
            if resolved in seen:
                continue
            seen.add(resolved)
            if is_ignored(path=resolved, patterns=ignore, base=base):
                logger.debug("Excluded %s", resolved)
                continue
            files.append(resolved)

    logger.info("Found %d files", len(files))
    return files
