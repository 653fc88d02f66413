"""Command-line interface for SVGLint using Click."""
from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Final

import click

from svglint.config import load_config, normalize_config
from svglint.constants import ExitCode, OutputFormat, __version__
from svglint.display import ConsoleDisplay
from svglint.runner import RunResult, run_lintings
from svglint.scanner import scan_files
from svglint.types import ConfigError, NormalizedConfig, SVGLintConfig

logger: logging.Logger = logging.getLogger("svglint")


class ConfigType(click.ParamType):
    """Custom Click parameter type for config path."""

    name: str = "path"

    def convert(
        self,
        value: str | Path | None,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> Path | None:
        if value is None:
            return None
        return Path(value)


CONFIG_TYPE: Final[ConfigType] = ConfigType()


def _load(*, config_path: Path | None, timeout: float | None) -> NormalizedConfig:
    cfg: SVGLintConfig = load_config(path=config_path)
    if timeout is not None:
        cfg = replace(cfg, timeout=timeout)
    return normalize_config(cfg)


@click.command()
@click.version_option(version=__version__, prog_name="svglint")
@click.argument("files", nargs=-1)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=CONFIG_TYPE,
    default=None,
    help="Config file (default: search upward for .svglintrc.toml or pyproject.toml)",
)
@click.option("--debug", "-d", is_flag=True, help="Show debug logs")
@click.option("--verbose", is_flag=True, help="Show progress and timing")
@click.option("--ci", "-C", is_flag=True, help="Only output once, when linting is finished")
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.TEXT.value,
    help="Output format",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Stop a rule after this many seconds without a report (overrides config)",
)
@click.option("--color/--no-color", default=None, help="Force or disable colored output")
@click.pass_context
def cli(
    ctx: click.Context,
    files: tuple[str, ...],
    *,
    config_path: Path | None,
    debug: bool,
    verbose: bool,
    ci: bool,
    output_format: str,
    timeout: float | None,
    color: bool | None,
) -> None:
    """SVGLint - lint SVG files against a set of configurable rules.

    FILES may be paths, directories or glob patterns.
    """
    level: int = (
        logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    )
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config: NormalizedConfig = _load(config_path=config_path, timeout=timeout)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        if e.path:
            click.echo(f"  in: {e.path}", err=True)
        ctx.exit(ExitCode.CONFIGURATION)
    except Exception:
        logger.exception("Unexpected error while loading configuration")
        ctx.exit(ExitCode.UNEXPECTED)

    display: ConsoleDisplay = ConsoleDisplay(
        ci=ci,
        output_format=OutputFormat(output_format),
        color=color,
    )
    paths: list[Path] = []
    result: RunResult | None = None
    exit_code: ExitCode = ExitCode.SUCCESS
    try:
        paths = scan_files(inputs=files, ignore=config.ignore)
        if paths:
            result = asyncio.run(
                run_lintings(files=paths, config=config, on_linting=display.add_linting),
            )
            exit_code = result.exit_code
    except KeyboardInterrupt:
        exit_code = ExitCode.INTERRUPTED
    except Exception:
        logger.exception("Unexpected error while linting")
        exit_code = ExitCode.UNEXPECTED

    if not paths and exit_code == ExitCode.SUCCESS:
        click.echo("No files to lint.")
    if result is not None:
        display.finish(result=result)
    ctx.exit(exit_code)


def main() -> None:
    """Main entry point for svglint CLI."""
    cli()


if __name__ == "__main__":
    main()
