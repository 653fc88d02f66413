"""Pytest fixtures for SVGLint tests."""
from __future__ import annotations

from pathlib import Path

import pytest

VALID_SVG: str = """\
<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24">
  <title>Icon</title>
  <g id="layer">
    <rect id="box" x="1" y="1" width="10" height="10"/>
    <circle cx="5" cy="5" r="2"/>
  </g>
</svg>
"""

BROKEN_SVG: str = "<svg><g></svg>"


@pytest.fixture
def valid_svg(tmp_path: Path) -> Path:
    path: Path = tmp_path / "valid.svg"
    path.write_text(VALID_SVG, encoding="utf-8")
    return path


@pytest.fixture
def broken_svg(tmp_path: Path) -> Path:
    path: Path = tmp_path / "broken.svg"
    path.write_text(BROKEN_SVG, encoding="utf-8")
    return path


@pytest.fixture
def rc_file(tmp_path: Path) -> Path:
    """Create a temporary .svglintrc.toml file."""
    config_path: Path = tmp_path / ".svglintrc.toml"
    config_path.write_text(
        """
ignore = ["**/ignored/*.svg"]
timeout = 2.5

[rules.elm]
title = true
script = false

[[rules.attr]]
"rule::selector" = "svg"
xmlns = true

[[rules.attr]]
"rule::selector" = "rect"
width = true
"""
    )
    return config_path


@pytest.fixture
def pyproject(tmp_path: Path) -> Path:
    """Create a pyproject.toml with a [tool.svglint] table."""
    config_path: Path = tmp_path / "pyproject.toml"
    config_path.write_text(
        """
[project]
name = "icons"

[tool.svglint.rules.elm]
title = true
"""
    )
    return config_path


@pytest.fixture
def invalid_toml(tmp_path: Path) -> Path:
    """Create an invalid TOML file."""
    config_path: Path = tmp_path / ".svglintrc.toml"
    config_path.write_text("invalid [ toml content")
    return config_path
