"""Tests for the attr rule."""
from __future__ import annotations

import asyncio
from typing import Any

import pytest

from svglint.constants import LintState
from svglint.linting import Linting
from svglint.runner import lint_source
from svglint.rules.attr import AttrRule

from conftest import VALID_SVG


def _lint(config: Any, source: str = VALID_SVG) -> Linting:
    async def _go() -> Linting:
        linting = lint_source(source, {"rules": {"attr": config}})
        await linting.wait()
        return linting

    return asyncio.run(_go())


def _messages(linting: Linting) -> list[str]:
    return [d.message for d in linting.diagnostics["attr"]]


class TestAttrRule:
    def test_required_present(self) -> None:
        linting = _lint({"rule::selector": "svg", "xmlns": True, "viewBox": True})
        assert linting.state == LintState.PASSING

    def test_required_missing(self) -> None:
        linting = _lint({"rule::selector": "circle", "id": True})
        assert _messages(linting) == ["Expected attribute 'id', not found"]
        assert linting.diagnostics["attr"][0].node == "<circle>"

    def test_forbidden(self) -> None:
        linting = _lint({"rule::selector": "rect", "x": False})
        assert _messages(linting) == ["Attribute 'x' is not allowed"]

    def test_exact_value(self) -> None:
        assert _lint({"rule::selector": "svg", "width": "24"}).state == LintState.PASSING
        linting = _lint({"rule::selector": "svg", "width": "32"})
        assert _messages(linting) == ["Expected attribute 'width' to be '32', was '24'"]

    def test_allowed_values(self) -> None:
        linting = _lint({"rule::selector": "circle", "r": ["1", "3"]})
        assert _messages(linting) == [
            "Expected attribute 'r' to be one of '1', '3', was '2'"
        ]

    def test_whitelist(self) -> None:
        linting = _lint({
            "rule::selector": "rect",
            "rule::whitelist": True,
            "id": True,
            "width": True,
            "height": True,
        })
        assert sorted(_messages(linting)) == [
            "Attribute 'x' is not allowed",
            "Attribute 'y' is not allowed",
        ]

    def test_default_selector_is_every_element(self) -> None:
        linting = _lint({"onload": False}, "<svg><g onload='x()'/><rect/></svg>")
        assert linting.state == LintState.ERROR
        assert len(linting.diagnostics["attr"]) == 1


class TestAttrConfig:
    @pytest.mark.parametrize(
        "config",
        [
            ["width"],
            {"rule::selector": 1},
            {"rule::whitelist": "yes"},
            {"width": 24},
            {"width": ["24", 32]},
        ],
    )
    def test_invalid_config(self, config: Any) -> None:
        with pytest.raises(ValueError):
            AttrRule().instantiate(config)
