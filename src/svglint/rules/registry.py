"""Rule registry for SVGLint."""
from __future__ import annotations

from collections.abc import Iterable

from svglint.rules.attr import AttrRule
from svglint.rules.base import RuleDefinition
from svglint.rules.custom import CustomRule
from svglint.rules.elm import ElmRule


class UnknownRuleError(LookupError):
    """Raised when a configured rule name has no definition."""

    def __init__(self, name: str) -> None:
        self.name: str = name
        super().__init__(f"Unknown rule '{name}'")


class RuleRegistry:
    """Maps rule names to rule definitions."""

    def __init__(self, rules: Iterable[RuleDefinition] = ()) -> None:
        self._rules: dict[str, RuleDefinition] = {}
        for rule in rules:
            self.register(rule=rule)

    def register(self, *, rule: RuleDefinition) -> None:
        """Add a definition, replacing any existing one with the same name."""
        if not isinstance(rule, RuleDefinition):
            raise TypeError(
                f"{type(rule).__name__} does not provide 'name' and 'instantiate'"
            )
        self._rules[rule.name] = rule

    def resolve(self, name: str) -> RuleDefinition:
        try:
            return self._rules[name]
        except KeyError:
            raise UnknownRuleError(name) from None

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._rules))

    def __contains__(self, name: object) -> bool:
        return name in self._rules


def default_registry() -> RuleRegistry:
    """Return a registry holding the built-in rules."""
    return RuleRegistry(_builtin_rules())


def _builtin_rules() -> list[RuleDefinition]:
    rules: list[RuleDefinition] = [
        ElmRule(),
        AttrRule(),
        CustomRule(),
    ]
    return rules
