from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from combatlog.models.config_models import RULE_NAMES, NarrativeDialect

"""Declarative labeled-number rules for the narrative dialect.

A rule is a named regex with one capture group. ``FieldRule.scan`` looks for the
first cell of a row matching it; ``first_match`` walks an ordered chain of rules
and stops at the first one that produced a value. Fallbacks such as the legacy
damage field or the generic health token are expressed as chains, not as nested
conditionals.
"""

__all__ = [
    "FieldMatch",
    "FieldRule",
    "RuleTable",
    "first_match",
    "build_rule_table",
    "RAW_DAMAGE_CHAIN",
    "HEALTH_CHANGE_CHAIN",
    "UNIT_CREATE_CHAIN",
]

# Ordered fallback chains (first success wins)
RAW_DAMAGE_CHAIN = ("raw_damage", "legacy_damage")
HEALTH_CHANGE_CHAIN = ("health_change", "health_generic")
UNIT_CREATE_CHAIN = ("health_generic",)


@dataclass(frozen=True)
class FieldMatch:
    """Tagged result of one rule: which rule matched, the value and where."""
    rule: str
    value: int
    cell_index: int
    text: str = ""  # captured digits as written (uid tokens keep leading zeros)


@dataclass(frozen=True)
class FieldRule:
    name: str
    pattern: re.Pattern[str]

    def scan(self, cells: Sequence[str]) -> FieldMatch | None:
        """Return the match of the first cell that carries a parseable number."""
        for index, cell in enumerate(cells):
            m = self.pattern.search(cell)
            if m is None:
                continue
            try:
                value = int(m.group(1))
            except (TypeError, ValueError):
                continue
            if value < 0:
                continue
            return FieldMatch(rule=self.name, value=value, cell_index=index, text=m.group(1))
        return None


def first_match(chain: Sequence[FieldRule], cells: Sequence[str]) -> FieldMatch | None:
    for rule in chain:
        found = rule.scan(cells)
        if found is not None:
            return found
    return None


@dataclass(frozen=True)
class RuleTable:
    """Compiled rules keyed by name."""
    rules: dict[str, FieldRule]

    def __getitem__(self, name: str) -> FieldRule:
        return self.rules[name]

    def chain(self, names: Sequence[str]) -> tuple[FieldRule, ...]:
        return tuple(self.rules[n] for n in names)


def build_rule_table(dialect: NarrativeDialect) -> RuleTable:
    rules = {
        name: FieldRule(name=name, pattern=re.compile(dialect.patterns[name], re.IGNORECASE))
        for name in RULE_NAMES
    }
    return RuleTable(rules=rules)
