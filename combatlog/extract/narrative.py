from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from combatlog.models.config_models import NarrativeDialect
from combatlog.models.facts import (
    DamageEffectEntry,
    HealingEffectEntry,
    HealthEntry,
    ShieldEffectEntry,
    SkillCastEntry,
)
from combatlog.services.accumulator import FactAccumulator
from combatlog.services.identity import IdentityResolver

from .rules import (
    HEALTH_CHANGE_CHAIN,
    RAW_DAMAGE_CHAIN,
    UNIT_CREATE_CHAIN,
    RuleTable,
    build_rule_table,
    first_match,
)

"""Narrative-dialect extraction.

Row layout (fixed positions, the rest is free text with key=value tokens)::

    0: logic time   1: system time   2: event label   3: unit   4..: event specific

Example::

    650,>11:48:03,效果触发,牛魔王(Ally),伤害目标,风伯(Enemy),蛮牛冲撞_撞击,施加伤害=800

Event labels are matched by substring so decorated labels still classify.
Skill, effect and health handling are independent; one row may yield several facts.
"""

__all__ = [
    "parse_time",
    "NarrativeExtractor",
    "extract_narrative",
]

logger = logging.getLogger(__name__)

# parseFloat 相当: 先頭の数値部分だけを読む ("650ms" -> 650)
_LEADING_NUMBER = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")

SKILL_MIN_CELLS = 5
EFFECT_MIN_CELLS = 7
DAMAGE_MIN_CELLS = 8


def parse_time(cell: str, row_index: int) -> float:
    """Numeric prefix of ``cell``; the zero-based row index when there is none."""
    m = _LEADING_NUMBER.match(cell)
    if m is None:
        return float(row_index)
    return float(m.group(1))


def _candidate_name(cells: Sequence[str]) -> str:
    # "uid=2" や "属性={...}" のような構造化セルは名前として扱わない
    if len(cells) <= 3:
        return ""
    name = cells[3].strip()
    if "=" in name or "{" in name:
        return ""
    return name


class NarrativeExtractor:
    """Single-pass extractor; owns the identity table of one run."""

    def __init__(
        self,
        dialect: NarrativeDialect,
        accumulator: FactAccumulator,
        *,
        rules: RuleTable | None = None,
        resolver: IdentityResolver | None = None,
    ) -> None:
        self.dialect = dialect
        self.accumulator = accumulator
        self.rules = rules or build_rule_table(dialect)
        self.resolver = resolver or IdentityResolver()

    def process_row(self, row: Sequence[str], row_index: int) -> int:
        """Extract every fact of one row; return how many were emitted."""
        cells = ["" if c is None else str(c) for c in row]
        time = parse_time(cells[0] if cells else "", row_index)
        event = cells[2].strip() if len(cells) > 2 else ""

        emitted = 0
        if self.dialect.skill_cast in event:
            emitted += self._skill(cells, time)
        if self.dialect.effect_trigger in event:
            emitted += self._effect(cells, time)
        if self.dialect.health_change in event:
            emitted += self._health(cells, time, HEALTH_CHANGE_CHAIN)
        elif self.dialect.unit_create in event:
            emitted += self._health(cells, time, UNIT_CREATE_CHAIN)
        return emitted

    def _skill(self, cells: list[str], time: float) -> int:
        if len(cells) < SKILL_MIN_CELLS:
            return 0
        unit = cells[3].strip()
        skill = cells[4].strip()
        if not (unit and skill):
            return 0
        self.accumulator.add_skill(SkillCastEntry(time=time, unit=unit, skill=skill))
        return 1

    def _effect(self, cells: list[str], time: float) -> int:
        if len(cells) < EFFECT_MIN_CELLS:
            return 0
        unit = cells[3].strip()
        effect = cells[6].strip()
        if not (unit and effect):
            return 0

        emitted = 0
        if len(cells) >= DAMAGE_MIN_CELLS and cells[4].strip() == self.dialect.damage_target:
            raw = first_match(self.rules.chain(RAW_DAMAGE_CHAIN), cells)
            hp = self.rules["hp_deduction"].scan(cells)
            shield = self.rules["shield_deduction"].scan(cells)
            if raw or hp or shield:
                self.accumulator.add_damage(
                    DamageEffectEntry(
                        time=time,
                        unit=unit,
                        effect=effect,
                        raw_damage=raw.value if raw else 0,
                        hp_deduction=hp.value if hp else 0,
                        shield_deduction=shield.value if shield else 0,
                    )
                )
                emitted += 1

        healing = self.rules["healing"].scan(cells)
        if healing is not None:
            self.accumulator.add_healing(
                HealingEffectEntry(time=time, unit=unit, effect=effect, healing=healing.value)
            )
            emitted += 1

        shield_gain = self.rules["shield"].scan(cells)
        if shield_gain is not None:
            self.accumulator.add_shield(
                ShieldEffectEntry(time=time, unit=unit, effect=effect, shield_value=shield_gain.value)
            )
            emitted += 1
        return emitted

    def _health(self, cells: list[str], time: float, chain: Sequence[str]) -> int:
        found = first_match(self.rules.chain(chain), cells)
        identifier = self._identifier(cells)
        unit = self.resolver.resolve(
            _candidate_name(cells),
            identifier,
            cells,
            health_found=found is not None,
            known_actors=self.accumulator.known_actors,
        )
        if found is None or not unit:
            return 0
        self.accumulator.add_health(HealthEntry(time=time, unit=unit, hp=found.value))
        return 1

    def _identifier(self, cells: list[str]) -> str:
        m = self.rules["identifier"].scan(cells)
        return m.text if m is not None else ""


def extract_narrative(
    rows: Sequence[Sequence[str]],
    accumulator: FactAccumulator,
    dialect: NarrativeDialect,
) -> int:
    """Run the narrative extractor over ``rows``; return the count of rows without facts."""
    extractor = NarrativeExtractor(dialect, accumulator)
    skipped = 0
    for index, row in enumerate(rows):
        if not extractor.process_row(row, index):
            skipped += 1
    if skipped:
        logger.debug(f"narrative: {skipped} of {len(rows)} rows carried no facts")
    logger.debug(f"narrative: {len(extractor.resolver)} uid bindings")
    return skipped
