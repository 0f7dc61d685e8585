from __future__ import annotations

from combatlog.models.facts import (
    DamageEffectEntry,
    HealingEffectEntry,
    HealthEntry,
    ShieldEffectEntry,
    SkillCastEntry,
)
from combatlog.models.normalized_log import LogFormat, NormalizedLog, TimeRange

"""Fact accumulator for one ingestion run.

Purely additive: appends facts, records actor names and widens the time range.
The extractors decide what is a fact; nothing is rejected here.
"""

__all__ = [
    "FactAccumulator",
]


class FactAccumulator:
    """Collects the facts of a single pass over the rows."""

    def __init__(self) -> None:
        self.health: list[HealthEntry] = []
        self.skills: list[SkillCastEntry] = []
        self.damage: list[DamageEffectEntry] = []
        self.healing: list[HealingEffectEntry] = []
        self.shields: list[ShieldEffectEntry] = []
        # dict keeps discovery order (identity fallback depends on it)
        self._actors: dict[str, None] = {}
        self.time_range = TimeRange.empty()

    @property
    def known_actors(self) -> tuple[str, ...]:
        """Actor names in discovery order."""
        return tuple(self._actors)

    @property
    def is_empty(self) -> bool:
        return not (self.health or self.skills or self.damage or self.healing or self.shields)

    def _observe(self, unit: str, time: float) -> None:
        self._actors.setdefault(unit, None)
        self.time_range = self.time_range.widen(time)

    def add_health(self, entry: HealthEntry) -> None:
        self.health.append(entry)
        self._observe(entry.unit, entry.time)

    def add_skill(self, entry: SkillCastEntry) -> None:
        self.skills.append(entry)
        self._observe(entry.unit, entry.time)

    def add_damage(self, entry: DamageEffectEntry) -> None:
        self.damage.append(entry)
        self._observe(entry.unit, entry.time)

    def add_healing(self, entry: HealingEffectEntry) -> None:
        self.healing.append(entry)
        self._observe(entry.unit, entry.time)

    def add_shield(self, entry: ShieldEffectEntry) -> None:
        self.shields.append(entry)
        self._observe(entry.unit, entry.time)

    def build(self, log_format: LogFormat, row_count: int) -> NormalizedLog:
        return NormalizedLog(
            log_format=log_format,
            health=tuple(self.health),
            skills=tuple(self.skills),
            damage=tuple(self.damage),
            healing=tuple(self.healing),
            shields=tuple(self.shields),
            actors=tuple(sorted(self._actors)),
            time_range=self.time_range,
            row_count=row_count,
        )
