from __future__ import annotations

from dataclasses import dataclass

"""Normalized fact records extracted from combat log rows.

Each fact is one typed observation keyed by the acting unit's display name.
Facts are created during a single ingestion pass and never mutated afterwards.
"""

__all__ = [
    "HealthEntry",
    "SkillCastEntry",
    "DamageEffectEntry",
    "HealingEffectEntry",
    "ShieldEffectEntry",
]


@dataclass(frozen=True)
class HealthEntry:
    """Unit's health was observed to be ``hp`` at ``time``."""
    time: float
    unit: str
    hp: int


@dataclass(frozen=True)
class SkillCastEntry:
    """A single, instantaneous skill cast."""
    time: float
    unit: str
    skill: str

    @property
    def label(self) -> str:
        return self.skill


@dataclass(frozen=True)
class DamageEffectEntry:
    """Damage dealt by ``unit`` through ``effect``.

    The three magnitudes are independent; callers choose which ones to add up
    (see ``DamageMetrics``). A magnitude that was not present in the row is 0.
    """
    time: float
    unit: str  # source unit
    effect: str
    raw_damage: int = 0
    hp_deduction: int = 0
    shield_deduction: int = 0

    @property
    def label(self) -> str:
        return self.effect


@dataclass(frozen=True)
class HealingEffectEntry:
    time: float
    unit: str
    effect: str
    healing: int

    @property
    def label(self) -> str:
        return self.effect


@dataclass(frozen=True)
class ShieldEffectEntry:
    time: float
    unit: str
    effect: str
    shield_value: int

    @property
    def label(self) -> str:
        return self.effect
