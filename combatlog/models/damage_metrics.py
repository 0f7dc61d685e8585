from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from .facts import DamageEffectEntry

"""Damage sub-metric toggles for the damage chart.

A damage fact carries three magnitudes (raw damage, hp deduction, shield
deduction). The caller decides which of them are summed into the cumulative
damage series. At least one flag is enabled at all times.
"""

__all__ = [
    "DamageMetric",
    "DamageMetrics",
]


class DamageMetric(Enum):
    RAW = "raw"
    HP = "hp"
    SHIELD = "shield"


@dataclass(frozen=True)
class DamageMetrics:
    """Enabled damage components.

    ``select`` is exclusive (the default way a metric gets turned on), ``combine``
    adds a metric to the current set, ``clear`` removes one. Clearing the last
    enabled metric is a no-op.
    """
    raw: bool = True
    hp: bool = False
    shield: bool = False

    def __post_init__(self) -> None:
        if not (self.raw or self.hp or self.shield):
            raise ValueError("at least one damage metric must be enabled")

    @classmethod
    def of(cls, *metrics: DamageMetric | str) -> DamageMetrics:
        """Build from an explicit combination, e.g. ``DamageMetrics.of("raw", "shield")``."""
        chosen = {DamageMetric(m) for m in metrics}
        return cls(
            raw=DamageMetric.RAW in chosen,
            hp=DamageMetric.HP in chosen,
            shield=DamageMetric.SHIELD in chosen,
        )

    @property
    def enabled(self) -> tuple[DamageMetric, ...]:
        flags = ((DamageMetric.RAW, self.raw), (DamageMetric.HP, self.hp), (DamageMetric.SHIELD, self.shield))
        return tuple(m for m, on in flags if on)

    def is_enabled(self, metric: DamageMetric | str) -> bool:
        return getattr(self, DamageMetric(metric).value)

    def select(self, metric: DamageMetric | str) -> DamageMetrics:
        return DamageMetrics.of(metric)

    def combine(self, metric: DamageMetric | str) -> DamageMetrics:
        return replace(self, **{DamageMetric(metric).value: True})

    def clear(self, metric: DamageMetric | str) -> DamageMetrics:
        metric = DamageMetric(metric)
        if self.enabled == (metric,):
            return self
        return replace(self, **{metric.value: False})

    def amount(self, entry: DamageEffectEntry) -> int:
        """Sum of the enabled magnitudes of ``entry``."""
        total = 0
        if self.raw:
            total += entry.raw_damage
        if self.hp:
            total += entry.hp_deduction
        if self.shield:
            total += entry.shield_deduction
        return total
