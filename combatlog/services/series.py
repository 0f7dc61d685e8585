from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

import pandas as pd

from combatlog.models.damage_metrics import DamageMetrics
from combatlog.models.facts import (
    DamageEffectEntry,
    HealingEffectEntry,
    HealthEntry,
    ShieldEffectEntry,
    SkillCastEntry,
)
from combatlog.models.normalized_log import NormalizedLog

"""Chart series aggregation.

Turns the facts of a NormalizedLog into sparse, time-ordered multi-series
points. Every function here is pure: counters are created per call, so the
same inputs always give the same output and results can be recomputed on every
selection change.

Point shape: ``{"time": t, <series key>: value, ...}``. A series key is absent
from a point when it has no value yet.
"""

__all__ = [
    "ChartMode",
    "HealthStats",
    "HealthSeries",
    "CumulativeSeries",
    "series_key",
    "health_series",
    "health_stats",
    "skill_series",
    "damage_series",
    "healing_series",
    "shield_series",
    "build_series",
    "available_labels",
    "default_units",
    "to_frame",
]

F = TypeVar("F", SkillCastEntry, DamageEffectEntry, HealingEffectEntry, ShieldEffectEntry)


class ChartMode(Enum):
    HEALTH = "health"
    SKILL = "skill"
    DAMAGE = "damage"
    HEALING = "healing"
    SHIELD = "shield"


@dataclass(frozen=True)
class HealthStats:
    """Summary of one unit's observed health, in chronological order."""
    minimum: int
    maximum: int
    first: int
    last: int
    change: int  # last - first


@dataclass(frozen=True)
class HealthSeries:
    points: tuple[dict[str, Any], ...]
    keys: tuple[str, ...]
    stats: HealthStats | None = None


@dataclass(frozen=True)
class CumulativeSeries:
    points: tuple[dict[str, Any], ...]
    keys: tuple[str, ...]


def series_key(unit: str, label: str) -> str:
    return f"{unit} - {label}"


def _group_by_time(facts: Iterable[Any]) -> dict[float, list[Any]]:
    grouped: dict[float, list[Any]] = defaultdict(list)
    for fact in facts:
        grouped[fact.time].append(fact)
    return grouped


def health_stats(entries: Sequence[HealthEntry], unit: str) -> HealthStats | None:
    # sorted() は安定ソート: 同時刻は到着順
    observed = sorted((e for e in entries if e.unit == unit), key=lambda e: e.time)
    if not observed:
        return None
    values = [e.hp for e in observed]
    first, last = values[0], values[-1]
    return HealthStats(minimum=min(values), maximum=max(values), first=first, last=last, change=last - first)


def health_series(entries: Sequence[HealthEntry], selected_units: Sequence[str]) -> HealthSeries:
    """Forward-filled health per selected unit.

    One point per distinct timestamp of the selected units' entries. A unit's
    value is its latest observation at or before that time; units not yet seen
    are left out of the point. Stats are computed only for a single selected unit.
    """
    selected = list(dict.fromkeys(selected_units))
    if not selected:
        return HealthSeries(points=(), keys=())
    chosen = set(selected)
    grouped = _group_by_time(e for e in entries if e.unit in chosen)

    current: dict[str, int] = {}
    points: list[dict[str, Any]] = []
    for time in sorted(grouped):
        for entry in grouped[time]:
            current[entry.unit] = entry.hp
        point: dict[str, Any] = {"time": time}
        for unit in selected:
            if unit in current:
                point[unit] = current[unit]
        if len(point) > 1:
            points.append(point)

    keys = tuple(u for u in selected if u in current)
    stats = health_stats(entries, selected[0]) if len(selected) == 1 else None
    return HealthSeries(points=tuple(points), keys=keys, stats=stats)


def _cumulative(
    facts: Sequence[F],
    selected_units: Iterable[str],
    selected_labels: Iterable[str],
    amount: Callable[[F], int],
) -> CumulativeSeries:
    units = set(selected_units)
    labels = set(selected_labels)
    relevant = [f for f in facts if f.unit in units and f.label in labels]
    if not relevant:
        return CumulativeSeries(points=(), keys=())

    keys = tuple(sorted({series_key(f.unit, f.label) for f in relevant}))
    counters = dict.fromkeys(keys, 0)
    grouped = _group_by_time(relevant)

    points: list[dict[str, Any]] = []
    for time in sorted(grouped):
        for fact in grouped[time]:
            counters[series_key(fact.unit, fact.label)] += amount(fact)
        point: dict[str, Any] = {"time": time}
        point.update((k, v) for k, v in counters.items() if v > 0)
        if len(point) > 1:
            points.append(point)
    return CumulativeSeries(points=tuple(points), keys=keys)


def skill_series(
    entries: Sequence[SkillCastEntry], selected_units: Iterable[str], selected_skills: Iterable[str]
) -> CumulativeSeries:
    """Cumulative cast count per (unit, skill)."""
    return _cumulative(entries, selected_units, selected_skills, lambda _: 1)


def damage_series(
    entries: Sequence[DamageEffectEntry],
    selected_units: Iterable[str],
    selected_effects: Iterable[str],
    metrics: DamageMetrics | None = None,
) -> CumulativeSeries:
    """Cumulative damage per (unit, effect), summing the enabled metrics."""
    metrics = metrics or DamageMetrics()
    return _cumulative(entries, selected_units, selected_effects, metrics.amount)


def healing_series(
    entries: Sequence[HealingEffectEntry], selected_units: Iterable[str], selected_effects: Iterable[str]
) -> CumulativeSeries:
    return _cumulative(entries, selected_units, selected_effects, lambda e: e.healing)


def shield_series(
    entries: Sequence[ShieldEffectEntry], selected_units: Iterable[str], selected_effects: Iterable[str]
) -> CumulativeSeries:
    return _cumulative(entries, selected_units, selected_effects, lambda e: e.shield_value)


def _facts_for(log: NormalizedLog, mode: ChartMode) -> Sequence[Any]:
    return {
        ChartMode.HEALTH: log.health,
        ChartMode.SKILL: log.skills,
        ChartMode.DAMAGE: log.damage,
        ChartMode.HEALING: log.healing,
        ChartMode.SHIELD: log.shields,
    }[mode]


def build_series(
    log: NormalizedLog,
    mode: ChartMode | str,
    selected_units: Sequence[str],
    selected_labels: Sequence[str] = (),
    metrics: DamageMetrics | None = None,
) -> HealthSeries | CumulativeSeries:
    """Dispatch to the aggregator of ``mode``; labels are ignored for health."""
    mode = ChartMode(mode)
    if mode is ChartMode.HEALTH:
        return health_series(log.health, selected_units)
    if mode is ChartMode.SKILL:
        return skill_series(log.skills, selected_units, selected_labels)
    if mode is ChartMode.DAMAGE:
        return damage_series(log.damage, selected_units, selected_labels, metrics)
    if mode is ChartMode.HEALING:
        return healing_series(log.healing, selected_units, selected_labels)
    return shield_series(log.shields, selected_units, selected_labels)


def available_labels(log: NormalizedLog, mode: ChartMode | str, selected_units: Iterable[str]) -> tuple[str, ...]:
    """Sorted skill or effect names the selected units produced in ``mode``."""
    mode = ChartMode(mode)
    if mode is ChartMode.HEALTH:
        return ()
    units = set(selected_units)
    return tuple(sorted({f.label for f in _facts_for(log, mode) if f.unit in units}))


def default_units(log: NormalizedLog, limit: int = 3) -> tuple[str, ...]:
    """Initial unit selection after a file load."""
    return log.actors[:limit]


def to_frame(series: HealthSeries | CumulativeSeries) -> pd.DataFrame:
    """Points as a DataFrame indexed by time; missing values are NaN."""
    frame = pd.DataFrame(list(series.points), columns=["time", *series.keys])
    return frame.set_index("time")
