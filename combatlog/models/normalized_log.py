from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .facts import (
    DamageEffectEntry,
    HealingEffectEntry,
    HealthEntry,
    ShieldEffectEntry,
    SkillCastEntry,
)

"""NormalizedLog: the result of one ingestion run.

Bundles the five fact collections, the sorted actor names and the observed time
span. A NormalizedLog is rebuilt from scratch for every file; nothing is merged
across files.
"""

__all__ = [
    "LogFormat",
    "TimeRange",
    "NormalizedLog",
]


class LogFormat(Enum):
    """Dialect chosen by the format detector from the first row.

    - STANDARD: tabular CSV with named time / unit / hp columns
    - NARRATIVE: free-form event log with embedded key=value tokens
    """
    STANDARD = "standard"
    NARRATIVE = "narrative"


@dataclass(frozen=True)
class TimeRange:
    """Closed interval [start, end] covering every fact time.

    Both bounds are None when no fact was produced.
    """
    start: float | None = None
    end: float | None = None

    @classmethod
    def empty(cls) -> TimeRange:
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.start is None or self.end is None

    def widen(self, time: float) -> TimeRange:
        if self.is_empty:
            return TimeRange(time, time)
        return TimeRange(min(self.start, time), max(self.end, time))  # type: ignore[type-var]

    def __contains__(self, time: object) -> bool:
        if self.is_empty or not isinstance(time, (int, float)):
            return False
        return self.start <= time <= self.end  # type: ignore[operator]


@dataclass(frozen=True)
class NormalizedLog:
    """All facts extracted from one log file."""
    log_format: LogFormat
    health: tuple[HealthEntry, ...]
    skills: tuple[SkillCastEntry, ...]
    damage: tuple[DamageEffectEntry, ...]
    healing: tuple[HealingEffectEntry, ...]
    shields: tuple[ShieldEffectEntry, ...]
    actors: tuple[str, ...]  # sorted
    time_range: TimeRange
    row_count: int = 0  # rows consumed, header included

    @property
    def fact_count(self) -> int:
        return len(self.health) + len(self.skills) + len(self.damage) + len(self.healing) + len(self.shields)

    def counts(self) -> dict[str, int]:
        """Per-collection fact counts, in a stable key order."""
        return {
            "health": len(self.health),
            "skills": len(self.skills),
            "damage": len(self.damage),
            "healing": len(self.healing),
            "shields": len(self.shields),
        }
