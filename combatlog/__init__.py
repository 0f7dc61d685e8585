"""Combat log normalizer.

Turns heterogeneous combat logs (a tabular CSV or the narrative event dialect)
into typed time-series facts and chart-ready series.

The library contract is ``ingest`` plus the series functions exported here; it
keeps no state and writes nothing. ``combatlog.cli`` and the JSON Lines error log
it writes under ``logs/`` are a developer harness around the library, not part
of that contract.

    >>> from combatlog import ingest, health_series
    >>> log = ingest([["time", "unit", "hp"], ["0", "A", "100"], ["10", "A", "80"]])
    >>> health_series(log.health, ["A"]).points
    ({'time': 0.0, 'A': 100}, {'time': 10.0, 'A': 80})
"""

from .errors import IngestError, NoDataError, SchemaError, SourceError
from .models import (
    DamageEffectEntry,
    DamageMetric,
    DamageMetrics,
    HealingEffectEntry,
    HealthEntry,
    LogFormat,
    NormalizedLog,
    ShieldEffectEntry,
    SkillCastEntry,
    TimeRange,
)
from .services.ingest import ingest
from .services.series import (
    ChartMode,
    CumulativeSeries,
    HealthSeries,
    HealthStats,
    available_labels,
    build_series,
    damage_series,
    default_units,
    healing_series,
    health_series,
    shield_series,
    skill_series,
    to_frame,
)

__version__ = "0.1.0"

__all__ = [
    "ingest",
    # errors
    "IngestError",
    "SchemaError",
    "NoDataError",
    "SourceError",
    # models
    "HealthEntry",
    "SkillCastEntry",
    "DamageEffectEntry",
    "HealingEffectEntry",
    "ShieldEffectEntry",
    "LogFormat",
    "NormalizedLog",
    "TimeRange",
    "DamageMetric",
    "DamageMetrics",
    # series
    "ChartMode",
    "HealthSeries",
    "HealthStats",
    "CumulativeSeries",
    "health_series",
    "skill_series",
    "damage_series",
    "healing_series",
    "shield_series",
    "build_series",
    "available_labels",
    "default_units",
    "to_frame",
]
