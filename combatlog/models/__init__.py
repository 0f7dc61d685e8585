"""Domain models for the combat log normalizer.

Facts, the NormalizedLog bundle, damage metric toggles, configuration and the
batch processing records used by the orchestrator.
"""

from .config_models import IngestConfig, NarrativeDialect, StandardVocabulary
from .damage_metrics import DamageMetric, DamageMetrics
from .facts import (
    DamageEffectEntry,
    HealingEffectEntry,
    HealthEntry,
    ShieldEffectEntry,
    SkillCastEntry,
)
from .normalized_log import LogFormat, NormalizedLog, TimeRange

__all__ = [
    # Configuration models
    "IngestConfig",
    "NarrativeDialect",
    "StandardVocabulary",
    # Facts
    "HealthEntry",
    "SkillCastEntry",
    "DamageEffectEntry",
    "HealingEffectEntry",
    "ShieldEffectEntry",
    # Ingestion result
    "LogFormat",
    "NormalizedLog",
    "TimeRange",
    # Aggregation options
    "DamageMetric",
    "DamageMetrics",
]
