from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the combat log normalizer.

These are the domain models produced by ``combatlog.config.loader.load_config``.
Keyword vocabularies are stored lower-cased; matching is case-insensitive
substring containment.
"""

__all__ = [
    "StandardVocabulary",
    "NarrativeDialect",
    "IngestConfig",
    "RULE_NAMES",
]

# Labeled-number rules every narrative dialect must define
RULE_NAMES = (
    "raw_damage",
    "hp_deduction",
    "shield_deduction",
    "legacy_damage",
    "healing",
    "shield",
    "health_change",
    "health_generic",
    "identifier",
)


@dataclass(frozen=True)
class StandardVocabulary:
    """Header keywords for Standard-Header logs.

    ``detect_*`` decide whether the first row is a header at all; ``column_*``
    locate the column index once Standard mode was chosen (a superset of the
    detection keywords).
    """
    detect_time: tuple[str, ...]
    detect_unit: tuple[str, ...]
    detect_health: tuple[str, ...]
    column_time: tuple[str, ...]
    column_unit: tuple[str, ...]
    column_health: tuple[str, ...]


@dataclass(frozen=True)
class NarrativeDialect:
    """Event markers and labeled-number patterns of the narrative log dialect.

    Each pattern has exactly one capture group holding the digits.
    """
    skill_cast: str  # 技能释放
    effect_trigger: str  # 效果触发
    health_change: str  # 血量变化
    unit_create: str  # 单位创建
    damage_target: str  # 伤害目标
    patterns: dict[str, str] = field(default_factory=dict)  # rule name -> regex source


@dataclass(frozen=True)
class IngestConfig:
    """Root configuration object for ingestion and the row source."""
    default_encoding: str
    encodings: tuple[str, ...]
    standard: StandardVocabulary
    narrative: NarrativeDialect
