from __future__ import annotations

from collections.abc import Iterable, Sequence

from combatlog.models.config_models import StandardVocabulary
from combatlog.models.normalized_log import LogFormat

"""Format detection from the first row.

Standard-Header mode needs a time-like, a unit-like and a health-like cell in
the first row. Anything else is treated as the narrative dialect. A data row
that happens to contain such keywords is misdetected; there is no second look.
"""

__all__ = [
    "matches_any",
    "find_column",
    "detect_format",
]


def matches_any(cell: str, keywords: Iterable[str]) -> bool:
    """Case-insensitive substring match of ``cell`` against any keyword."""
    lowered = str(cell).lower()
    return any(k in lowered for k in keywords)


def find_column(header: Sequence[str], keywords: Iterable[str]) -> int:
    """Index of the first header cell matching ``keywords``; -1 if none."""
    keywords = tuple(keywords)
    for index, cell in enumerate(header):
        if matches_any(cell, keywords):
            return index
    return -1


def detect_format(header: Sequence[str], vocabulary: StandardVocabulary) -> LogFormat:
    has_time = any(matches_any(c, vocabulary.detect_time) for c in header)
    has_unit = any(matches_any(c, vocabulary.detect_unit) for c in header)
    has_health = any(matches_any(c, vocabulary.detect_health) for c in header)
    if has_time and has_unit and has_health:
        return LogFormat.STANDARD
    return LogFormat.NARRATIVE
