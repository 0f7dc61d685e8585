from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd

from combatlog.errors import SchemaError
from combatlog.models.config_models import StandardVocabulary
from combatlog.models.facts import HealthEntry
from combatlog.services.accumulator import FactAccumulator

from .detect import find_column

"""Standard-Header extraction.

The first row is the header; time / unit / hp columns are located by keyword.
Every later row becomes a HealthEntry when time and hp are finite numbers and
the unit is not blank. Malformed rows are skipped, not reported.
"""

__all__ = [
    "ColumnIndex",
    "resolve_columns",
    "extract_standard",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnIndex:
    time: int
    unit: int
    health: int


def resolve_columns(header: Sequence[str], vocabulary: StandardVocabulary) -> ColumnIndex:
    """Locate the three required columns or raise SchemaError naming the first missing one."""
    header = [str(c) for c in header]
    time_idx = find_column(header, vocabulary.column_time)
    unit_idx = find_column(header, vocabulary.column_unit)
    hp_idx = find_column(header, vocabulary.column_health)
    for concept, idx in (("time", time_idx), ("unit", unit_idx), ("hp", hp_idx)):
        if idx == -1:
            raise SchemaError(concept)
    return ColumnIndex(time=time_idx, unit=unit_idx, health=hp_idx)


def _cell(row: Sequence[str], index: int) -> str:
    if index >= len(row) or row[index] is None:
        return ""
    return str(row[index]).strip()


def extract_standard(
    rows: Sequence[Sequence[str]],
    accumulator: FactAccumulator,
    vocabulary: StandardVocabulary,
) -> int:
    """Append HealthEntries for every valid data row; return the skipped row count."""
    columns = resolve_columns(rows[0], vocabulary)
    body = rows[1:]
    if not body:
        return 0

    frame = pd.DataFrame(
        {
            "time": [_cell(r, columns.time) for r in body],
            "unit": [_cell(r, columns.unit) for r in body],
            "hp": [_cell(r, columns.health) for r in body],
        }
    )
    # 数値化できないセルは NaN
    times = pd.to_numeric(frame["time"], errors="coerce").astype(float)
    hps = pd.to_numeric(frame["hp"], errors="coerce").astype(float)
    valid = np.isfinite(times) & np.isfinite(hps) & frame["unit"].ne("")

    for time, unit, hp in zip(times[valid], frame["unit"][valid], hps[valid]):
        accumulator.add_health(HealthEntry(time=float(time), unit=unit, hp=int(hp)))

    skipped = int((~valid).sum())
    if skipped:
        logger.debug(f"standard: skipped {skipped} malformed rows of {len(body)}")
    return skipped
