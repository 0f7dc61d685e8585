from __future__ import annotations

import logging
from collections.abc import Sequence

from combatlog.config.loader import default_config
from combatlog.errors import NoDataError
from combatlog.extract.detect import detect_format
from combatlog.extract.narrative import extract_narrative
from combatlog.extract.standard import extract_standard
from combatlog.models.config_models import IngestConfig
from combatlog.models.normalized_log import LogFormat, NormalizedLog

from .accumulator import FactAccumulator

"""Ingestion entry point: decoded rows -> NormalizedLog.

One synchronous pass. Each call builds its own accumulator and identity table,
so repeated calls never share state.
"""

__all__ = [
    "ingest",
]

logger = logging.getLogger(__name__)


def ingest(rows: Sequence[Sequence[str]], config: IngestConfig | None = None) -> NormalizedLog:
    """Normalize ``rows`` into typed facts.

    Raises:
        SchemaError: Standard-Header log without a resolvable time/unit/hp column
        NoDataError: no fact could be extracted from any row
    """
    config = config or default_config()
    if not rows:
        raise NoDataError(0)

    log_format = detect_format([str(c) for c in rows[0]], config.standard)
    logger.debug(f"detected format={log_format.value} rows={len(rows)}")

    accumulator = FactAccumulator()
    if log_format is LogFormat.STANDARD:
        extract_standard(rows, accumulator, config.standard)
    else:
        extract_narrative(rows, accumulator, config.narrative)

    if accumulator.is_empty:
        raise NoDataError(len(rows))

    result = accumulator.build(log_format, row_count=len(rows))
    counts = " ".join(f"{k}={v}" for k, v in result.counts().items())
    logger.debug(f"ingested format={log_format.value} {counts} actors={len(result.actors)}")
    return result
