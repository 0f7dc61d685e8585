from __future__ import annotations

"""Typed ingestion errors.

Every failure of the ingestion pipeline is one of these classes. Per-row parse
failures are not errors: noisy rows are skipped silently by the extractors.
"""

__all__ = [
    "IngestError",
    "SchemaError",
    "NoDataError",
    "SourceError",
]


class IngestError(Exception):
    """Base class for errors that reject a whole log file."""

    error_type = "INGEST_ERROR"


class SchemaError(IngestError):
    """Raised when a Standard-Header log lacks a required column."""

    error_type = "SCHEMA_ERROR"

    def __init__(self, missing: str) -> None:
        self.missing = missing
        super().__init__(f"cannot resolve standard column: {missing} (expected Time, Unit, HP headers)")


class NoDataError(IngestError):
    """Raised when neither dialect produced a single fact."""

    error_type = "NO_DATA"

    def __init__(self, row_count: int) -> None:
        self.row_count = row_count
        super().__init__(
            f"parsed {row_count} rows but found no combat data; "
            "if the log contains Chinese text, retry with a different encoding (e.g. GBK or UTF-8)"
        )


class SourceError(IngestError):
    """Raised when the row source cannot read or decode a file."""

    error_type = "SOURCE_ERROR"
