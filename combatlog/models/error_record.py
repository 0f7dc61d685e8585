from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the JSON Lines error log.

One record per rejected log file. ``row`` is -1 for file-level errors, which
is every error the pipeline raises today (row noise is skipped, not logged).
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: log file name
        encoding: character encoding the file was decoded with
        row: row number (1-based), -1 when the error concerns the whole file
        error_type: UPPER_SNAKE_CASE classification (SCHEMA_ERROR, NO_DATA, SOURCE_ERROR)
        message: human readable description
    """
    timestamp: str  # ISO8601 UTC
    file: str
    encoding: str
    row: int  # 不明な場合 -1
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, encoding: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            encoding=encoding,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        # 追加キー阻止: dataclass -> dict して json.dumps
        return json.dumps(asdict(self), ensure_ascii=False)
