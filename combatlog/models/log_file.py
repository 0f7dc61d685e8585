from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

from .normalized_log import NormalizedLog

"""LogFile domain model and FileStatus enum.

A LogFile is the processing context of one combat log handed to the
orchestrator: where it came from, how it was decoded and how it ended.
"""


class FileStatus(Enum):
    """Processing lifecycle of a LogFile.

    State transitions: pending → processing → (success | failed)
    """
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class LogFile:
    """Processing context for a single combat log file.

    ``log`` is set only on success; ``error`` / ``error_type`` only on failure.
    """
    path: Path
    name: str
    encoding: str
    start_time: datetime | None = None  # UTC
    end_time: datetime | None = None    # UTC
    status: FileStatus = FileStatus.PENDING
    row_count: int = 0
    log: NormalizedLog | None = None
    error: str | None = None
    error_type: str | None = None

    @property
    def elapsed_seconds(self) -> float:
        if self.start_time is None or self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds()
