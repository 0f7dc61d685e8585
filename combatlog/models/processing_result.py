from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .log_file import FileStatus, LogFile

"""Processing result models for a batch of combat log files.

Aggregates per-file outcomes into the numbers printed on the SUMMARY line.
"""


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics."""
    file_name: str
    status: str  # success/failed
    rows: int
    facts: int
    actors: int
    elapsed_seconds: float


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of one orchestrator run."""
    success_files: int
    failed_files: int
    total_rows: int  # rows read from successfully ingested files
    fact_counts: dict[str, int]  # health/skills/damage/healing/shields totals
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    files: tuple[LogFile, ...] = ()
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files

    @property
    def total_facts(self) -> int:
        return sum(self.fact_counts.values())

    @classmethod
    def from_files(cls, files: list[LogFile], start_time: datetime, end_time: datetime) -> ProcessingResult:
        counts = {"health": 0, "skills": 0, "damage": 0, "healing": 0, "shields": 0}
        stats: list[FileStat] = []
        total_rows = 0
        for f in files:
            facts = 0
            actors = 0
            if f.log is not None:
                for key, n in f.log.counts().items():
                    counts[key] += n
                facts = f.log.fact_count
                actors = len(f.log.actors)
                total_rows += f.row_count
            stats.append(
                FileStat(
                    file_name=f.name,
                    status=f.status.value,
                    rows=f.row_count,
                    facts=facts,
                    actors=actors,
                    elapsed_seconds=f.elapsed_seconds,
                )
            )
        return cls(
            success_files=sum(1 for f in files if f.status is FileStatus.SUCCESS),
            failed_files=sum(1 for f in files if f.status is FileStatus.FAILED),
            total_rows=total_rows,
            fact_counts=counts,
            start_time=start_time,
            end_time=end_time,
            elapsed_seconds=(end_time - start_time).total_seconds(),
            files=tuple(files),
            file_stats=stats,
        )
