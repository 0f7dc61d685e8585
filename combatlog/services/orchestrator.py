from __future__ import annotations

import codecs
import logging
from collections.abc import Iterable
from dataclasses import replace
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import default_config
from ..errors import IngestError
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.config_models import IngestConfig
from ..models.log_file import FileStatus, LogFile
from ..models.processing_result import ProcessingResult
from ..source.reader import SPREADSHEET_SUFFIXES, TEXT_SUFFIXES, read_rows
from .ingest import ingest
from .progress import ProgressTracker

"""Batch orchestration over combat log files.

Each file is read and ingested on its own: a failure in one file is recorded
(LogFile status, JSON Lines error record) and the batch continues. Nothing is
merged across files.
"""

__all__ = [
    "ProcessingError",
    "resolve_encoding",
    "scan_log_files",
    "collect_log_files",
    "process_file",
    "process_files",
]

logger = logging.getLogger(__name__)

LOG_SUFFIXES = TEXT_SUFFIXES | SPREADSHEET_SUFFIXES


class ProcessingError(Exception):
    """Fatal error that prevents a batch from starting."""
    pass


def resolve_encoding(encoding: str | None, config: IngestConfig) -> str:
    """Return the encoding to use; it must be one of the configured encodings."""
    chosen = encoding or config.default_encoding
    try:
        wanted = codecs.lookup(chosen).name
    except LookupError as e:
        raise ProcessingError(f"unknown encoding: {chosen}") from e
    supported = {codecs.lookup(e).name for e in config.encodings}
    if wanted not in supported:
        raise ProcessingError(
            f"unsupported encoding: {chosen} (choose one of {', '.join(config.encodings)})"
        )
    return chosen


def scan_log_files(directory: Path) -> list[Path]:
    """Log files directly inside ``directory`` (non-recursive), sorted by name."""
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in LOG_SUFFIXES)
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def collect_log_files(paths: Iterable[Path]) -> list[Path]:
    """Expand directories; plain files are kept as given (missing ones fail later, per file)."""
    files: list[Path] = []
    for p in paths:
        if p.is_dir():
            files.extend(scan_log_files(p))
        else:
            files.append(p)
    return files


def process_file(path: Path, encoding: str, config: IngestConfig) -> LogFile:
    """Read and ingest one file; errors are captured on the returned LogFile."""
    log_file = LogFile(
        path=path,
        name=path.name,
        encoding=encoding,
        start_time=datetime.now(UTC),
        status=FileStatus.PROCESSING,
    )
    row_count = 0
    try:
        rows = read_rows(path, encoding)
        row_count = len(rows)
        normalized = ingest(rows, config)
    except IngestError as e:
        logger.warning(f"{path.name}: {e}")
        return replace(
            log_file,
            end_time=datetime.now(UTC),
            status=FileStatus.FAILED,
            row_count=row_count,
            error=str(e),
            error_type=e.error_type,
        )

    counts = " ".join(f"{k}={v}" for k, v in normalized.counts().items())
    logger.info(
        f"{path.name}: format={normalized.log_format.value} rows={row_count} {counts} "
        f"actors={len(normalized.actors)}"
    )
    return replace(
        log_file,
        end_time=datetime.now(UTC),
        status=FileStatus.SUCCESS,
        row_count=row_count,
        log=normalized,
    )


def process_files(
    paths: Iterable[Path],
    *,
    encoding: str | None = None,
    config: IngestConfig | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ProcessingResult:
    """Ingest every file and aggregate the outcome.

    Raises:
        ProcessingError: unsupported encoding or unreadable directory
    """
    start_time = datetime.now(UTC)
    config = config or default_config()
    encoding = resolve_encoding(encoding, config)
    error_log = error_log if error_log is not None else ErrorLogBuffer()

    files = collect_log_files(paths)
    results: list[LogFile] = []
    with ProgressTracker(len(files)) as progress:
        for path in files:
            progress.start_file(path)
            log_file = process_file(path, encoding, config)
            if log_file.status is FileStatus.FAILED:
                error_log.append(
                    ErrorRecord.create(
                        file=log_file.name,
                        encoding=encoding,
                        row=-1,
                        error_type=log_file.error_type or "INGEST_ERROR",
                        message=log_file.error or "",
                    )
                )
            results.append(log_file)
            progress.finish_file(success=log_file.status is FileStatus.SUCCESS)

    written = error_log.flush()
    if written is not None:
        logger.info(f"error log written: {written}")

    return ProcessingResult.from_files(results, start_time, datetime.now(UTC))
