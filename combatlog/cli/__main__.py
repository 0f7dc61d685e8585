from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from combatlog.config.loader import ConfigError, load_config
from combatlog.errors import IngestError
from combatlog.extract.detect import detect_format
from combatlog.logging.init import log_summary, set_debug, setup_logging
from combatlog.models.config_models import IngestConfig
from combatlog.models.damage_metrics import DamageMetrics
from combatlog.models.log_file import FileStatus
from combatlog.models.processing_result import ProcessingResult
from combatlog.services.ingest import ingest
from combatlog.services.orchestrator import ProcessingError, collect_log_files, process_files, resolve_encoding
from combatlog.services.series import (
    ChartMode,
    HealthSeries,
    available_labels,
    build_series,
    default_units,
    to_frame,
)
from combatlog.services.summary import render_summary_line
from combatlog.source.reader import read_rows

"""Developer CLI.

Ingests one or more combat logs (files or directories), prints per-file
results and a SUMMARY line. ``--inspect-data`` shows what the detector sees;
``--chart`` prints a series table for a quick look at the aggregation.

Environment (``.env`` is read if present):
    COMBATLOG_CONFIG    dialect YAML replacing the packaged default
    COMBATLOG_ENCODING  default character encoding
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

INSPECT_ROWS = 3


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="combatlog", description="Combat log normalizer")
    p.add_argument("paths", nargs="*", type=Path, help="Log files or directories")
    p.add_argument("--encoding", help="Character encoding (e.g. gbk, utf-8, big5)")
    p.add_argument("--config", type=Path, help="Dialect config YAML")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print detected format, actors & first rows then exit")
    p.add_argument("--chart", choices=[m.value for m in ChartMode], help="Print a chart series per file")
    p.add_argument("--unit", action="append", default=[], help="Unit to chart (repeatable)")
    p.add_argument("--label", action="append", default=[], help="Skill/effect to chart (repeatable)")
    p.add_argument(
        "--damage-metric",
        action="append",
        default=[],
        choices=["raw", "hp", "shield"],
        help="Damage components to sum (repeatable, default raw)",
    )
    return p.parse_args(argv)


def _damage_metrics(names: list[str]) -> DamageMetrics:
    metrics = DamageMetrics()
    for i, name in enumerate(names):
        # 1つ目は排他選択、2つ目以降は組み合わせ
        metrics = metrics.select(name) if i == 0 else metrics.combine(name)
    return metrics


def _inspect_data(paths: list[Path], encoding: str, cfg: IngestConfig) -> int:
    files = collect_log_files(paths)
    if not files:
        print("inspect: no log files")
        return EXIT_SUCCESS_ALL
    for f in files:
        print(f"FILE: {f.name}")
        try:
            rows = read_rows(f, encoding)
        except IngestError as e:
            print(f"  read_error: {e}")
            continue
        if not rows:
            print("  empty")
            continue
        log_format = detect_format(rows[0], cfg.standard)
        print(f"  format={log_format.value} rows={len(rows)}")
        try:
            actors = list(ingest(rows, cfg).actors)
        except IngestError as e:
            print(f"  ingest_error: {e.error_type}")
        else:
            print(f"  actors={actors}")
        print("  sample_rows=", rows[:INSPECT_ROWS])
    return EXIT_SUCCESS_ALL


def _print_charts(result: ProcessingResult, args: argparse.Namespace) -> None:
    mode = ChartMode(args.chart)
    metrics = _damage_metrics(args.damage_metric)
    for log_file in result.files:
        if log_file.log is None:
            continue
        log = log_file.log
        units = args.unit or list(default_units(log))
        labels = args.label or list(available_labels(log, mode, units))
        series = build_series(log, mode, units, labels, metrics)
        print(f"CHART {log_file.name} mode={mode.value} keys={list(series.keys)}")
        if not series.points:
            print("  (no data for the selection)")
            continue
        print(to_frame(series).to_string())
        if isinstance(series, HealthSeries) and series.stats is not None:
            s = series.stats
            print(f"  min={s.minimum} max={s.maximum} first={s.first} last={s.last} change={s.change:+d}")


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # 空リスト [] はそのまま使う (pytest の引数を拾わない)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    load_dotenv(dotenv_path=Path(".env"), override=False)

    if args.debug:
        set_debug()
        logger.debug("debug mode enabled")

    config_path = args.config or (Path(os.environ["COMBATLOG_CONFIG"]) if os.getenv("COMBATLOG_CONFIG") else None)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if not args.paths:
        logger.error("no input files")
        return EXIT_FATAL

    try:
        encoding = resolve_encoding(args.encoding or os.getenv("COMBATLOG_ENCODING"), cfg)
        if args.inspect_data:
            return _inspect_data(args.paths, encoding, cfg)
        result = process_files(args.paths, encoding=encoding, config=cfg)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    for log_file in result.files:
        if log_file.status is FileStatus.FAILED:
            logger.error(f"{log_file.name}: {log_file.error_type} {log_file.error}")

    if args.chart:
        _print_charts(result, args)

    summary_line = render_summary_line(result)
    # log_summary が "SUMMARY " を付けるので除去
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
