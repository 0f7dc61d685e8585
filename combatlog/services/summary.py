from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering.

Format::

    SUMMARY files={n}/{n} success={s} failed={f} rows={r} health={h} skills={k}
    damage={d} healing={hl} shields={sh} elapsed_sec={e}
"""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # Format very small numbers to avoid scientific notation
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line for a finished run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_files=1, failed_files=0, total_rows=20,
        ...     fact_counts={"health": 9, "skills": 3, "damage": 4, "healing": 2, "shields": 0},
        ...     start_time=t, end_time=t, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY files=1/1 success=1 failed=0 rows=20 health=9 skills=3 damage=4 healing=2 shields=0 elapsed_sec=2'
    """
    total = result.total_files
    counts = result.fact_counts
    return (
        f"SUMMARY files={total}/{total} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"rows={result.total_rows} "
        f"health={counts.get('health', 0)} "
        f"skills={counts.get('skills', 0)} "
        f"damage={counts.get('damage', 0)} "
        f"healing={counts.get('healing', 0)} "
        f"shields={counts.get('shields', 0)} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
