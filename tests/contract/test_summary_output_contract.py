from __future__ import annotations

import re

from combatlog.cli import main as cli_main

"""SUMMARY line format contract."""

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+files=([0-9]+)/(\1)\s+success=([0-9]+)\s+failed=([0-9]+)\s+"
    r"rows=([0-9]+)\s+health=([0-9]+)\s+skills=([0-9]+)\s+damage=([0-9]+)\s+"
    r"healing=([0-9]+)\s+shields=([0-9]+)\s+elapsed_sec=([0-9]+\.?[0-9]*)$"
)


def test_summary_pattern_example_line():
    line = (
        "SUMMARY files=2/2 success=2 failed=0 rows=19 health=8 skills=3 "
        "damage=3 healing=1 shields=1 elapsed_sec=0.084"
    )
    assert SUMMARY_PATTERN.match(line)


def test_summary_pattern_rejects_mismatched_totals():
    line = (
        "SUMMARY files=2/3 success=2 failed=0 rows=19 health=8 skills=3 "
        "damage=3 healing=1 shields=1 elapsed_sec=1"
    )
    assert SUMMARY_PATTERN.match(line) is None


def test_cli_summary_line_matches_contract(write_log, narrative_text, standard_text, temp_workdir, capsys):
    write_log("demo.csv", narrative_text, encoding="gbk")
    write_log("standard.csv", standard_text, encoding="gbk")

    cli_main([str(temp_workdir / "data")])

    lines = [ln for ln in capsys.readouterr().out.splitlines() if ln.startswith("SUMMARY")]
    assert len(lines) == 1
    m = SUMMARY_PATTERN.match(lines[0])
    assert m, lines[0]
    assert m.group(1) == "2"
    assert m.group(5) == "19"
    assert m.group(6) == "8"
