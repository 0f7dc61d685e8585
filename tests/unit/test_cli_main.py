from __future__ import annotations

from pathlib import Path

from combatlog.cli import main as cli_main


def test_cli_requires_input(temp_workdir: Path, capsys):
    code = cli_main([])
    assert code == 1
    assert "ERROR no input files" in capsys.readouterr().out


def test_cli_single_file_success(write_log, narrative_text, capsys):
    path = write_log("demo.csv", narrative_text, encoding="gbk")
    code = cli_main([str(path)])

    out = capsys.readouterr().out
    assert code == 0
    assert "INFO demo.csv: format=narrative rows=14 health=5 skills=3 damage=3 healing=1 shields=1 actors=3" in out
    assert "SUMMARY files=1/1 success=1 failed=0 rows=14 health=5 skills=3 damage=3 healing=1 shields=1" in out


def test_cli_encoding_option_and_env(write_log, narrative_text, monkeypatch, capsys):
    path = write_log("demo.csv", narrative_text, encoding="utf-8")
    assert cli_main(["--encoding", "utf-8", str(path)]) == 0

    monkeypatch.setenv("COMBATLOG_ENCODING", "utf-8")
    assert cli_main([str(path)]) == 0
    assert "failed=0" in capsys.readouterr().out


def test_cli_env_file_is_read(write_log, narrative_text, temp_workdir: Path, monkeypatch, capsys):
    # load_dotenv が設定した値をテスト後に消す
    monkeypatch.setenv("COMBATLOG_ENCODING", "")
    monkeypatch.delenv("COMBATLOG_ENCODING")
    path = write_log("demo.csv", narrative_text, encoding="utf-8")
    (temp_workdir / ".env").write_text("COMBATLOG_ENCODING=utf-8\n", encoding="utf-8")

    assert cli_main([str(path)]) == 0
    assert "success=1" in capsys.readouterr().out


def test_cli_unsupported_encoding_is_fatal(write_log, standard_text, capsys):
    path = write_log("s.csv", standard_text)
    code = cli_main(["--encoding", "latin-1", str(path)])
    assert code == 1
    assert "ERROR processing: unsupported encoding: latin-1" in capsys.readouterr().out


def test_cli_bad_config_is_fatal(write_log, standard_text, temp_workdir: Path, capsys):
    cfg = temp_workdir / "dialect.yml"
    cfg.write_text("default_encoding: gbk\n", encoding="utf-8")
    path = write_log("s.csv", standard_text)

    code = cli_main(["--config", str(cfg), str(path)])
    assert code == 1
    assert "ERROR config:" in capsys.readouterr().out


def test_cli_config_from_env(write_log, standard_text, temp_workdir: Path, monkeypatch, capsys):
    monkeypatch.setenv("COMBATLOG_CONFIG", str(temp_workdir / "missing.yml"))
    path = write_log("s.csv", standard_text)
    assert cli_main([str(path)]) == 1
    assert "config file not found" in capsys.readouterr().out


def test_cli_debug_mode(write_log, standard_text, capsys):
    path = write_log("s.csv", standard_text)
    code = cli_main(["--debug", str(path)])

    out = capsys.readouterr().out
    assert code == 0
    assert "DEBUG debug mode enabled" in out
    assert "DEBUG detected format=standard rows=5" in out
    assert "DEBUG standard: skipped 1 malformed rows of 4" in out


def test_cli_health_chart_with_stats(write_log, narrative_text, capsys):
    path = write_log("demo.csv", narrative_text, encoding="gbk")
    code = cli_main(["--chart", "health", "--unit", "风伯(Enemy)", str(path)])

    out = capsys.readouterr().out
    assert code == 0
    assert "CHART demo.csv mode=health keys=['风伯(Enemy)']" in out
    assert "min=61634 max=63725 first=63725 last=61634 change=-2091" in out


def test_cli_damage_chart_metric_combination(write_log, narrative_text, capsys):
    path = write_log("demo.csv", narrative_text, encoding="gbk")
    code = cli_main(
        [
            "--chart", "damage",
            "--unit", "牛魔王(Ally)",
            "--damage-metric", "hp",
            "--damage-metric", "shield",
            str(path),
        ]
    )

    out = capsys.readouterr().out
    assert code == 0
    assert "CHART demo.csv mode=damage keys=['牛魔王(Ally) - 蛮牛冲撞_撞击']" in out
    assert "800" in out  # 700 + 100


def test_cli_chart_without_matching_facts(write_log, standard_text, capsys):
    path = write_log("s.csv", standard_text)
    assert cli_main(["--chart", "skill", str(path)]) == 0
    assert "(no data for the selection)" in capsys.readouterr().out
