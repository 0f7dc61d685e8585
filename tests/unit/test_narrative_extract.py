from __future__ import annotations

import pytest

from combatlog.extract.narrative import NarrativeExtractor, extract_narrative, parse_time
from combatlog.models.facts import (
    DamageEffectEntry,
    HealingEffectEntry,
    HealthEntry,
    ShieldEffectEntry,
    SkillCastEntry,
)
from combatlog.services.accumulator import FactAccumulator


def _extract(rows, config) -> FactAccumulator:
    acc = FactAccumulator()
    extract_narrative(rows, acc, config.narrative)
    return acc


def _row(line: str) -> list[str]:
    return line.split(",")


@pytest.mark.parametrize(
    ("cell", "index", "expected"),
    [
        ("650", 3, 650.0),
        ("12.5", 0, 12.5),
        (" 7ms", 0, 7.0),
        ("-3", 0, -3.0),
        ("Time", 4, 4.0),
        ("", 9, 9.0),
    ],
)
def test_parse_time(cell, index, expected):
    assert parse_time(cell, index) == expected


def test_damage_row_from_example(config):
    acc = _extract([_row("650,>t,效果触发,Cow,伤害目标,Wind,Slam_Hit,施加伤害=800")], config)
    assert acc.damage == [
        DamageEffectEntry(time=650.0, unit="Cow", effect="Slam_Hit", raw_damage=800, hp_deduction=0, shield_deduction=0)
    ]
    assert acc.known_actors == ("Cow",)


def test_damage_row_scans_all_cells_for_each_figure(config):
    row = _row("10,>t,效果触发,Cow,伤害目标,Wind,Slam,扣除护盾=5,施加伤害=30,扣除生命=25")
    acc = _extract([row], config)
    assert acc.damage == [DamageEffectEntry(10.0, "Cow", "Slam", 30, 25, 5)]


def test_damage_row_falls_back_to_legacy_field(config):
    acc = _extract([_row("1250,>t,效果触发,Wind,伤害目标,Cow,Gust,伤害=450")], config)
    assert acc.damage == [DamageEffectEntry(1250.0, "Wind", "Gust", 450, 0, 0)]


def test_damage_row_with_only_deductions_is_kept(config):
    acc = _extract([_row("1,>t,效果触发,Cow,伤害目标,Wind,Slam,扣除生命=70")], config)
    assert acc.damage == [DamageEffectEntry(1.0, "Cow", "Slam", 0, 70, 0)]


@pytest.mark.parametrize(
    "line",
    [
        "1,>t,效果触发,Cow,伤害目标,Wind,Slam,miss",  # no damage figure
        "1,>t,效果触发,Cow,回复生命,Wind,Slam,施加伤害=5",  # not a damage-target row
        "1,>t,效果触发,,伤害目标,Wind,Slam,施加伤害=5",  # no source unit
        "1,>t,效果触发,Cow,伤害目标,Wind,,施加伤害=5",  # no effect name
        "1,>t,效果触发,Cow,伤害目标,Wind,施加伤害=5",  # too short
    ],
)
def test_incomplete_damage_rows_are_dropped(config, line):
    assert _extract([_row(line)], config).damage == []


def test_healing_and_shield_rows(config):
    rows = [
        _row("1350,>t,效果触发,Fan,回复生命,Cow,Fan_Heal,回复生命值=1500"),
        _row("1400,>t,效果触发,Fan,施加护盾,Fan,Fan_Guard,获得护盾=600"),
    ]
    acc = _extract(rows, config)
    assert acc.healing == [HealingEffectEntry(1350.0, "Fan", "Fan_Heal", 1500)]
    assert acc.shields == [ShieldEffectEntry(1400.0, "Fan", "Fan_Guard", 600)]
    assert acc.damage == []


def test_damage_and_healing_may_fire_on_same_row(config):
    row = _row("5,>t,效果触发,Vamp,伤害目标,Cow,Drain,施加伤害=100,回复生命值=40")
    acc = _extract([row], config)
    assert acc.damage == [DamageEffectEntry(5.0, "Vamp", "Drain", 100, 0, 0)]
    assert acc.healing == [HealingEffectEntry(5.0, "Vamp", "Drain", 40)]


def test_skill_cast_requires_unit_and_skill(config):
    rows = [
        _row("600,>t,技能释放,Cow,Charge"),
        _row("601,>t,技能释放,Cow, "),
        _row("602,>t,技能释放,Cow"),
        _row("603,>t,【技能释放】,Cow,Stomp"),  # decorated label
    ]
    acc = _extract(rows, config)
    assert acc.skills == [SkillCastEntry(600.0, "Cow", "Charge"), SkillCastEntry(603.0, "Cow", "Stomp")]


def test_health_change_prefers_post_change_value(config):
    row = _row("500,>t,血量变化,Cow,HP=1,变动情况=71719=>70719")
    acc = _extract([row], config)
    assert acc.health == [HealthEntry(500.0, "Cow", 70719)]


def test_health_change_falls_back_to_generic_token(config):
    acc = _extract([_row("500,>t,血量变化,Cow,hp=42")], config)
    assert acc.health == [HealthEntry(500.0, "Cow", 42)]


def test_unit_create_ignores_change_token(config):
    acc = _extract([_row("0,>t,单位创建,Cow,变动情况=1=>2")], config)
    assert acc.health == []


def test_unit_create_reads_generic_health(config):
    acc = _extract([_row("0,>t,单位创建,Cow, uid=1, 属性={防御=4781 生命=71719}")], config)
    assert acc.health == [HealthEntry(0.0, "Cow", 71719)]


def test_health_only_from_health_rows(config):
    # 技能行や効果行の HP トークンは無視
    acc = _extract([_row("1,>t,技能释放,Cow,Charge,HP=5")], config)
    assert acc.health == []


def test_structured_name_cell_is_rejected(config):
    acc = _extract([_row("1,>t,血量变化,uid=9,HP=5")], config)
    assert acc.health == []


def test_unparseable_time_uses_row_index(config):
    rows = [_row("Time,LogContent"), _row("n/a,>t,技能释放,Cow,Charge")]
    acc = _extract(rows, config)
    assert acc.skills == [SkillCastEntry(1.0, "Cow", "Charge")]


def test_process_row_reports_emitted_count(config):
    extractor = NarrativeExtractor(config.narrative, FactAccumulator())
    assert extractor.process_row(_row("5,>t,效果触发,Vamp,伤害目标,Cow,Drain,施加伤害=1,回复生命值=2"), 0) == 2
    assert extractor.process_row(_row("noise"), 1) == 0


def test_demo_log_counts(narrative_rows, config):
    acc = _extract(narrative_rows, config)
    assert len(acc.health) == 5
    assert len(acc.skills) == 3
    assert len(acc.damage) == 3
    assert len(acc.healing) == 1
    assert len(acc.shields) == 1
    assert set(acc.known_actors) == {"牛魔王(Ally)", "风伯(Enemy)", "铁扇公主(Ally)"}
