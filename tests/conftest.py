# Shared pytest fixtures
from __future__ import annotations

import csv
import io
import logging
from pathlib import Path

import pytest

from combatlog.config.loader import default_config
from combatlog.logging.init import LOGGER_NAME, reset_logging

DEMO_NARRATIVE_CSV = """Time,LogContent
0,>11:48:02,单位创建,牛魔王(Ally), tid=27, uid=1, 属性={防御=4781 生命=71719}
0,>11:48:02,单位创建,风伯(Enemy), tid=28, uid=2, 属性={防御=3000 生命=63725}
0,>11:48:02,单位创建,铁扇公主(Ally), tid=29, uid=3, 属性={防御=2500 生命=45000}
500,>11:48:03,血量变化,牛魔王(Ally),变化值=-1000,变动情况=71719=>70719
600,>11:48:03,技能释放,牛魔王(Ally),蛮牛冲撞
650,>11:48:03,效果触发,牛魔王(Ally),伤害目标,风伯(Enemy),蛮牛冲撞_撞击,施加伤害=800,扣除生命=700,扣除护盾=100
1125,>11:48:03,血量变化,,uid=2,变化值=-2091,变动情况=63725=>61634
1200,>11:48:03,技能释放,风伯(Enemy),风卷残云
1250,>11:48:03,效果触发,风伯(Enemy),伤害目标,牛魔王(Ally),风卷残云_风刃,伤害=450
1350,>11:48:03,效果触发,铁扇公主(Ally),回复生命,牛魔王(Ally),芭蕉扇_治愈,回复生命值=1500
1400,>11:48:03,效果触发,铁扇公主(Ally),施加护盾,铁扇公主(Ally),芭蕉扇_护体,获得护盾=600
1600,>11:48:04,技能释放,牛魔王(Ally),蛮牛冲撞
1650,>11:48:04,效果触发,牛魔王(Ally),伤害目标,风伯(Enemy),蛮牛冲撞_撞击,施加伤害=850
"""

STANDARD_CSV = """time,unit,hp
0,A,100
1,A,90
x,B,50
2,B,70
"""


def split_csv(text: str) -> list[list[str]]:
    return [row for row in csv.reader(io.StringIO(text)) if row]


@pytest.fixture()
def config():
    return default_config()


@pytest.fixture()
def narrative_text() -> str:
    return DEMO_NARRATIVE_CSV


@pytest.fixture()
def standard_text() -> str:
    return STANDARD_CSV


@pytest.fixture()
def narrative_rows() -> list[list[str]]:
    return split_csv(DEMO_NARRATIVE_CSV)


@pytest.fixture()
def standard_rows() -> list[list[str]]:
    return split_csv(STANDARD_CSV)


@pytest.fixture()
def temp_workdir(monkeypatch, tmp_path: Path) -> Path:
    (tmp_path / "data").mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("COMBATLOG_CONFIG", raising=False)
    monkeypatch.delenv("COMBATLOG_ENCODING", raising=False)
    return tmp_path


@pytest.fixture()
def write_log(temp_workdir: Path):
    """Write text into data/<name> with the given encoding and return the path."""
    def _write(name: str, text: str, encoding: str = "utf-8") -> Path:
        path = temp_workdir / "data" / name
        path.write_bytes(text.encode(encoding))
        return path
    return _write


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    # ハンドラが閉じたキャプチャ stream を掴んだままにならないように
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    reset_logging()
