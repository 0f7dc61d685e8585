from __future__ import annotations

import json

import jsonschema
import pytest
import yaml
from jsonschema.exceptions import ValidationError

from combatlog.config.loader import DEFAULT_CONFIG_PATH, SCHEMA_PATH

"""Dialect config schema contract: the packaged default satisfies the packaged schema."""


@pytest.fixture()
def schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


@pytest.fixture()
def default_data() -> dict:
    return yaml.safe_load(DEFAULT_CONFIG_PATH.read_text(encoding="utf-8"))


def test_schema_is_valid_draft7(schema):
    jsonschema.Draft7Validator.check_schema(schema)


def test_default_config_matches_schema(schema, default_data):
    jsonschema.validate(default_data, schema)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda d: d.pop("encodings"),
        lambda d: d.update(encodings=["gbk"]),
        lambda d: d["standard"]["detect"].update(time=[]),
        lambda d: d["narrative"]["events"].update(skill_cast=""),
        lambda d: d["narrative"]["patterns"].update(mana="x=(\\d+)"),
    ],
)
def test_schema_rejects_invalid_configs(schema, default_data, mutate):
    mutate(default_data)
    with pytest.raises(ValidationError):
        jsonschema.validate(default_data, schema)
