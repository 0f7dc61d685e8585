from __future__ import annotations

import codecs
import json
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from combatlog.models.config_models import (
    RULE_NAMES,
    IngestConfig,
    NarrativeDialect,
    StandardVocabulary,
)

"""Config loader.

Responsibilities:
- Load the dialect YAML (packaged default or a user supplied file)
- Validate it against config/schema.json
- Check encodings and regex patterns so that errors surface at load time
- Build the frozen IngestConfig domain model
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
    "default_config",
]

_config_dir = Path(__file__).parent
DEFAULT_CONFIG_PATH = _config_dir / "default.yml"
SCHEMA_PATH = _config_dir / "schema.json"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against JSON schema.

    Raises:
        ConfigError: If the schema file is missing or invalid, or the data does
            not satisfy it (missing keys, wrong types, unknown keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _keywords(values: list[str]) -> tuple[str, ...]:
    return tuple(v.strip().lower() for v in values if v.strip())


def _check_encodings(default_encoding: str, encodings: list[str]) -> None:
    for name in [default_encoding, *encodings]:
        try:
            codecs.lookup(name)
        except LookupError as e:
            raise ConfigError(f"unknown encoding: {name}") from e
    if default_encoding not in encodings:
        raise ConfigError(f"default_encoding '{default_encoding}' is not listed in encodings")


def _check_patterns(patterns: dict[str, str]) -> None:
    for name in RULE_NAMES:
        source = patterns[name]
        try:
            compiled = re.compile(source)
        except re.error as e:
            raise ConfigError(f"invalid pattern '{name}': {e}") from e
        if compiled.groups != 1:
            raise ConfigError(f"pattern '{name}' must have exactly one capture group")


def load_config(path: Path | None = None) -> IngestConfig:
    """Load and validate a dialect config; ``None`` loads the packaged default."""
    path = path or DEFAULT_CONFIG_PATH
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    _validate_config_schema(data)
    _check_encodings(data["default_encoding"], data["encodings"])

    narrative_raw = data["narrative"]
    patterns = dict(narrative_raw["patterns"])
    _check_patterns(patterns)

    detect = data["standard"]["detect"]
    columns = data["standard"]["columns"]
    standard = StandardVocabulary(
        detect_time=_keywords(detect["time"]),
        detect_unit=_keywords(detect["unit"]),
        detect_health=_keywords(detect["health"]),
        column_time=_keywords(columns["time"]),
        column_unit=_keywords(columns["unit"]),
        column_health=_keywords(columns["health"]),
    )
    events = narrative_raw["events"]
    narrative = NarrativeDialect(
        skill_cast=events["skill_cast"],
        effect_trigger=events["effect_trigger"],
        health_change=events["health_change"],
        unit_create=events["unit_create"],
        damage_target=narrative_raw["damage_target"],
        patterns=patterns,
    )
    return IngestConfig(
        default_encoding=data["default_encoding"],
        encodings=tuple(data["encodings"]),
        standard=standard,
        narrative=narrative,
    )


@lru_cache(maxsize=1)
def default_config() -> IngestConfig:
    """The packaged default config, loaded once."""
    return load_config(DEFAULT_CONFIG_PATH)
