from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_BIG_FILE_THRESHOLD,
    ColumnConfig,
    DatabaseConfig,
    ImportConfig,
)
from ..parsers.type_parser import ColumnType

"""Config loader.

Responsibilities:
- Load YAML config (config/import.yml by convention)
- Validate against import_schema.json shipped next to this module
- Apply defaults (big_file_threshold=10, should_replace=false)
- Build the typed ImportConfig
"""

__all__ = [
    "ConfigError",
    "SCHEMA_PATH",
    "load_config",
    "parse_config",
]

SCHEMA_PATH = Path(__file__).with_name("import_schema.json")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or not valid JSON, or the config
            data violates the schema (missing keys, wrong types, unknown keys).
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


def _build_column(raw: dict[str, Any]) -> ColumnConfig:
    column_type = ColumnType(raw["type"])
    options = tuple(raw.get("options") or ())
    if column_type is ColumnType.SELECT and not options:
        raise ConfigError(f"column {raw['name']}: select columns need options")
    return ColumnConfig(
        name=raw["name"],
        type=column_type,
        required=bool(raw.get("required", False)),
        options=options,
        attribute=raw.get("attribute"),
    )


def parse_config(data: Any) -> ImportConfig:
    """Validate already-loaded config data and build ImportConfig."""
    if not isinstance(data, dict):
        raise ConfigError("config root must be a mapping")
    _validate_config_schema(data)

    db_raw = data.get("database", {})
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
    )

    columns = [_build_column(c) for c in data["columns"]]
    names = [c.name for c in columns]
    if len(set(names)) != len(names):
        raise ConfigError("column names must be unique")
    output_keys = [c.output_key for c in columns]
    if len(set(output_keys)) != len(output_keys):
        raise ConfigError("column attributes must be unique (attribute defaults to name)")

    return ImportConfig(
        columns=columns,
        big_file_threshold=data.get("big_file_threshold", DEFAULT_BIG_FILE_THRESHOLD),
        should_replace=data.get("should_replace", False),
        error_log_dir=data.get("error_log_dir"),
        database=db,
    )


def load_config(path: Path) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    return parse_config(data)
