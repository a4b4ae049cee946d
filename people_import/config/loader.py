from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.candidate import TARGET_FIELDS, MemberStatus
from ..models.config_models import DEFAULT_BATCH_SIZE, DEFAULT_TABLE, DatabaseConfig, ImportConfig
from ..models.raw_record import SKIP
from .defaults import DEFAULT_FIELD_MAPPINGS, DEFAULT_STATUS_MAPPINGS

"""Config loader.

Responsibilities:
- Load YAML config (config/import.yml by default)
- Validate against the packaged JSON schema
- Merge field/status dictionaries over the built-in Planning Center ones
- Apply defaults (batch_size=50, strict=False, table=people)
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/import.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails schema validation.
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        # 列挙値はモデル側を正とする
        schema["definitions"]["target_field"]["enum"] = [*TARGET_FIELDS, SKIP]
        schema["definitions"]["status"]["enum"] = MemberStatus.values()
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    # YAML 側の辞書は既定辞書へ上書きマージ
    field_mappings = dict(DEFAULT_FIELD_MAPPINGS)
    field_mappings.update(data.get("field_mappings") or {})
    status_mappings = dict(DEFAULT_STATUS_MAPPINGS)
    status_mappings.update(data.get("status_mappings") or {})

    db_raw = data.get("database") or {}
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
        table=db_raw.get("table", DEFAULT_TABLE),
    )
    return ImportConfig(
        field_mappings=field_mappings,
        status_mappings=status_mappings,
        default_status=data.get("default_status", MemberStatus.VISITOR.value),
        batch_size=data.get("batch_size", DEFAULT_BATCH_SIZE),
        strict=bool(data.get("strict", False)),
        guess_headers=bool(data.get("guess_headers", False)),
        database=db,
    )


def resolve_config(path: Path | None) -> ImportConfig:
    """Load an explicit config path, or the default one if present.

    An explicitly given path must exist. Without one, a missing
    config/import.yml simply means "use the built-in defaults".
    """
    if path is not None:
        return load_config(path)
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return ImportConfig()
