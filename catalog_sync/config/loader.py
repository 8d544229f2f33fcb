from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import SyncConfig
from ..models.reconciliation_result import ImportMode

"""Config loader.

Responsibilities:
- Load YAML (config/catalog_sync.yml by default)
- Validate against the packaged JSON schema (unknown keys rejected)
- Apply defaults for every key left out
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/catalog_sync.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or not valid JSON, or the config
            data fails validation (wrong types, unknown keys, bad values)
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


def load_config(path: Path) -> SyncConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    defaults = SyncConfig()
    return SyncConfig(
        delimiter=data.get("delimiter", defaults.delimiter),
        default_mode=ImportMode(data.get("default_mode", defaults.default_mode.value)),
        error_log_dir=data.get("error_log_dir", defaults.error_log_dir),
        export_prefix=data.get("export_prefix", defaults.export_prefix),
        snapshot_id_column=data.get("snapshot_id_column", defaults.snapshot_id_column),
    )
