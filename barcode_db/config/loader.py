from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import AppConfig, ExportConfig

"""Config loader.

Responsibilities:
- Load an optional YAML config (default location config/barcodes.yml)
- Validate it against the bundled JSON schema
- Apply defaults for every key left out
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/barcodes.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing/invalid, or the data violates it
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


def load_config(path: Path | None = None, *, required: bool = True) -> AppConfig:
    """Load configuration.

    Args:
        path: YAML file; None returns the defaults
        required: when False a missing file also yields the defaults
    """
    if path is None:
        return AppConfig()
    if not path.exists():
        if not required:
            return AppConfig()
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    defaults = AppConfig()
    tz = data.get("timezone", defaults.timezone)
    try:
        ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"unknown timezone: {tz}") from e

    export_raw = data.get("export", {})
    export = ExportConfig(
        filename=export_raw.get("filename", defaults.export.filename),
        sheet_name=export_raw.get("sheet_name", defaults.export.sheet_name),
    )
    return AppConfig(
        timezone=tz,
        upload_time_format=data.get("upload_time_format", defaults.upload_time_format),
        error_display_limit=data.get("error_display_limit", defaults.error_display_limit),
        preview_limit=data.get("preview_limit", defaults.preview_limit),
        export=export,
    )
