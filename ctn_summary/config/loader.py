from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Resolve the config path (argument > CTN_SUMMARY_CONFIG > config/summary.yml)
- Load YAML and validate it against config_schema.json
- Apply defaults for optional keys
"""

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/summary.yml")
CONFIG_ENV_VAR = "CTN_SUMMARY_CONFIG"

DEFAULT_OUTPUT_DIRECTORY = "./processed"
DEFAULT_MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024
DEFAULT_RECENT_LIMIT = 10


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class SummaryConfig:
    source_directory: str
    output_directory: str = DEFAULT_OUTPUT_DIRECTORY
    max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES
    recent_limit: int = DEFAULT_RECENT_LIMIT


def resolve_config_path(path: Path | None = None) -> Path:
    if path is not None:
        return path
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def _validate_config_schema(data: Any) -> None:
    """Validate config data against the bundled JSON schema.

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


def load_config(path: Path) -> SummaryConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    _validate_config_schema(data)

    return SummaryConfig(
        source_directory=data["source_directory"],
        output_directory=data.get("output_directory", DEFAULT_OUTPUT_DIRECTORY),
        max_file_size_bytes=data.get("max_file_size_bytes", DEFAULT_MAX_FILE_SIZE_BYTES),
        recent_limit=data.get("recent_limit", DEFAULT_RECENT_LIMIT),
    )
