from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..client.submission import DEFAULT_ENDPOINT
from ..services.preview import DEFAULT_PREVIEW_LIMIT

"""Config loader.

Responsibilities:
- Load YAML config (default: config/upload.yml)
- Validate against the packaged JSON schema
- Apply defaults (endpoint, preview_limit, logs_directory)
- Apply environment overrides: BULK_UPLOAD_API_URL replaces api.base_url,
  BULK_UPLOAD_TOKEN supplies the bearer token (never read from YAML)
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")

ENV_API_URL = "BULK_UPLOAD_API_URL"
ENV_TOKEN = "BULK_UPLOAD_TOKEN"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ApiConfig:
    base_url: str
    endpoint: str = DEFAULT_ENDPOINT
    timeout_seconds: float | None = None  # None: no local timeout
    auth_token: str | None = None


@dataclass(frozen=True)
class UploadConfig:
    api: ApiConfig
    source_directory: str | None = None
    preview_limit: int = DEFAULT_PREVIEW_LIMIT
    logs_directory: str = "./logs"


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: the schema file is missing or invalid, or the data
            violates it (missing keys, wrong types, unknown keys)
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


def load_config(path: Path) -> UploadConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)

    api_raw = data["api"]
    api = ApiConfig(
        base_url=os.getenv(ENV_API_URL) or api_raw["base_url"],
        endpoint=api_raw.get("endpoint", DEFAULT_ENDPOINT),
        timeout_seconds=api_raw.get("timeout_seconds"),
        auth_token=os.getenv(ENV_TOKEN) or None,
    )
    return UploadConfig(
        api=api,
        source_directory=data.get("source_directory"),
        preview_limit=data.get("preview_limit", DEFAULT_PREVIEW_LIMIT),
        logs_directory=data.get("logs_directory", "./logs"),
    )
