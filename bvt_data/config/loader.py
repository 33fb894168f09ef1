from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from dotenv import load_dotenv
from jsonschema.exceptions import ValidationError

"""Comparison config loader.

Responsibilities:
- Resolve the config path (.env / BVT_COMPARE_CONFIG / config/compare.yml)
- Load YAML
- Validate against the bundled JSON schema (compare_schema.json)
- Apply defaults for absent keys
"""

__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATH",
    "ConfigError",
    "CompareConfig",
    "load_config",
    "resolve_config_path",
]

SCHEMA_PATH = Path(__file__).parent / "compare_schema.json"
CONFIG_ENV_VAR = "BVT_COMPARE_CONFIG"
DEFAULT_CONFIG_PATH = Path("config/compare.yml")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class CompareConfig:
    """Root configuration for comparison runs."""
    verbose: bool = False  # 診断ログを INFO で出す
    show_progress: bool = False  # TTY 時のみ tqdm 表示
    diff_log_directory: str | None = None  # None なら JSON Lines 出力なし
    key_columns: dict[str, list[str]] = field(default_factory=dict)  # dataset 名 -> キー列

    def key_columns_for(self, dataset_name: str) -> list[str]:
        try:
            return list(self.key_columns[dataset_name])
        except KeyError:
            raise ConfigError(f"no key_columns configured for dataset: {dataset_name}") from None


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails schema validation (wrong types, unknown keys, ...).
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


def resolve_config_path(env_file: Path = Path(".env")) -> Path:
    """Resolve the config path.

    Order: BVT_COMPARE_CONFIG (process env, then .env without overriding existing
    variables), then config/compare.yml.
    """
    if env_file.exists():
        load_dotenv(dotenv_path=env_file, override=False)
    configured = os.getenv(CONFIG_ENV_VAR)
    return Path(configured) if configured else DEFAULT_CONFIG_PATH


def load_config(path: Path | None = None) -> CompareConfig:
    if path is None:
        path = resolve_config_path()
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    return CompareConfig(
        verbose=data.get("verbose", False),
        show_progress=data.get("show_progress", False),
        diff_log_directory=data.get("diff_log_directory"),
        key_columns={k: list(v) for k, v in (data.get("key_columns") or {}).items()},
    )
