from __future__ import annotations

import codecs
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load YAML config (config/import.yml by default)
- Validate against config_schema.json shipped next to this module
- Apply defaults for every missing key (1日目 as first day label, utf-8-sig, ...)
"""

__all__ = [
    "ConfigError",
    "SheetsConfig",
    "ImportConfig",
    "default_config",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")

DEFAULT_EVENT_DATES = ("1日目", "2日目", "3日目")
# 日本語版/英語版それぞれのヘッダ先頭セル
DEFAULT_HEADER_TOKENS = ("サークル名", "circle")
DEFAULT_FILE_ENCODING = "utf-8-sig"
DEFAULT_COLLATION_LOCALE = "ja"
DEFAULT_SHEETS_EXPORT_URL = "https://docs.google.com/spreadsheets/d/{sheet_id}/gviz/tq"
DEFAULT_SHEETS_TIMEOUT = 10.0


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class SheetsConfig:
    export_url: str = DEFAULT_SHEETS_EXPORT_URL
    timeout_seconds: float = DEFAULT_SHEETS_TIMEOUT


@dataclass(frozen=True)
class ImportConfig:
    event_dates: tuple[str, ...] = DEFAULT_EVENT_DATES
    header_tokens: tuple[str, ...] = DEFAULT_HEADER_TOKENS
    file_encoding: str = DEFAULT_FILE_ENCODING
    collation_locale: str = DEFAULT_COLLATION_LOCALE
    sheets: SheetsConfig = field(default_factory=SheetsConfig)

    @property
    def default_event_date(self) -> str:
        """Day label applied when an imported row has no event date."""
        return self.event_dates[0]


def default_config() -> ImportConfig:
    return ImportConfig()


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: If the schema file is missing or unreadable, or if the
            config data fails validation (unknown keys, wrong types, ...).
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


def _check_encoding(name: str) -> str:
    try:
        codecs.lookup(name)
    except LookupError as e:
        raise ConfigError(f"unknown file_encoding: {name}") from e
    return name


def load_config(path: Path) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    sheets_raw = data.get("sheets", {})
    sheets = SheetsConfig(
        export_url=sheets_raw.get("export_url", DEFAULT_SHEETS_EXPORT_URL),
        timeout_seconds=float(sheets_raw.get("timeout_seconds", DEFAULT_SHEETS_TIMEOUT)),
    )
    return ImportConfig(
        event_dates=tuple(data.get("event_dates", DEFAULT_EVENT_DATES)),
        header_tokens=tuple(data.get("header_tokens", DEFAULT_HEADER_TOKENS)),
        file_encoding=_check_encoding(data.get("file_encoding", DEFAULT_FILE_ENCODING)),
        collation_locale=data.get("collation_locale", DEFAULT_COLLATION_LOCALE),
        sheets=sheets,
    )
