from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from sheet_mapper.models.binding import Binding, BindingSet

"""Binding configuration loader.

Responsibilities:
- Load a YAML binding config (flat ``mapping`` or ordered ``bindings`` form)
- Validate it against ``mapping_schema.json``
- Apply defaults (first sheet, header on the first row)
"""

__all__ = [
    "ConfigError",
    "MappingConfig",
    "load_config",
    "parse_config",
    "SCHEMA_PATH",
]

SCHEMA_PATH = Path(__file__).parent / "mapping_schema.json"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class MappingConfig:
    """Binding configuration of one sheet read."""
    bindings: BindingSet
    sheet: str | None = None  # None = 先頭シート
    required: tuple[str, ...] = ()
    header_row: int = 0
    skip_blank_rows: bool = False
    null_sentinels: frozenset[str] = field(default_factory=frozenset)


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing / invalid, or data violates the schema
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


def _sentinel_text(value: str | None) -> str:
    # YAML は裸の NULL / null / ~ を None として読む
    return "NULL" if value is None else value.strip().upper()


def parse_config(data: Any) -> MappingConfig:
    """Build a MappingConfig from already loaded YAML / JSON data."""
    if not isinstance(data, dict):
        raise ConfigError(f"config must be a mapping, got {type(data).__name__}")
    _validate_config_schema(data)

    if "mapping" in data:
        bindings = BindingSet.from_mapping(data["mapping"])
    else:
        bindings = BindingSet(
            Binding.of(entry["property"], entry["column"], entry.get("static")) for entry in data["bindings"]
        )
    return MappingConfig(
        bindings=bindings,
        sheet=data.get("sheet"),
        required=tuple(data.get("required", [])),
        header_row=data.get("header_row", 0),
        skip_blank_rows=data.get("skip_blank_rows", False),
        null_sentinels=frozenset(_sentinel_text(s) for s in data.get("null_sentinels", [])),
    )


def load_config(path: Path) -> MappingConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    return parse_config(data)
