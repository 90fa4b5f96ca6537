"""
Connector configuration loader.

This module centralizes reading and validating connector settings from
`config/connector.yml`: the Table API display_value mode, the topic prefix,
and per-table key fields.

Example file:

    display_value: all
    stream_prefix: servicenow
    tables:
      incident:
        key_fields: sys_id
        timestamp_field: sys_updated_on
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ingestion.normalizer.errors import InvalidArgumentError
from ingestion.normalizer.identifiers import comma_delimited_to_list
from ingestion.normalizer.policy import FlatteningPolicy

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_VALUE = "false"
DEFAULT_STREAM_PREFIX = "servicenow"
DEFAULT_TIMESTAMP_FIELD = "sys_updated_on"


@dataclass
class TableConfig:
    """Configuration for a single ServiceNow table."""

    key_fields: list[str] = field(default_factory=lambda: ["sys_id"])
    enabled: bool = True
    timestamp_field: str | None = DEFAULT_TIMESTAMP_FIELD


@dataclass
class ConnectorConfig:
    """Complete connector configuration."""

    display_value: str = DEFAULT_DISPLAY_VALUE
    stream_prefix: str = DEFAULT_STREAM_PREFIX
    tables: dict[str, TableConfig] = field(default_factory=dict)

    @property
    def policy(self) -> FlatteningPolicy:
        """Flattening policy implied by the display_value mode."""
        return FlatteningPolicy.from_display_value_mode(self.display_value)

    def topic_for(self, table: str) -> str:
        """Return the destination topic for a table (e.g. "servicenow.incident")."""
        return f"{self.stream_prefix}.{table}" if self.stream_prefix else table

    def table(self, name: str) -> TableConfig:
        """Return the configuration for a table, defaulting when not configured."""
        return self.tables.get(name, TableConfig())


def _project_root() -> Path:
    """Return the project root path based on this file's location."""
    return Path(__file__).resolve().parent.parent.parent


def _parse_display_value(value: Any) -> str:
    # YAML reads unquoted true/false as booleans
    if isinstance(value, bool):
        value = "true" if value else "false"
    if not isinstance(value, str):
        raise ValueError(f"`display_value` must be false, true or all, got {value!r}")

    try:
        FlatteningPolicy.from_display_value_mode(value)
    except InvalidArgumentError as exc:
        raise ValueError(f"Invalid `display_value` in connector configuration: {exc}") from exc
    return value


def _parse_key_fields(table_name: str, value: Any) -> list[str]:
    if value is None:
        return ["sys_id"]
    if isinstance(value, str):
        return comma_delimited_to_list(value)
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return [item.strip() for item in value if item.strip()]
    raise ValueError(
        f"`key_fields` for table '{table_name}' must be a list or a comma-delimited string"
    )


def load_connector_config(config_path: str | None = None) -> ConnectorConfig:
    """
    Load connector configuration from YAML file.

    Args:
        config_path: Optional override for the config file path. When omitted,
            the function reads `config/connector.yml` relative to the project root.

    Returns:
        ConnectorConfig with one TableConfig per configured table.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
        ValueError: If the YAML file cannot be parsed or has invalid structure.
    """
    path = Path(config_path) if config_path else _project_root() / "config" / "connector.yml"
    if not path.exists():
        logger.error("Connector configuration file not found: %s", path)
        raise FileNotFoundError(f"Connector configuration file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as handle:
            raw_config: Mapping[str, Any] | None = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        logger.error("Failed to parse connector configuration: %s", exc)
        raise ValueError(f"Invalid YAML in connector configuration: {exc}") from exc

    if not raw_config:
        logger.warning("Connector configuration file is empty: %s", path)
        return ConnectorConfig()

    if not isinstance(raw_config, Mapping):
        raise ValueError("Connector configuration must be a mapping")

    display_value = _parse_display_value(raw_config.get("display_value", DEFAULT_DISPLAY_VALUE))

    stream_prefix = raw_config.get("stream_prefix", DEFAULT_STREAM_PREFIX)
    if not isinstance(stream_prefix, str):
        raise ValueError("`stream_prefix` must be a string")

    tables_section = raw_config.get("tables", {}) or {}
    if not isinstance(tables_section, Mapping):
        raise ValueError("`tables` section is invalid in connector configuration")

    tables: dict[str, TableConfig] = {}
    for table_name, table_data in tables_section.items():
        table_data = table_data or {}
        if not isinstance(table_data, Mapping):
            raise ValueError(f"Invalid table configuration for '{table_name}'")

        timestamp_field = table_data.get("timestamp_field", DEFAULT_TIMESTAMP_FIELD)
        if timestamp_field is not None and not isinstance(timestamp_field, str):
            raise ValueError(f"`timestamp_field` for table '{table_name}' must be a string")

        tables[table_name] = TableConfig(
            key_fields=_parse_key_fields(table_name, table_data.get("key_fields")),
            enabled=bool(table_data.get("enabled", True)),
            timestamp_field=timestamp_field,
        )

    config = ConnectorConfig(
        display_value=display_value,
        stream_prefix=stream_prefix,
        tables=tables,
    )

    logger.info(
        "Loaded connector configuration",
        extra={
            "display_value": display_value,
            "tables_count": len(tables),
            "enabled_tables": [name for name, cfg in tables.items() if cfg.enabled],
        },
    )
    return config


__all__ = ["ConnectorConfig", "TableConfig", "load_connector_config"]
