"""Configuration loader service."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from crd_converter.schema_management.schema_models import KindDefinition
from crd_converter.schema_management.schema_projection import SchemaError, load_kind_definition

from .runtime_settings import (
    Configuration,
    ConversionSettings,
    LoggingSettings,
    ServerSettings,
    TLSSettings,
)

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    parsed = _read_yaml(path, "Configuration file")
    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    server = _parse_server_section(parsed.get("server"), path.parent)
    conversion = _parse_conversion_section(parsed.get("conversion"))
    logging_settings = _parse_logging_section(parsed.get("logging"))
    kinds = _parse_kinds_section(parsed.get("kinds"), path.parent)

    return Configuration(
        path=path,
        server=server,
        conversion=conversion,
        logging=logging_settings,
        kinds=kinds,
    )


def _read_yaml(path: Path, label: str) -> Any:
    if not path.exists():
        raise ConfigurationError(f"{label} not found: {path}")
    text = path.read_text(encoding="utf-8")
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse {label.lower()} {path}: {exc}") from exc


def _parse_server_section(value: Any, base_path: Path) -> ServerSettings:
    section = _optional_mapping(value, "server")
    host = _require_non_empty_string(section.get("host", "0.0.0.0"), "server.host")
    port = _require_positive_int(section.get("port", 8443), "server.port")
    if port > 65535:
        raise ConfigurationError("server.port must be at most 65535.")
    tls = _parse_tls_section(section.get("tls"), base_path)
    return ServerSettings(host=host, port=port, tls=tls)


def _parse_tls_section(value: Any, base_path: Path) -> TLSSettings | None:
    if value is None:
        return None
    section = _require_mapping(value, "server.tls")
    cert_file = _require_non_empty_string(section.get("cert_file"), "server.tls.cert_file")
    key_file = _require_non_empty_string(section.get("key_file"), "server.tls.key_file")
    return TLSSettings(
        cert_file=_resolve_path(base_path, cert_file),
        key_file=_resolve_path(base_path, key_file),
    )


def _parse_conversion_section(value: Any) -> ConversionSettings:
    section = _optional_mapping(value, "conversion")
    parallelism = _require_positive_int(section.get("parallelism", 1), "conversion.parallelism")
    return ConversionSettings(parallelism=parallelism)


def _parse_logging_section(value: Any) -> LoggingSettings:
    section = _optional_mapping(value, "logging")
    level = _require_non_empty_string(section.get("level", "INFO"), "logging.level").upper()
    if level not in _LOG_LEVELS:
        raise ConfigurationError(f"logging.level must be one of {', '.join(_LOG_LEVELS)}.")
    return LoggingSettings(level=level)


def _parse_kinds_section(value: Any, base_path: Path) -> tuple[KindDefinition, ...]:
    if not isinstance(value, Sequence) or isinstance(value, str) or not value:
        raise ConfigurationError("Configuration section 'kinds' must list at least one kind.")

    kinds: list[KindDefinition] = []
    seen: set[str] = set()
    for entry in value:
        raw = _load_kind_entry(entry, base_path)
        try:
            definition = load_kind_definition(raw)
        except SchemaError as exc:
            raise ConfigurationError(str(exc)) from exc
        if definition.kind.lower() in seen:
            raise ConfigurationError(f"Kind '{definition.kind}' is configured more than once.")
        seen.add(definition.kind.lower())
        kinds.append(definition)
        logger.debug(
            "Loaded kind %s with versions %s",
            definition.kind,
            ", ".join(definition.registry.all()),
        )
    return tuple(kinds)


def _load_kind_entry(entry: Any, base_path: Path) -> Any:
    mapping = _require_mapping(entry, "kinds entry")
    path_value = mapping.get("path")
    if path_value is None:
        return mapping
    if len(mapping) != 1:
        raise ConfigurationError("A kinds entry with a path must not define other keys.")
    if not isinstance(path_value, str):
        raise ConfigurationError("Kind definition path must be a string.")
    return _read_yaml(_resolve_path(base_path, path_value), "Kind definition file")


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    return _require_mapping(value, section_name)


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
