"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import (
    DEFAULT_CONF_DIR_ROOT,
    DEFAULT_EVENTS_TOPIC,
    DEFAULT_EXECUTABLE,
    DEFAULT_SERVICE_NAME,
    DEFAULT_TRIGGER_TOPIC,
    Configuration,
    KafkaSettings,
    ResourceStoreSettings,
    ServiceSettings,
)


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    service = _parse_service_section(parsed.get("service"), path.parent)
    resource_store = _parse_resource_store_section(parsed.get("resource_store"), path.parent)
    kafka_section = parsed.get("kafka")
    kafka = _parse_kafka_section(kafka_section, service.name) if kafka_section else None

    return Configuration(
        path=path,
        service=service,
        resource_store=resource_store,
        kafka=kafka,
    )


def _parse_service_section(value: Any, base_path: Path) -> ServiceSettings:
    section = _optional_mapping(value, "service")
    name = _optional_string(section.get("name"), "service.name") or DEFAULT_SERVICE_NAME
    executable = (
        _optional_string(section.get("executable"), "service.executable") or DEFAULT_EXECUTABLE
    )
    conf_dir_root = (
        _optional_string(section.get("conf_dir_root"), "service.conf_dir_root")
        or DEFAULT_CONF_DIR_ROOT
    )
    temp_path_prefix = _optional_string(
        section.get("temp_path_prefix"), "service.temp_path_prefix"
    )
    return ServiceSettings(
        name=name,
        executable=executable,
        conf_dir_root=_resolve_path(base_path, conf_dir_root),
        temp_path_prefix=_resolve_path(base_path, temp_path_prefix) if temp_path_prefix else None,
    )


def _parse_resource_store_section(value: Any, base_path: Path) -> ResourceStoreSettings:
    section = _require_mapping(value, "resource_store")
    url = _optional_string(section.get("url"), "resource_store.url")
    local_root = _optional_string(section.get("local_root"), "resource_store.local_root")
    if bool(url) == bool(local_root):
        raise ConfigurationError(
            "Exactly one of resource_store.url or resource_store.local_root must be provided."
        )
    if url and not url.startswith(("http://", "https://")):
        raise ConfigurationError("resource_store.url must be an http(s) URL.")
    timeout_seconds = _require_positive_int(
        section.get("timeout_seconds", 30), "resource_store.timeout_seconds"
    )
    resolved_root = _resolve_path(base_path, local_root) if local_root else None
    if resolved_root is not None and not resolved_root.is_dir():
        raise ConfigurationError(f"resource_store.local_root is not a directory: {resolved_root}")
    return ResourceStoreSettings(
        url=url.rstrip("/") if url else None,
        local_root=resolved_root,
        timeout_seconds=timeout_seconds,
    )


def _parse_kafka_section(value: Any, service_name: str) -> KafkaSettings:
    section = _require_mapping(value, "kafka")
    bootstrap_servers = _normalize_bootstrap_servers(section.get("bootstrap_servers"))
    trigger_topic = _require_non_empty_string(
        section.get("trigger_topic", DEFAULT_TRIGGER_TOPIC), "kafka.trigger_topic"
    )
    events_topic = _require_non_empty_string(
        section.get("events_topic", DEFAULT_EVENTS_TOPIC), "kafka.events_topic"
    )
    group_id = _optional_string(section.get("group_id"), "kafka.group_id") or service_name
    security = section.get("security") or {}
    if not isinstance(security, Mapping):
        raise ConfigurationError("kafka.security must be a mapping.")
    poll_interval_ms = _require_positive_int(
        section.get("poll_interval_ms", 500), "kafka.poll_interval_ms"
    )
    flush_timeout_seconds = _require_positive_int(
        section.get("flush_timeout_seconds", 10), "kafka.flush_timeout_seconds"
    )
    return KafkaSettings(
        bootstrap_servers=bootstrap_servers,
        trigger_topic=trigger_topic,
        events_topic=events_topic,
        group_id=group_id,
        security=dict(security),
        poll_interval_ms=poll_interval_ms,
        flush_timeout_seconds=flush_timeout_seconds,
    )


def _normalize_bootstrap_servers(value: Any) -> tuple[str, ...]:
    if value is None:
        raise ConfigurationError("kafka.bootstrap_servers is required.")
    servers: list[str] = []
    if isinstance(value, str):
        servers = [item.strip() for item in value.split(",") if item.strip()]
    elif isinstance(value, Sequence):
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError("kafka.bootstrap_servers entries must be strings.")
            stripped = item.strip()
            if stripped:
                servers.append(stripped)
    else:
        raise ConfigurationError("kafka.bootstrap_servers must be a string or list of strings.")
    if not servers:
        raise ConfigurationError("kafka.bootstrap_servers must contain at least one server.")
    return tuple(servers)


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
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
