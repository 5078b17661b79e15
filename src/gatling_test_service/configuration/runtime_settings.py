"""Configuration domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

DEFAULT_SERVICE_NAME = "gatling-service"
DEFAULT_EXECUTABLE = "gatling.sh"
DEFAULT_CONF_DIR_ROOT = "/opt/gatling/conf"
DEFAULT_TRIGGER_TOPIC = "sh.keptn.event.test.triggered"
DEFAULT_EVENTS_TOPIC = "keptn.events"


@dataclass(frozen=True)
class ServiceSettings:
    """Per-process settings handed to the run orchestrator."""

    name: str = DEFAULT_SERVICE_NAME
    executable: str = DEFAULT_EXECUTABLE
    conf_dir_root: Path = Path(DEFAULT_CONF_DIR_ROOT)
    temp_path_prefix: Path | None = None


@dataclass(frozen=True)
class ResourceStoreSettings:
    """Location of the remote (or local) resource store."""

    url: str | None
    local_root: Path | None
    timeout_seconds: int


@dataclass(frozen=True)
class KafkaSettings:  # pylint: disable=too-many-instance-attributes
    """Kafka event transport configuration."""

    bootstrap_servers: tuple[str, ...]
    trigger_topic: str
    events_topic: str
    group_id: str
    security: Mapping[str, object]
    poll_interval_ms: int
    flush_timeout_seconds: int


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    service: ServiceSettings
    resource_store: ResourceStoreSettings
    kafka: KafkaSettings | None
