"""Loads the optional per-service workload mapping document."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import yaml

from gatling_test_service.resource_store.store_clients import ResourceStore, ResourceStoreError

from .workload_models import Workload, WorkloadMapping

WORKLOAD_CONFIG_URI = "gatling/gatling.conf.yaml"

logger = logging.getLogger(__name__)


class WorkloadConfigError(Exception):
    """Raised when the workload mapping document cannot be fetched or parsed."""


def resolve_workload_mapping(
    store: ResourceStore, project: str, stage: str, service: str
) -> WorkloadMapping | None:
    """Fetch and parse the workload mapping; None when the service has none."""
    logger.info("Loading %s for %s.%s.%s", WORKLOAD_CONFIG_URI, project, stage, service)
    try:
        content = store.get_resource(project, stage, service, WORKLOAD_CONFIG_URI)
    except ResourceStoreError as exc:
        raise WorkloadConfigError(
            f"error when trying to load {WORKLOAD_CONFIG_URI} file for service {service} "
            f"on stage {stage} or project-level {project}: {exc}"
        ) from exc

    if not content:
        logger.warning("no %s found", WORKLOAD_CONFIG_URI)
        return None

    try:
        mapping = parse_workload_mapping(content)
    except WorkloadConfigError as exc:
        raise WorkloadConfigError(
            f"Couldn't parse {WORKLOAD_CONFIG_URI} file found for service {service} "
            f"in stage {stage} in project {project}. Error: {exc}"
        ) from exc

    if mapping is not None:
        logger.info(
            "Successfully loaded %s with %d workloads",
            WORKLOAD_CONFIG_URI,
            len(mapping.workloads),
        )
    return mapping


def parse_workload_mapping(content: bytes | str) -> WorkloadMapping | None:
    """Parse a workload mapping document; an empty document yields None."""
    try:
        parsed = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise WorkloadConfigError(str(exc)) from exc

    if parsed is None:
        return None
    if not isinstance(parsed, Mapping):
        raise WorkloadConfigError("document root must be a mapping.")

    raw_workloads = parsed.get("workloads")
    if raw_workloads is None:
        raw_workloads = []
    if not isinstance(raw_workloads, list):
        raise WorkloadConfigError("workloads must be a list.")

    return WorkloadMapping(
        spec_version=_optional_string(parsed.get("spec_version"), "spec_version"),
        workloads=tuple(
            _parse_workload(item, index) for index, item in enumerate(raw_workloads)
        ),
    )


def _parse_workload(value: Any, index: int) -> Workload:
    if not isinstance(value, Mapping):
        raise WorkloadConfigError(f"workloads[{index}] must be a mapping.")
    return Workload(
        test_strategy=_optional_string(
            value.get("teststrategy"), f"workloads[{index}].teststrategy"
        ),
        simulation=_optional_string(value.get("simulation"), f"workloads[{index}].simulation"),
    )


def _optional_string(value: Any, field_name: str) -> str:
    if value is None:
        return ""
    # unquoted versions such as 1.0 load as floats
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if not isinstance(value, str):
        raise WorkloadConfigError(f"{field_name} must be a string.")
    return value
