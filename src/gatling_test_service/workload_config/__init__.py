"""Workload configuration domain exports."""

from .scenario_name_resolver import SIMULATION_SUFFIX, resolve_simulation_name, to_camel
from .workload_config_resolver import (
    WORKLOAD_CONFIG_URI,
    WorkloadConfigError,
    parse_workload_mapping,
    resolve_workload_mapping,
)
from .workload_models import Workload, WorkloadMapping

__all__ = [
    "SIMULATION_SUFFIX",
    "WORKLOAD_CONFIG_URI",
    "Workload",
    "WorkloadConfigError",
    "WorkloadMapping",
    "parse_workload_mapping",
    "resolve_simulation_name",
    "resolve_workload_mapping",
    "to_camel",
]
