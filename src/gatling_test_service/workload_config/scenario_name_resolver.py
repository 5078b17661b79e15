"""Maps a test strategy onto the Gatling simulation to run."""

from __future__ import annotations

import re

from .workload_models import WorkloadMapping

SIMULATION_SUFFIX = "Simulation"

_WORD_SEPARATORS = re.compile(r"[\s_.\-]+")


def resolve_simulation_name(test_strategy: str, mapping: WorkloadMapping | None) -> str:
    """Return the simulation configured for the strategy, or the naming-convention default."""
    if mapping is not None:
        for workload in mapping.workloads:
            if workload.test_strategy == test_strategy and workload.simulation:
                return workload.simulation
    return f"{to_camel(test_strategy)}{SIMULATION_SUFFIX}"


def to_camel(value: str) -> str:
    """Convert `custom_test` style labels into `CustomTest`."""
    return "".join(word[:1].upper() + word[1:] for word in _WORD_SEPARATORS.split(value) if word)
