"""Workload mapping entities."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Workload:
    """Pairs a test strategy with the simulation that implements it."""

    test_strategy: str
    simulation: str


@dataclass(frozen=True)
class WorkloadMapping:
    """Parsed `gatling.conf.yaml` document."""

    spec_version: str
    workloads: tuple[Workload, ...]
