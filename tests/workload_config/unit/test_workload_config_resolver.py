"""Workload config resolver tests."""

from __future__ import annotations

import pytest
from gatling_test_service.resource_store.store_clients import ResourceStoreError
from gatling_test_service.workload_config.workload_config_resolver import (
    WORKLOAD_CONFIG_URI,
    WorkloadConfigError,
    parse_workload_mapping,
    resolve_workload_mapping,
)
from gatling_test_service.workload_config.workload_models import Workload


class FakeStore:
    def __init__(self, content: bytes | None = None, error: Exception | None = None) -> None:
        self._content = content
        self._error = error
        self.requested: list[tuple[str, str, str, str]] = []

    def list_service_resources(self, project: str, stage: str, service: str) -> list[str]:
        return []

    def get_resource(
        self, project: str, stage: str, service: str, resource_uri: str
    ) -> bytes | None:
        self.requested.append((project, stage, service, resource_uri))
        if self._error:
            raise self._error
        return self._content


def test_parses_spec_version_and_workloads_in_document_order() -> None:
    mapping = parse_workload_mapping(
        b"""
spec_version: '0.1.0'
workloads:
  - teststrategy: performance
    simulation: BasicSimulation
  - teststrategy: functional
    simulation: SmokeSimulation
"""
    )

    assert mapping is not None
    assert mapping.spec_version == "0.1.0"
    assert mapping.workloads == (
        Workload(test_strategy="performance", simulation="BasicSimulation"),
        Workload(test_strategy="functional", simulation="SmokeSimulation"),
    )


def test_unquoted_numeric_spec_version_is_kept_as_text() -> None:
    mapping = parse_workload_mapping(b"spec_version: 1.0\nworkloads: []\n")

    assert mapping is not None
    assert mapping.spec_version == "1.0"
    assert mapping.workloads == ()


def test_workload_without_simulation_has_empty_simulation() -> None:
    mapping = parse_workload_mapping(b"workloads:\n  - teststrategy: performance\n")

    assert mapping is not None
    assert mapping.workloads == (Workload(test_strategy="performance", simulation=""),)


def test_empty_document_is_treated_as_absent() -> None:
    assert parse_workload_mapping(b"") is None


@pytest.mark.parametrize(
    "content",
    [
        b"workloads: [unclosed",
        b"- just\n- a list\n",
        b"workloads: performance\n",
        b"workloads:\n  - just-a-string\n",
        b"workloads:\n  - teststrategy: [a, b]\n",
    ],
)
def test_invalid_documents_raise(content: bytes) -> None:
    with pytest.raises(WorkloadConfigError):
        parse_workload_mapping(content)


@pytest.mark.parametrize("content", [b"workloads: {}\n", b"workloads: \"\"\n"])
def test_empty_non_list_workloads_report_shape_error(content: bytes) -> None:
    with pytest.raises(WorkloadConfigError, match="workloads must be a list"):
        parse_workload_mapping(content)


def test_null_workloads_yield_empty_mapping() -> None:
    mapping = parse_workload_mapping(b"spec_version: 0.1.0\nworkloads:\n")

    assert mapping is not None
    assert mapping.workloads == ()


def test_resolve_fetches_fixed_document_path() -> None:
    store = FakeStore(content=b"workloads:\n  - teststrategy: a\n    simulation: B\n")

    mapping = resolve_workload_mapping(store, "sockshop", "staging", "carts")

    assert store.requested == [("sockshop", "staging", "carts", WORKLOAD_CONFIG_URI)]
    assert mapping is not None
    assert mapping.workloads[0].simulation == "B"


@pytest.mark.parametrize("content", [None, b""])
def test_resolve_returns_none_when_document_is_missing(content: bytes | None) -> None:
    assert resolve_workload_mapping(FakeStore(content=content), "p", "s", "svc") is None


def test_resolve_wraps_parse_errors_with_service_context() -> None:
    store = FakeStore(content=b"workloads: [unclosed")

    with pytest.raises(WorkloadConfigError, match="Couldn't parse .* service carts in stage"):
        resolve_workload_mapping(store, "sockshop", "staging", "carts")


def test_resolve_wraps_store_errors() -> None:
    store = FakeStore(error=ResourceStoreError("connection refused"))

    with pytest.raises(WorkloadConfigError, match="connection refused"):
        resolve_workload_mapping(store, "sockshop", "staging", "carts")
