"""Trigger event entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

TEST_TASK_NAME = "test"
KEPTN_EVENT_PREFIX = "sh.keptn.event"
TRIGGERED_EVENT_TYPE = f"{KEPTN_EVENT_PREFIX}.{TEST_TASK_NAME}.triggered"
STARTED_EVENT_TYPE = f"{KEPTN_EVENT_PREFIX}.{TEST_TASK_NAME}.started"
FINISHED_EVENT_TYPE = f"{KEPTN_EVENT_PREFIX}.{TEST_TASK_NAME}.finished"


@dataclass(frozen=True)
class TriggerRequest:  # pylint: disable=too-many-instance-attributes
    """Inbound request to run a load test against one service deployment."""

    event_id: str
    keptn_context: str
    project: str
    stage: str
    service: str
    test_strategy: str
    deployment_uris_local: tuple[str, ...] = ()
    deployment_uris_public: tuple[str, ...] = ()
    labels: Mapping[str, str] = field(default_factory=dict)

    @property
    def coordinates(self) -> str:
        """Dotted project.stage.service identifier used in log and error messages."""
        return f"{self.project}.{self.stage}.{self.service}"
