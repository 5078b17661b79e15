"""Construction and delivery of test lifecycle CloudEvents."""

from __future__ import annotations

import json
import uuid
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Protocol, TextIO

from gatling_test_service.trigger_events.event_contracts import (
    FINISHED_EVENT_TYPE,
    STARTED_EVENT_TYPE,
    TriggerRequest,
)

if TYPE_CHECKING:
    from gatling_test_service.run_execution.run_contracts import RunOutcome

CLOUDEVENTS_SPEC_VERSION = "1.0"
KEPTN_SPEC_VERSION = "0.2.0"

LifecycleEvent = dict[str, Any]


class LifecycleEventError(Exception):
    """Raised when a lifecycle event cannot be delivered."""


class LifecycleEventSender(Protocol):  # pylint: disable=too-few-public-methods
    """Port used by the orchestrator to publish lifecycle events."""

    def send(self, event: Mapping[str, Any]) -> None: ...


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as an RFC 3339 UTC timestamp."""
    return moment.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def build_started_event(
    request: TriggerRequest,
    *,
    source: str,
    clock: Callable[[], datetime] | None = None,
) -> LifecycleEvent:
    """Build the `test.started` event answering a trigger."""
    return _envelope(
        STARTED_EVENT_TYPE,
        request,
        source=source,
        data=_base_data(request),
        clock=clock,
    )


def build_finished_event(
    request: TriggerRequest,
    outcome: RunOutcome,
    *,
    source: str,
    clock: Callable[[], datetime] | None = None,
) -> LifecycleEvent:
    """Build the `test.finished` event carrying the run outcome."""
    data = _base_data(request)
    data.update(
        {
            "status": outcome.event_status,
            "result": outcome.event_result,
            "message": outcome.message,
            "test": {
                "start": format_timestamp(outcome.started_at),
                "end": format_timestamp(outcome.finished_at),
            },
        }
    )
    return _envelope(FINISHED_EVENT_TYPE, request, source=source, data=data, clock=clock)


def _base_data(request: TriggerRequest) -> dict[str, Any]:
    data: dict[str, Any] = {
        "project": request.project,
        "stage": request.stage,
        "service": request.service,
    }
    if request.labels:
        data["labels"] = dict(request.labels)
    return data


def _envelope(
    event_type: str,
    request: TriggerRequest,
    *,
    source: str,
    data: dict[str, Any],
    clock: Callable[[], datetime] | None,
) -> LifecycleEvent:
    now = (clock or (lambda: datetime.now(UTC)))()
    return {
        "specversion": CLOUDEVENTS_SPEC_VERSION,
        "id": str(uuid.uuid4()),
        "type": event_type,
        "source": source,
        "time": format_timestamp(now),
        "datacontenttype": "application/json",
        "shkeptncontext": request.keptn_context,
        "triggeredid": request.event_id,
        "shkeptnspecversion": KEPTN_SPEC_VERSION,
        "data": data,
    }


class JsonLinesEventSender:  # pylint: disable=too-few-public-methods
    """Writes each lifecycle event as one JSON line to a text stream."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def send(self, event: Mapping[str, Any]) -> None:
        try:
            self._stream.write(json.dumps(event, sort_keys=True) + "\n")
            self._stream.flush()
        except (OSError, ValueError) as exc:
            raise LifecycleEventError(f"writing {event.get('type')} event failed: {exc}") from exc
