"""Parsing of inbound CloudEvents into trigger requests."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

from .event_contracts import TRIGGERED_EVENT_TYPE, TriggerRequest


class TriggerEventError(Exception):
    """Raised when an inbound event cannot be turned into a trigger request."""


def decode_trigger_event(raw: bytes | str) -> TriggerRequest:
    """Decode a JSON encoded CloudEvent and parse it as a trigger request."""
    try:
        payload = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise TriggerEventError(f"Event is not valid JSON: {exc}") from exc
    return parse_trigger_event(payload)


def parse_trigger_event(event: Any) -> TriggerRequest:
    """Build a TriggerRequest from a `test.triggered` CloudEvent mapping."""
    if not isinstance(event, Mapping):
        raise TriggerEventError("Event root must be an object.")
    event_type = event.get("type")
    if event_type != TRIGGERED_EVENT_TYPE:
        raise TriggerEventError(f"Unsupported event type: {event_type}")

    data = event.get("data")
    if not isinstance(data, Mapping):
        raise TriggerEventError("Event data must be an object.")

    test_details = _optional_mapping(data.get("test"), "data.test")
    deployment = _optional_mapping(data.get("deployment"), "data.deployment")
    labels = _optional_mapping(data.get("labels"), "data.labels")

    return TriggerRequest(
        event_id=_optional_string(event.get("id"), "id"),
        keptn_context=_optional_string(event.get("shkeptncontext"), "shkeptncontext"),
        project=_require_non_empty_string(data.get("project"), "data.project"),
        stage=_require_non_empty_string(data.get("stage"), "data.stage"),
        service=_require_non_empty_string(data.get("service"), "data.service"),
        test_strategy=_optional_string(test_details.get("teststrategy"), "data.test.teststrategy"),
        deployment_uris_local=_string_tuple(
            deployment.get("deploymentURIsLocal"), "data.deployment.deploymentURIsLocal"
        ),
        deployment_uris_public=_string_tuple(
            deployment.get("deploymentURIsPublic"), "data.deployment.deploymentURIsPublic"
        ),
        labels={str(key): str(value) for key, value in labels.items()},
    )


def _optional_mapping(value: Any, field_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise TriggerEventError(f"{field_name} must be an object.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise TriggerEventError(f"{field_name} must be a non-empty string.")
    return value.strip()


def _optional_string(value: Any, field_name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TriggerEventError(f"{field_name} must be a string.")
    return value


def _string_tuple(value: Any, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise TriggerEventError(f"{field_name} must be a list of strings.")
    if not all(isinstance(item, str) for item in value):
        raise TriggerEventError(f"{field_name} entries must be strings.")
    return tuple(value)
