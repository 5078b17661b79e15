"""Trigger event domain exports."""

from .event_contracts import (
    FINISHED_EVENT_TYPE,
    STARTED_EVENT_TYPE,
    TRIGGERED_EVENT_TYPE,
    TriggerRequest,
)
from .trigger_parsing import TriggerEventError, decode_trigger_event, parse_trigger_event

__all__ = [
    "TriggerRequest",
    "TriggerEventError",
    "decode_trigger_event",
    "parse_trigger_event",
    "TRIGGERED_EVENT_TYPE",
    "STARTED_EVENT_TYPE",
    "FINISHED_EVENT_TYPE",
]
