"""Lifecycle reporting exports."""

from .lifecycle_events import (
    JsonLinesEventSender,
    LifecycleEvent,
    LifecycleEventError,
    LifecycleEventSender,
    build_finished_event,
    build_started_event,
    format_timestamp,
)

__all__ = [
    "JsonLinesEventSender",
    "LifecycleEvent",
    "LifecycleEventError",
    "LifecycleEventSender",
    "build_finished_event",
    "build_started_event",
    "format_timestamp",
]
