"""Kafka event transport tests."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

import pytest
from confluent_kafka import KafkaError, KafkaException
from gatling_test_service.configuration.runtime_settings import KafkaSettings
from gatling_test_service.event_transport.kafka_transport import (
    EventTransportError,
    KafkaLifecycleEventSender,
    TriggerEventListener,
)
from gatling_test_service.lifecycle_reporting.lifecycle_events import LifecycleEventError
from gatling_test_service.trigger_events.event_contracts import TriggerRequest


def _kafka_settings() -> KafkaSettings:
    return KafkaSettings(
        bootstrap_servers=("localhost:9092",),
        trigger_topic="sh.keptn.event.test.triggered",
        events_topic="keptn.events",
        group_id="gatling-service",
        security={},
        poll_interval_ms=100,
        flush_timeout_seconds=5,
    )


def _trigger_payload(event_id: str) -> bytes:
    return json.dumps(
        {
            "id": event_id,
            "type": "sh.keptn.event.test.triggered",
            "shkeptncontext": "context",
            "data": {"project": "sockshop", "stage": "staging", "service": "carts"},
        }
    ).encode("utf-8")


class FakeProducer:
    def __init__(
        self,
        *,
        delivery_error: object | None = None,
        remaining: int = 0,
        produce_error: Exception | None = None,
    ) -> None:
        self.produced: list[dict[str, Any]] = []
        self.flush_timeouts: list[float] = []
        self._delivery_error = delivery_error
        self._remaining = remaining
        self._produce_error = produce_error
        self._callbacks: list[Any] = []

    def produce(self, topic: str, value: bytes, key: bytes | None = None, **kwargs: Any) -> None:
        if self._produce_error:
            raise self._produce_error
        self.produced.append({"topic": topic, "value": value, "key": key})
        self._callbacks.append(kwargs["on_delivery"])

    def flush(self, timeout: float) -> int:
        self.flush_timeouts.append(timeout)
        for callback in self._callbacks:
            callback(self._delivery_error, None)
        self._callbacks.clear()
        return self._remaining


class FakeRecord:
    def __init__(self, payload: bytes | None, *, error_obj: object | None = None) -> None:
        self._payload = payload
        self._error = error_obj

    def error(self) -> object | None:
        return self._error

    def value(self) -> bytes | None:
        return self._payload


class FakeError:
    def __init__(self, code_value: int, text: str = "boom") -> None:
        self._code_value = code_value
        self._text = text

    def code(self) -> int:
        return self._code_value

    def __str__(self) -> str:
        return self._text


class FakeConsumer:
    def __init__(self, records: Iterable[FakeRecord | None]) -> None:
        self.records = list(records)
        self._index = 0
        self.committed: list[FakeRecord] = []
        self.closed = False

    def subscribe(self, topics: list[str], **kwargs: Any) -> None:
        self.subscribed = topics

    def poll(self, timeout: float) -> FakeRecord | None:
        if self._index >= len(self.records):
            raise AssertionError("poll called after the last record")
        record = self.records[self._index]
        self._index += 1
        return record

    def commit(self, message: Any = None, asynchronous: bool = True) -> None:
        self.committed.append(message)

    def close(self) -> None:
        self.closed = True


def test_sender_produces_json_keyed_by_context() -> None:
    producer = FakeProducer()
    sender = KafkaLifecycleEventSender(_kafka_settings(), producer=producer)
    event = {"type": "sh.keptn.event.test.started", "shkeptncontext": "ctx-1", "data": {}}

    sender.send(event)

    assert producer.produced == [
        {"topic": "keptn.events", "value": json.dumps(event).encode("utf-8"), "key": b"ctx-1"}
    ]
    assert producer.flush_timeouts == [5]


def test_sender_raises_on_delivery_error() -> None:
    sender = KafkaLifecycleEventSender(
        _kafka_settings(), producer=FakeProducer(delivery_error="broker down")
    )

    with pytest.raises(LifecycleEventError, match="broker down"):
        sender.send({"type": "sh.keptn.event.test.finished"})


def test_sender_raises_when_flush_times_out() -> None:
    sender = KafkaLifecycleEventSender(_kafka_settings(), producer=FakeProducer(remaining=1))

    with pytest.raises(LifecycleEventError, match="timed out"):
        sender.send({"type": "sh.keptn.event.test.finished"})


def test_sender_wraps_producer_exceptions() -> None:
    producer = FakeProducer(produce_error=KafkaException("local queue full"))
    sender = KafkaLifecycleEventSender(_kafka_settings(), producer=producer)

    with pytest.raises(LifecycleEventError, match="local queue full"):
        sender.send({"type": "sh.keptn.event.test.started"})


def test_listener_hands_valid_triggers_to_handler_and_skips_noise() -> None:
    consumer = FakeConsumer(
        [
            None,
            FakeRecord(None, error_obj=FakeError(KafkaError._PARTITION_EOF)),
            FakeRecord(b"{broken"),
            FakeRecord(_trigger_payload("first")),
            FakeRecord(_trigger_payload("second")),
        ]
    )
    handled: list[TriggerRequest] = []

    count = TriggerEventListener(_kafka_settings(), consumer=consumer).listen(
        handled.append, max_events=2
    )

    assert count == 2
    assert [request.event_id for request in handled] == ["first", "second"]
    assert consumer.subscribed == ["sh.keptn.event.test.triggered"]
    assert len(consumer.committed) == 3
    assert consumer.closed is True


def test_listener_raises_on_kafka_error_and_closes_consumer() -> None:
    consumer = FakeConsumer(
        [FakeRecord(None, error_obj=FakeError(KafkaError._ALL_BROKERS_DOWN, "all down"))]
    )

    with pytest.raises(EventTransportError, match="all down"):
        TriggerEventListener(_kafka_settings(), consumer=consumer).listen(lambda _: None)

    assert consumer.closed is True
