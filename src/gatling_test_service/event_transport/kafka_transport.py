"""Kafka adapters for receiving triggers and publishing lifecycle events."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from typing import Any, Protocol

from confluent_kafka import Consumer, KafkaError, KafkaException, Producer

from gatling_test_service.configuration.runtime_settings import KafkaSettings
from gatling_test_service.lifecycle_reporting.lifecycle_events import LifecycleEventError
from gatling_test_service.trigger_events.event_contracts import TriggerRequest
from gatling_test_service.trigger_events.trigger_parsing import (
    TriggerEventError,
    decode_trigger_event,
)

logger = logging.getLogger(__name__)

_KAFKA_CLIENT_LOGGER = logging.getLogger("gatling_test_service.kafka.client")
_KAFKA_CLIENT_LOGGER.addHandler(logging.NullHandler())
_KAFKA_CLIENT_LOGGER.propagate = False
_KAFKA_CLIENT_LOGGER.setLevel(logging.CRITICAL + 1)


class EventTransportError(Exception):
    """Raised when the Kafka consumer reports a fatal error."""


class KafkaProducerProtocol(Protocol):
    """Subset of the confluent-kafka producer API used by the sender."""

    def produce(
        self, topic: str, value: bytes, key: bytes | None = None, **kwargs: Any
    ) -> None: ...

    def flush(self, timeout: float) -> int: ...


class KafkaConsumerProtocol(Protocol):
    """Protocol implemented by both real and fake consumers."""

    def subscribe(self, topics: list[str], **kwargs: Any) -> None: ...

    def poll(self, timeout: float) -> _KafkaRawMessage | None: ...

    def commit(self, message: Any = None, asynchronous: bool = True) -> Any: ...

    def close(self) -> None: ...


class _KafkaRawMessage(Protocol):
    """Subset of Kafka message API required by the listener."""

    def error(self) -> Any: ...

    def value(self) -> bytes | None: ...


class KafkaLifecycleEventSender:  # pylint: disable=too-few-public-methods
    """Lifecycle event sender publishing JSON CloudEvents to the events topic."""

    def __init__(
        self,
        kafka_settings: KafkaSettings,
        producer: KafkaProducerProtocol | None = None,
    ) -> None:
        self._settings = kafka_settings
        self._producer = producer or self._create_producer()

    def send(self, event: Mapping[str, Any]) -> None:
        delivery_errors: list[str] = []

        def _on_delivery(error: Any, _message: Any) -> None:
            if error is not None:
                delivery_errors.append(str(error))

        key = event.get("shkeptncontext") or None
        try:
            self._producer.produce(
                self._settings.events_topic,
                value=json.dumps(event).encode("utf-8"),
                key=key.encode("utf-8") if key else None,
                on_delivery=_on_delivery,
            )
            remaining = self._producer.flush(self._settings.flush_timeout_seconds)
        except (KafkaException, BufferError) as exc:
            raise LifecycleEventError(
                f"publishing {event.get('type')} event failed: {exc}"
            ) from exc
        if remaining:
            raise LifecycleEventError(
                f"publishing {event.get('type')} event timed out after "
                f"{self._settings.flush_timeout_seconds}s"
            )
        if delivery_errors:
            raise LifecycleEventError(
                f"delivery of {event.get('type')} event failed: {'; '.join(delivery_errors)}"
            )

    def _create_producer(self) -> KafkaProducerProtocol:
        config = {"bootstrap.servers": ",".join(self._settings.bootstrap_servers)}
        config.update(self._settings.security)
        return Producer(config, logger=_KAFKA_CLIENT_LOGGER)


class TriggerEventListener:
    """Consumes `test.triggered` events and hands each one to a handler."""

    def __init__(
        self,
        kafka_settings: KafkaSettings,
        consumer: KafkaConsumerProtocol | None = None,
    ) -> None:
        self._settings = kafka_settings
        self._consumer = consumer or self._create_consumer()

    def listen(
        self,
        handler: Callable[[TriggerRequest], Any],
        *,
        max_events: int | None = None,
    ) -> int:
        """Poll triggers until `max_events` were handled (forever when None).

        Returns:
          Number of triggers passed to the handler.
        """
        self._consumer.subscribe([self._settings.trigger_topic])
        handled = 0
        try:
            while max_events is None or handled < max_events:
                message = self._consumer.poll(timeout=self._settings.poll_interval_ms / 1000.0)
                if message is None:
                    continue
                if message.error():
                    if message.error().code() == KafkaError._PARTITION_EOF:
                        continue
                    raise EventTransportError(f"Kafka error: {message.error()}")
                try:
                    request = decode_trigger_event(message.value() or b"")
                except TriggerEventError as exc:
                    logger.warning("Ignoring event: %s", exc)
                    self._consumer.commit(message=message, asynchronous=False)
                    continue
                handler(request)
                handled += 1
                self._consumer.commit(message=message, asynchronous=False)
        finally:
            self._consumer.close()
        return handled

    def _create_consumer(self) -> KafkaConsumerProtocol:
        config = {
            "bootstrap.servers": ",".join(self._settings.bootstrap_servers),
            "group.id": self._settings.group_id,
            "enable.auto.commit": False,
            "auto.offset.reset": "latest",
        }
        config.update(self._settings.security)
        return Consumer(config, logger=_KAFKA_CLIENT_LOGGER)
