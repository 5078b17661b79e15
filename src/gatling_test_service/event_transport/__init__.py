"""Event transport exports."""

from .kafka_transport import EventTransportError, KafkaLifecycleEventSender, TriggerEventListener

__all__ = ["EventTransportError", "KafkaLifecycleEventSender", "TriggerEventListener"]
