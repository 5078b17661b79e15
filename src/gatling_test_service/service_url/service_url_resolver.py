"""Resolution of the URL of the deployment under test."""

from __future__ import annotations

from collections.abc import Sequence
from urllib.parse import urlsplit

from gatling_test_service.trigger_events.event_contracts import TriggerRequest

NO_DEPLOYMENT_URI_MESSAGE = "no deployment URI included in event"


class ServiceUrlError(Exception):
    """Raised when no usable deployment URI can be taken from a trigger request."""


def resolve_service_url(request: TriggerRequest) -> str:
    """Return the deployment URI to test, preferring local over public URIs."""
    candidate = _first_entry(request.deployment_uris_local) or _first_entry(
        request.deployment_uris_public
    )
    if not candidate:
        raise ServiceUrlError(NO_DEPLOYMENT_URI_MESSAGE)
    return _validate_url(candidate)


def _first_entry(uris: Sequence[str]) -> str | None:
    if uris and uris[0]:
        return uris[0]
    return None


def _validate_url(raw_url: str) -> str:
    try:
        parts = urlsplit(raw_url)
        # accessing port validates it
        _ = parts.port
    except ValueError as exc:
        raise ServiceUrlError(f"invalid deployment URI {raw_url!r}: {exc}") from exc
    if not parts.scheme or not parts.netloc:
        raise ServiceUrlError(f"invalid deployment URI {raw_url!r}: missing scheme or host")
    return parts.geturl()
