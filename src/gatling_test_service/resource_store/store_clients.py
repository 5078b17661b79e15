"""Clients for the resource store holding per-service load test assets."""

from __future__ import annotations

import base64
import binascii
import logging
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)


class ResourceStoreError(Exception):
    """Raised when the resource store cannot list or fetch resources."""


class ResourceStore(Protocol):
    """Operations consumed from the resource store."""

    def list_service_resources(self, project: str, stage: str, service: str) -> list[str]: ...

    def get_resource(
        self, project: str, stage: str, service: str, resource_uri: str
    ) -> bytes | None: ...


class HTTPSession(Protocol):  # pylint: disable=too-few-public-methods
    """Subset of `requests.Session` used by the configuration service client."""

    def get(self, url: str, **kwargs: Any) -> requests.Response: ...


class ConfigurationServiceClient:
    """Resource store backed by the configuration-service HTTP API."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: int = 30,
        session: HTTPSession | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._session = session or requests.Session()

    def list_service_resources(self, project: str, stage: str, service: str) -> list[str]:
        """Return the URIs of every resource registered on the service level."""
        url = f"{self._service_path(project, stage, service)}/resource"
        resource_uris: list[str] = []
        next_page_key: str | None = None
        while True:
            params = {"nextPageKey": next_page_key} if next_page_key else {}
            response = self._get(url, params=params)
            if response.status_code != 200:
                raise ResourceStoreError(
                    f"listing resources of {project}.{stage}.{service} failed with "
                    f"HTTP {response.status_code}: {response.text}"
                )
            payload = self._json(response, url)
            for item in payload.get("resources") or []:
                resource_uri = item.get("resourceURI") if isinstance(item, dict) else None
                if resource_uri:
                    resource_uris.append(resource_uri)
            next_page_key = payload.get("nextPageKey") or None
            if not next_page_key or next_page_key == "0":
                return resource_uris

    def get_resource(
        self, project: str, stage: str, service: str, resource_uri: str
    ) -> bytes | None:
        """Fetch a resource, falling back from service to stage to project level.

        Returns None when the resource exists on none of the levels.
        """
        encoded_uri = quote(resource_uri.lstrip("/"), safe="")
        for level_path in (
            self._service_path(project, stage, service),
            self._stage_path(project, stage),
            self._project_path(project),
        ):
            url = f"{level_path}/resource/{encoded_uri}"
            response = self._get(url)
            if response.status_code == 404:
                continue
            if response.status_code != 200:
                raise ResourceStoreError(
                    f"fetching {resource_uri} failed with HTTP {response.status_code}: "
                    f"{response.text}"
                )
            return self._decode_content(self._json(response, url), resource_uri)
        logger.debug("Resource %s not found for %s.%s.%s", resource_uri, project, stage, service)
        return None

    def _project_path(self, project: str) -> str:
        return f"{self._base_url}/v1/project/{quote(project, safe='')}"

    def _stage_path(self, project: str, stage: str) -> str:
        return f"{self._project_path(project)}/stage/{quote(stage, safe='')}"

    def _service_path(self, project: str, stage: str, service: str) -> str:
        return f"{self._stage_path(project, stage)}/service/{quote(service, safe='')}"

    def _get(self, url: str, **kwargs: Any) -> requests.Response:
        try:
            return self._session.get(url, timeout=self._timeout_seconds, **kwargs)
        except requests.RequestException as exc:
            raise ResourceStoreError(f"request to {url} failed: {exc}") from exc

    @staticmethod
    def _json(response: requests.Response, url: str) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise ResourceStoreError(f"response from {url} is not valid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise ResourceStoreError(f"response from {url} must be a JSON object.")
        return payload

    @staticmethod
    def _decode_content(payload: dict[str, Any], resource_uri: str) -> bytes:
        content = payload.get("resourceContent") or ""
        try:
            return base64.b64decode(content, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ResourceStoreError(
                f"resource {resource_uri} has invalid base64 content: {exc}"
            ) from exc


class LocalResourceStore:
    """Resource store reading a `<project>/<stage>/<service>/` directory tree."""

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root)

    def list_service_resources(self, project: str, stage: str, service: str) -> list[str]:
        service_root = self._root / project / stage / service
        if not service_root.is_dir():
            raise ResourceStoreError(f"service directory not found: {service_root}")
        return [
            "/" + path.relative_to(service_root).as_posix()
            for path in sorted(service_root.rglob("*"))
            if path.is_file()
        ]

    def get_resource(
        self, project: str, stage: str, service: str, resource_uri: str
    ) -> bytes | None:
        relative = resource_uri.lstrip("/")
        for level_root in (
            self._root / project / stage / service,
            self._root / project / stage,
            self._root / project,
        ):
            candidate = level_root / relative
            if candidate.is_file():
                try:
                    return candidate.read_bytes()
                except OSError as exc:
                    raise ResourceStoreError(f"reading {candidate} failed: {exc}") from exc
        return None
