"""Copies load test resources from the resource store into a run workspace."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

from gatling_test_service.resource_store.store_clients import ResourceStore, ResourceStoreError

RESOURCE_PREFIX = "gatling"

logger = logging.getLogger(__name__)


class ResourceSyncError(Exception):
    """Raised when load test resources cannot be copied into the workspace."""


def sync_load_test_resources(
    store: ResourceStore,
    project: str,
    stage: str,
    service: str,
    workspace: Path,
) -> int:
    """Copy every `gatling/` resource of the service into the workspace.

    The namespace segment is stripped, so `/gatling/conf/gatling.conf` lands at
    `<workspace>/conf/gatling.conf`.

    Returns:
      Number of files written.
    """
    try:
        resource_uris = store.list_service_resources(project, stage, service)
    except ResourceStoreError as exc:
        logger.warning("Error getting %s files: %s", RESOURCE_PREFIX, exc)
        raise ResourceSyncError(str(exc)) from exc

    downloaded = 0
    for resource_uri in resource_uris:
        relative_parts = _namespaced_parts(resource_uri)
        if relative_parts is None:
            continue
        logger.info("Found file: %s", resource_uri)
        try:
            content = store.get_resource(project, stage, service, resource_uri)
        except ResourceStoreError as exc:
            logger.warning("Failed to fetch file %s: %s", resource_uri, exc)
            raise ResourceSyncError(str(exc)) from exc
        _write_resource(workspace, relative_parts, content or b"")
        downloaded += 1
    return downloaded


def _namespaced_parts(resource_uri: str) -> tuple[str, ...] | None:
    parts = PurePosixPath(resource_uri.lstrip("/")).parts
    if len(parts) < 2 or parts[0] != RESOURCE_PREFIX:
        return None
    return parts[1:]


def _write_resource(workspace: Path, relative_parts: tuple[str, ...], content: bytes) -> Path:
    root = workspace.resolve()
    target = root.joinpath(*relative_parts).resolve()
    if not target.is_relative_to(root):
        raise ResourceSyncError(
            f"resource path {'/'.join(relative_parts)} escapes the workspace directory"
        )
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
    except OSError as exc:
        logger.error("Failed to write %s: %s", target, exc)
        raise ResourceSyncError(f"writing {target} failed: {exc}") from exc
    return target
