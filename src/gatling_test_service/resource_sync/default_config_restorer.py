"""Restores baseline Gatling configuration files into a run workspace."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

CONF_DIRNAME = "conf"
DEFAULT_CONF_FILES = ("logback.xml", "gatling.conf", "gatling-akka.conf")

logger = logging.getLogger(__name__)


class DefaultConfigError(Exception):
    """Raised when a baseline configuration file cannot be restored."""


def restore_default_conf_files(conf_dir_root: Path, workspace: Path) -> list[Path]:
    """Copy baseline conf files the resource store did not provide.

    Files already present in `<workspace>/conf` win over the defaults.
    """
    target_conf = workspace / CONF_DIRNAME
    try:
        target_conf.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DefaultConfigError(f"creating {target_conf} failed: {exc}") from exc

    restored: list[Path] = []
    for filename in DEFAULT_CONF_FILES:
        target = target_conf / filename
        if target.exists():
            logger.debug("Keeping %s provided by the resource store", filename)
            continue
        source = conf_dir_root / filename
        try:
            shutil.copyfile(source, target)
        except OSError as exc:
            raise DefaultConfigError(f"copying {source} to {target} failed: {exc}") from exc
        restored.append(target)
    return restored
