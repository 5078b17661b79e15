"""Workspace population exports."""

from .default_config_restorer import (
    CONF_DIRNAME,
    DEFAULT_CONF_FILES,
    DefaultConfigError,
    restore_default_conf_files,
)
from .resource_sync import RESOURCE_PREFIX, ResourceSyncError, sync_load_test_resources

__all__ = [
    "CONF_DIRNAME",
    "DEFAULT_CONF_FILES",
    "DefaultConfigError",
    "restore_default_conf_files",
    "RESOURCE_PREFIX",
    "ResourceSyncError",
    "sync_load_test_resources",
]
