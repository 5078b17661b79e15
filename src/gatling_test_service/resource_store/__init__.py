"""Resource store domain exports."""

from .store_clients import (
    ConfigurationServiceClient,
    LocalResourceStore,
    ResourceStore,
    ResourceStoreError,
)

__all__ = [
    "ConfigurationServiceClient",
    "LocalResourceStore",
    "ResourceStore",
    "ResourceStoreError",
]
