"""Service URL domain exports."""

from .service_url_resolver import NO_DEPLOYMENT_URI_MESSAGE, ServiceUrlError, resolve_service_url

__all__ = ["NO_DEPLOYMENT_URI_MESSAGE", "ServiceUrlError", "resolve_service_url"]
