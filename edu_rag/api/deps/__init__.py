"""API-specific dependencies."""

from .dependencies import (
    ServiceCache,
    get_notifier,
    get_processing_service,
    get_search_service,
    get_service_cache,
    get_session_factory,
    get_settings_dependency,
)

__all__ = [
    "ServiceCache",
    "get_notifier",
    "get_processing_service",
    "get_search_service",
    "get_service_cache",
    "get_session_factory",
    "get_settings_dependency",
]
