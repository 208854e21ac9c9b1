"""Shared base definitions for Catalog Bootstrap."""

from .errors import (
    FATAL_EXCEPTION_TYPES,
    CatalogError,
    CatalogParseError,
    CatalogUnavailableError,
    ConfigurationError,
    ContentFetchError,
    ItemConflictError,
    UnrecoverableError,
    is_fatal,
    propagate_if_fatal,
)

__all__ = [
    "CatalogError",
    "ConfigurationError",
    "ContentFetchError",
    "CatalogParseError",
    "ItemConflictError",
    "CatalogUnavailableError",
    "UnrecoverableError",
    "FATAL_EXCEPTION_TYPES",
    "is_fatal",
    "propagate_if_fatal",
]
