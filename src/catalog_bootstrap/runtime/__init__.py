"""Runtime context that owns the shared catalog reference."""

from .context import (
    BASE_DIR_KEY,
    CATALOG_LOAD_MODE_KEY,
    CATALOG_URL_KEY,
    DEFAULT_BASE_DIR,
    RuntimeContext,
)

__all__ = [
    "RuntimeContext",
    "CATALOG_URL_KEY",
    "CATALOG_LOAD_MODE_KEY",
    "BASE_DIR_KEY",
    "DEFAULT_BASE_DIR",
]
