"""Error Classification for Catalog Initialization.

This module defines the exception hierarchy used throughout catalog
initialization, together with the helpers that decide which failures a
best-effort stage may record and which must always propagate.

Error Categories:
    - **Configuration**: invalid or missing configuration values
    - **Fetch**: a resource URI could not be turned into text
    - **Parse**: text could not be turned into catalog item descriptors
    - **Conflict**: a non-forced addition met items that already exist
    - **Unavailable**: no catalog is installed and none can be populated
    - **Fatal**: unrecoverable conditions that abort the current pass

Best-effort stages catch ``Exception`` and immediately hand it to
:func:`propagate_if_fatal`, so fatal conditions are never recorded as an
ordinary problem. Interrupt signals (``KeyboardInterrupt``, ``SystemExit``)
derive from ``BaseException`` and are never caught by those stages at all.

.. seealso::
   :mod:`catalog_bootstrap.initialization.loading` : best-effort initial load
   :mod:`catalog_bootstrap.initialization.orchestrator` : hard-failure stages
"""

from typing import Any


class CatalogError(Exception):
    """Base exception for all catalog-initialization errors.

    This is the root exception class for the custom exceptions within
    Catalog Bootstrap. It provides a common base for domain-specific
    error handling and categorization.
    """

    pass


class ConfigurationError(CatalogError):
    """Exception for configuration-related errors.

    Raised when configuration files are invalid, missing required settings,
    or contain values that cannot be coerced (for example an unknown legacy
    catalog load mode).
    """

    pass


class ContentFetchError(CatalogError):
    """Raised when a resource URI cannot be read as text."""

    def __init__(self, uri: str, message: str | None = None):
        self.uri = uri
        super().__init__(message or f"Unable to load resource '{uri}'")


class CatalogParseError(CatalogError):
    """Raised when catalog content cannot be parsed into item descriptors."""

    def __init__(self, message: str, source: str | None = None):
        self.source = source
        if source:
            message = f"{message} (source: {source})"
        super().__init__(message)


class ItemConflictError(CatalogError):
    """Raised when a non-forced addition conflicts with existing items.

    The non-conflicting items of the same batch have already been added
    when this is raised; ``added`` holds them and ``conflicts`` holds the
    catalog ids that were rejected.
    """

    def __init__(self, conflicts: list[str], added: list[Any] | None = None):
        self.conflicts = list(conflicts)
        self.added = list(added or [])
        joined = ", ".join(self.conflicts)
        super().__init__(
            f"Catalog already contains {len(self.conflicts)} item(s) being added: {joined}. "
            f"Use force to replace existing items."
        )


class CatalogUnavailableError(CatalogError):
    """Raised when a runtime context has no catalog and cannot populate one."""

    pass


class UnrecoverableError(Exception):
    """Marks a collaborator failure that must abort the current pass.

    Not a :class:`CatalogError`: handlers for ordinary catalog problems
    never catch it.
    """

    pass


FATAL_EXCEPTION_TYPES: tuple[type[BaseException], ...] = (MemoryError, UnrecoverableError)


def is_fatal(exc: BaseException) -> bool:
    """Return True when ``exc`` must never be captured as an ordinary problem."""
    return isinstance(exc, FATAL_EXCEPTION_TYPES) or not isinstance(exc, Exception)


def propagate_if_fatal(exc: BaseException) -> None:
    """Re-raise ``exc`` if it is fatal, otherwise return normally.

    Call this first thing in every ``except Exception`` block of a
    best-effort stage.
    """
    if is_fatal(exc):
        raise exc
