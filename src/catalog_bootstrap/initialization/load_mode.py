"""Legacy ``catalog.load_mode`` support.

Older deployments selected catalog behaviour with one coarse setting. It is
translated once per orchestrator into the fine-grained settings:

- ``load-catalog-url``: ``reset = True``
- ``load-catalog-url-if-no-persisted-state``: nothing, already the default
- ``load-persisted-state``: ``disallow_local = True``

The one-shot guard is a compare-and-set, so of several threads racing on
the first call exactly one reads the setting and applies it.
"""

from dataclasses import replace
from enum import Enum
from typing import TYPE_CHECKING, Any

from catalog_bootstrap.base.errors import ConfigurationError
from catalog_bootstrap.runtime.context import CATALOG_LOAD_MODE_KEY
from catalog_bootstrap.utils.logger import get_logger

from .state import InitializationSettings, OneShotFlag

if TYPE_CHECKING:
    from catalog_bootstrap.runtime import RuntimeContext

logger = get_logger(name="CATALOG_INIT", color="sky_blue2")


class CatalogLoadMode(Enum):
    """Deprecated coarse-grained catalog load modes."""

    LOAD_CATALOG_URL = "load-catalog-url"
    LOAD_CATALOG_URL_IF_NO_PERSISTED_STATE = "load-catalog-url-if-no-persisted-state"
    LOAD_PERSISTED_STATE = "load-persisted-state"

    @classmethod
    def coerce(cls, value: Any) -> "CatalogLoadMode":
        """Accept a member, its name or its value, case and separator insensitive.

        Raises:
            ConfigurationError: If ``value`` names no known mode
        """
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("_", "-")
        for mode in cls:
            if normalized == mode.value:
                return mode
        raise ConfigurationError(
            f"Invalid '{CATALOG_LOAD_MODE_KEY}' value {value!r}; "
            f"expected one of {[mode.value for mode in cls]}"
        )


def map_load_mode(mode: CatalogLoadMode, settings: InitializationSettings) -> InitializationSettings:
    """Return ``settings`` adjusted for ``mode``."""
    if mode is CatalogLoadMode.LOAD_CATALOG_URL:
        return replace(settings, reset=True)
    if mode is CatalogLoadMode.LOAD_PERSISTED_STATE:
        return replace(settings, disallow_local=True)
    return settings


class LegacyLoadModeAdapter:
    """Applies the deprecated load-mode setting on first use only."""

    def __init__(self):
        self._applied = OneShotFlag()

    @property
    def applied(self) -> bool:
        return self._applied.is_set()

    def apply(
        self, context: "RuntimeContext", settings: InitializationSettings
    ) -> InitializationSettings | None:
        """Translate the legacy setting from ``context`` into ``settings``.

        Returns:
            The adjusted settings, or None when nothing was applied: on every
            call after the first, and when the setting is absent

        Raises:
            ConfigurationError: If the configured mode is not recognised
        """
        if not self._applied.compare_and_set(False, True):
            return None

        raw_mode = context.config.get_raw(CATALOG_LOAD_MODE_KEY, required=False)
        if raw_mode is None:
            return None

        mode = CatalogLoadMode.coerce(raw_mode)
        logger.warning(
            f"Legacy catalog load mode {mode.name} set: applying, but this should be changed "
            f"to use the --catalog-initial/--catalog-reset/--catalog-add options"
        )
        return map_load_mode(mode, settings)
