"""Initial catalog source resolution.

Precedence, first match wins:

1. disallow-local mode: nothing is read at all
2. the explicit initial URI (autodetect format)
3. the ``catalog.url`` configuration value (autodetect format)
4. ``<base_dir>/catalog.bom`` if it exists (YAML only)
5. ``<base_dir>/catalog.xml`` if it exists (XML only, deprecated)
6. fallback providers, in registration order
7. nothing: the catalog simply starts empty

Resolution never raises for ordinary problems. File checks that fail with an
OS error count as "does not exist" and a failing fallback provider is logged
and skipped.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from catalog_bootstrap.base.errors import propagate_if_fatal
from catalog_bootstrap.runtime.context import CATALOG_URL_KEY
from catalog_bootstrap.utils.logger import get_logger

from .state import InitializationSettings

if TYPE_CHECKING:
    from catalog_bootstrap.runtime import RuntimeContext

logger = get_logger(name="CATALOG_INIT", color="sky_blue2")

LOCAL_BOM_FILENAME = "catalog.bom"
LOCAL_LEGACY_FILENAME = "catalog.xml"


class PopulateMode(Enum):
    """Which content formats a load attempt may try."""

    YAML = "yaml"
    XML = "xml"
    AUTODETECT = "autodetect"

    @property
    def allows_yaml(self) -> bool:
        return self in (PopulateMode.YAML, PopulateMode.AUTODETECT)

    @property
    def allows_xml(self) -> bool:
        return self in (PopulateMode.XML, PopulateMode.AUTODETECT)


@dataclass(frozen=True)
class ResolvedSource:
    """The URI chosen for the initial catalog and how to read it."""

    uri: str
    mode: PopulateMode
    origin: str
    deprecated: bool = False


FallbackSourceProvider = Callable[["RuntimeContext"], Optional[ResolvedSource]]


def _exists(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False


class SourceResolver:
    """Pick at most one initial catalog source for a runtime context."""

    def __init__(self, fallback_providers: Sequence[FallbackSourceProvider] | None = None):
        """
        Args:
            fallback_providers: Consulted in order after the local files, for
                bundled default catalogs or other deployment-specific sources
        """
        self.fallback_providers: list[FallbackSourceProvider] = list(fallback_providers or [])

    def add_fallback_provider(self, provider: FallbackSourceProvider) -> None:
        self.fallback_providers.append(provider)

    def resolve(
        self, settings: InitializationSettings, context: "RuntimeContext", first_pass: bool = True
    ) -> ResolvedSource | None:
        """Return the initial source for ``context``, or None for an empty catalog.

        Args:
            settings: Current initialization settings
            context: Runtime context supplying configuration and base directory
            first_pass: Whether this is the first population pass (controls log noise)
        """
        if settings.disallow_local:
            if first_pass:
                logger.debug("Initial catalog not being read with disallow-local mode set.")
            return None

        if settings.initial_uri:
            return ResolvedSource(settings.initial_uri, PopulateMode.AUTODETECT, "initial catalog URI")

        catalog_url = context.config.get(CATALOG_URL_KEY)
        if isinstance(catalog_url, str) and catalog_url.strip():
            return ResolvedSource(catalog_url.strip(), PopulateMode.AUTODETECT, f"'{CATALOG_URL_KEY}' setting")

        base_dir = context.base_dir
        bom_path = base_dir / LOCAL_BOM_FILENAME
        if _exists(bom_path):
            return ResolvedSource(bom_path.resolve().as_uri(), PopulateMode.YAML, "local catalog.bom")

        legacy_path = base_dir / LOCAL_LEGACY_FILENAME
        if _exists(legacy_path):
            return ResolvedSource(
                legacy_path.resolve().as_uri(), PopulateMode.XML, "local catalog.xml", deprecated=True
            )

        for provider in self.fallback_providers:
            try:
                source = provider(context)
            except Exception as e:
                propagate_if_fatal(e)
                logger.warning(f"Fallback catalog source provider {provider!r} failed: {e}")
                continue
            if source is not None:
                return source

        return None
