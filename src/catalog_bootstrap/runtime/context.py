"""Runtime context owning the shared catalog reference.

The context is the only owner of the catalog. Catalog initialization looks
the catalog up through :meth:`RuntimeContext.get_catalog_if_set` and installs
one through the swap coordinator, which holds :attr:`RuntimeContext.lock`
across its check-and-set. The slot accessors take the same (re-entrant) lock,
so a reader never sees a torn update.
"""

import threading
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from catalog_bootstrap.base.errors import CatalogUnavailableError
from catalog_bootstrap.utils.config import ConfigBuilder

if TYPE_CHECKING:
    from catalog_bootstrap.catalog import BasicCatalog
    from catalog_bootstrap.initialization import CatalogInitialization

CATALOG_URL_KEY = "catalog.url"
CATALOG_LOAD_MODE_KEY = "catalog.load_mode"
BASE_DIR_KEY = "runtime.base_dir"
DEFAULT_BASE_DIR = "~/.catalog_bootstrap"


class RuntimeContext:
    """Configuration plus a guarded, swappable catalog slot."""

    def __init__(
        self,
        config: ConfigBuilder | None = None,
        catalog_initialization: Optional["CatalogInitialization"] = None,
    ):
        """
        Args:
            config: Configuration to read settings from; empty when omitted
            catalog_initialization: Used by :meth:`get_catalog` to populate on demand
        """
        self.config = config if config is not None else ConfigBuilder.from_dict({})
        self.catalog_initialization = catalog_initialization
        self.lock = threading.RLock()
        self._catalog: BasicCatalog | None = None

    @property
    def base_dir(self) -> Path:
        """Directory searched for the local ``catalog.bom`` and ``catalog.xml``."""
        return Path(str(self.config.get(BASE_DIR_KEY) or DEFAULT_BASE_DIR)).expanduser()

    def get_catalog_if_set(self) -> Optional["BasicCatalog"]:
        with self.lock:
            return self._catalog

    def set_catalog(self, catalog: Optional["BasicCatalog"]) -> None:
        """Replace the slot contents. Prefer the swap coordinator over calling this directly."""
        with self.lock:
            self._catalog = catalog

    def get_catalog(self) -> "BasicCatalog":
        """Return the installed catalog, populating one if an initialization is attached.

        Raises:
            CatalogUnavailableError: If no catalog is installed and none can be populated
        """
        catalog = self.get_catalog_if_set()
        if catalog is not None:
            return catalog
        if self.catalog_initialization is None:
            raise CatalogUnavailableError(
                "Runtime context has no catalog and no catalog initialization attached"
            )
        return self.catalog_initialization.get_catalog_populating_best_effort(self)
