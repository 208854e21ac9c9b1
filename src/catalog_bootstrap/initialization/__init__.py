"""Catalog initialization.

Decides where a runtime's catalog gets its initial contents from, loads them
through a layered fallback policy, merges additions, runs population
callbacks and installs the catalog into the runtime context under a lock.

Key Components:
    - **CatalogInitialization**: the orchestrator running population passes
    - **SourceResolver**: precedence chain choosing the initial source
    - **populate_initial_from_uri**: best-effort YAML-then-XML loading
    - **set_catalog**: synchronized install/replace of the context's catalog
    - **LegacyLoadModeAdapter**: one-shot translation of ``catalog.load_mode``

Examples:
    >>> from catalog_bootstrap.initialization import CatalogInitialization
    >>> from catalog_bootstrap.runtime import RuntimeContext
    >>>
    >>> init = CatalogInitialization(initial_uri="file:///srv/catalog.bom")
    >>> context = RuntimeContext()
    >>> catalog = init.populate_catalog(context)
    >>> init.has_run()
    True
"""

from .load_mode import CatalogLoadMode, LegacyLoadModeAdapter, map_load_mode
from .loading import InitialLoadResult, populate_initial_from_uri
from .orchestrator import CatalogInitialization, PopulationCallback
from .sources import (
    LOCAL_BOM_FILENAME,
    LOCAL_LEGACY_FILENAME,
    FallbackSourceProvider,
    PopulateMode,
    ResolvedSource,
    SourceResolver,
)
from .state import InitializationSettings, OneShotFlag, RunCounter
from .swap import set_catalog

__all__ = [
    "CatalogInitialization",
    "PopulationCallback",
    "InitializationSettings",
    "SourceResolver",
    "ResolvedSource",
    "PopulateMode",
    "FallbackSourceProvider",
    "LOCAL_BOM_FILENAME",
    "LOCAL_LEGACY_FILENAME",
    "InitialLoadResult",
    "populate_initial_from_uri",
    "set_catalog",
    "CatalogLoadMode",
    "LegacyLoadModeAdapter",
    "map_load_mode",
    "RunCounter",
    "OneShotFlag",
]
