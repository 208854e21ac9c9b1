"""Catalog Initialization Orchestrator.

A population pass runs these stages in order:

1. Legacy load mode: translate the deprecated ``catalog.load_mode`` setting (once)
2. Persisted-state reset: reset the catalog to items supplied by the caller, if any
3. Initial load: resolve a source and load it best-effort (YAML, then legacy XML)
4. Additions: add ``additions_uri`` on top; failures propagate
5. Callbacks: notify population callbacks in registration order; failures propagate

The run counter is incremented once per top-level pass in a ``finally``
block, so it counts attempts whether or not they succeeded.

Error policy:
    Initial-load failures degrade to an empty or unchanged catalog with a
    warning. Additions and callback failures are surfaced to the caller.

Concurrency:
    Passes may run on any thread. Only the installation of the catalog into
    the runtime context is synchronized (see :func:`set_catalog`); two passes
    running at once interleave their remaining stages freely. A pass racing
    the very first one may run without the legacy load mode applied, since
    only the first caller reads that setting. Callbacks and fallback
    providers must be registered before the first pass starts.

Examples:
    Bootstrap with an explicit initial catalog and additions::

        >>> from catalog_bootstrap.initialization import CatalogInitialization
        >>> from catalog_bootstrap.runtime import RuntimeContext
        >>>
        >>> init = CatalogInitialization(
        ...     initial_uri="file:///etc/app/catalog.bom",
        ...     additions_uri="https://example.org/extra.bom",
        ... )
        >>> init.add_population_callback(lambda context: print("catalog ready"))
        >>> context = RuntimeContext(catalog_initialization=init)
        >>> catalog = init.populate_catalog(context)
        >>> init.run_count
        1
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING, Any

from catalog_bootstrap.catalog import BasicCatalog, CatalogItem
from catalog_bootstrap.utils.logger import get_logger
from catalog_bootstrap.utils.resources import ResourceLoader

from .load_mode import LegacyLoadModeAdapter
from .loading import InitialLoadResult, populate_initial_from_uri
from .sources import FallbackSourceProvider, SourceResolver
from .state import InitializationSettings, RunCounter
from .swap import set_catalog

if TYPE_CHECKING:
    from catalog_bootstrap.runtime import RuntimeContext

logger = get_logger(name="CATALOG_INIT", color="sky_blue2")


class PopulationCallback(ABC):
    """Observer notified after every population pass that reached the callback stage."""

    @abstractmethod
    def notify(self, context: "RuntimeContext") -> None:
        pass


class _FunctionCallback(PopulationCallback):
    def __init__(self, function: Callable[["RuntimeContext"], Any]):
        self.function = function

    def notify(self, context: "RuntimeContext") -> None:
        self.function(context)

    def __repr__(self) -> str:
        return f"_FunctionCallback({self.function!r})"


class CatalogInitialization:
    """Populates the catalog of a runtime context according to its settings.

    :param initial_uri: Explicit initial catalog URI; overrides every other source
    :param reset: Whether a reset of persisted catalog state was requested
    :param additions_uri: Structured content added after the initial load
    :param force: Let additions replace existing items with the same id
    :param disallow_local: Persisted-state-only mode; no local source is ever read
    :param fallback_providers: Extra initial sources tried after the local files
    :param resource_loader: Loader for catalog URIs; a default one is created lazily
    """

    def __init__(
        self,
        initial_uri: str | None = None,
        reset: bool = False,
        additions_uri: str | None = None,
        force: bool = False,
        *,
        disallow_local: bool = False,
        fallback_providers: Sequence[FallbackSourceProvider] | None = None,
        resource_loader: ResourceLoader | None = None,
    ):
        self._settings = InitializationSettings(
            initial_uri=initial_uri,
            reset=reset,
            additions_uri=additions_uri,
            force=force,
            disallow_local=disallow_local,
        )
        self.source_resolver = SourceResolver(fallback_providers)
        self._resource_loader = resource_loader
        self._callbacks: list[PopulationCallback] = []
        self._run_counter = RunCounter()
        self._load_mode_adapter = LegacyLoadModeAdapter()

    # ------------------------------------------------------------------
    # Settings and state
    # ------------------------------------------------------------------

    @property
    def settings(self) -> InitializationSettings:
        return self._settings

    def is_initial_reset_requested(self) -> bool:
        return self._settings.reset

    def is_local_disallowed(self) -> bool:
        return self._settings.disallow_local

    @property
    def run_count(self) -> int:
        return self._run_counter.value

    def has_run(self) -> bool:
        return self.run_count > 0

    def add_population_callback(
        self, callback: PopulationCallback | Callable[["RuntimeContext"], Any]
    ) -> "CatalogInitialization":
        """Register a callback run after every pass, in registration order."""
        if not isinstance(callback, PopulationCallback):
            callback = _FunctionCallback(callback)
        self._callbacks.append(callback)
        return self

    def _get_resource_loader(self, context: "RuntimeContext") -> ResourceLoader:
        if self._resource_loader is None:
            self._resource_loader = ResourceLoader.from_config(context.config)
        return self._resource_loader

    # ------------------------------------------------------------------
    # Population passes
    # ------------------------------------------------------------------

    def populate_catalog(
        self,
        context: "RuntimeContext",
        needs_initial: bool = True,
        items_for_resetting: Iterable[CatalogItem] | None = None,
    ) -> BasicCatalog:
        """Create or update the catalog of ``context``.

        Args:
            context: Runtime context owning the catalog
            needs_initial: Run the initial-load stage
            items_for_resetting: Items recovered from persisted state to reset
                the catalog to before loading

        Returns:
            The catalog that was populated

        Raises:
            CatalogError: From the additions stage
            ConfigurationError: For an unrecognised legacy load mode
            Exception: Whatever a population callback raised
        """
        try:
            catalog = context.get_catalog_if_set()
            if catalog is None:
                if self.has_run():
                    logger.warning(
                        "Odd: catalog initialization has run but the runtime context has no catalog; re-creating"
                    )
                catalog = BasicCatalog(context)
                set_catalog(context, catalog, "Replacing catalog with newly populated catalog", prefer_new=True)
            else:
                if not self.has_run():
                    logger.warning(
                        "Odd: catalog initialization has not run but the runtime context has a catalog; re-populating"
                    )

            self._populate(context, catalog, needs_initial, True, items_for_resetting)
            return catalog
        finally:
            self._run_counter.increment()

    def get_catalog_populating_best_effort(self, context: "RuntimeContext") -> BasicCatalog:
        """Return the context's catalog, populating a fresh one if none exists yet.

        When several callers race here only the one whose catalog was actually
        installed runs a population pass; the others get whatever is installed.
        """
        existing = context.get_catalog_if_set()
        if existing is not None:
            return existing

        catalog = BasicCatalog(context)
        previous = set_catalog(
            context,
            catalog,
            "Request to make local catalog early, but someone else has created it, reverting to that",
            prefer_new=False,
        )
        if previous is None:
            try:
                self._populate(context, catalog, True, True, None)
            finally:
                self._run_counter.increment()

        return context.get_catalog_if_set()

    def apply_catalog_load_mode(self, context: "RuntimeContext") -> None:
        """Translate the deprecated ``catalog.load_mode`` setting, first call only."""
        updated = self._load_mode_adapter.apply(context, self._settings)
        if updated is not None:
            self._settings = updated

    def _populate(
        self,
        context: "RuntimeContext",
        catalog: BasicCatalog,
        needs_initial: bool,
        run_callbacks: bool,
        items_for_resetting: Iterable[CatalogItem] | None,
    ) -> None:
        self.apply_catalog_load_mode(context)

        if items_for_resetting is not None:
            catalog.reset(items_for_resetting)

        if needs_initial:
            self.populate_initial(catalog, context)

        self.populate_additions(catalog, context)

        if run_callbacks:
            self.populate_via_callbacks(catalog, context)

    def populate_initial(self, catalog: BasicCatalog, context: "RuntimeContext") -> InitialLoadResult | None:
        """Resolve the initial source and load it best-effort.

        Returns:
            The load result, or None when no source applied
        """
        source = self.source_resolver.resolve(self._settings, context, first_pass=not self.has_run())
        if source is None:
            if not self._settings.disallow_local:
                logger.debug("No initial catalog source found; catalog starts empty")
            return None

        if source.deprecated:
            logger.warning(
                f"Reading initial catalog from deprecated legacy XML at {source.uri}; "
                f"convert it to the YAML catalog.bom format"
            )
        logger.debug(f"Initial catalog source: {source.origin} ({source.mode.value})")
        return populate_initial_from_uri(catalog, source.uri, source.mode, self._get_resource_loader(context))

    def populate_additions(self, catalog: BasicCatalog, context: "RuntimeContext") -> list[CatalogItem] | None:
        """Add the configured additions to ``catalog``.

        Returns:
            The added items, or None when the stage did not apply

        Raises:
            ContentFetchError: If the additions URI cannot be read
            CatalogParseError: If its content is not valid structured content
            ItemConflictError: If items conflict and ``force`` is not set
        """
        additions_uri = self._settings.additions_uri
        if not additions_uri or not additions_uri.strip():
            return None

        if self._settings.disallow_local:
            if not self.has_run():
                logger.warning("Catalog additions supplied but not supported in disallow-local mode; ignoring.")
            return None

        if not self.has_run():
            logger.debug(f"Adding to catalog from {additions_uri} (force: {self._settings.force})")

        contents = self._get_resource_loader(context).get_resource_as_string(additions_uri)
        items = catalog.add_items(contents, force=self._settings.force, source=additions_uri)

        if not self.has_run():
            logger.debug(f"Added to catalog from {additions_uri}: {[item.catalog_id for item in items]}")
        else:
            logger.debug(f"Added to catalog from {additions_uri}: count {len(items)}")
        return items

    def populate_via_callbacks(self, catalog: BasicCatalog, context: "RuntimeContext") -> None:
        """Notify every callback in order; the first failure stops the rest."""
        for callback in self._callbacks:
            callback.notify(context)

    # Exposed for callers that install catalogs outside a population pass
    set_catalog = staticmethod(set_catalog)
