"""Best-effort loading of the initial catalog from one resolved source.

The content is fetched once. With a mode that allows YAML the catalog is
cleared and the content added as structured items; if that did not succeed
and the mode allows XML, the same text is parsed as a legacy document which
then replaces the catalog wholesale. Only the first problem met is kept.
When no attempt succeeded it is logged as a warning and the pass carries on;
fatal errors propagate immediately.
"""

from dataclasses import dataclass, field

from catalog_bootstrap.base.errors import propagate_if_fatal
from catalog_bootstrap.catalog import BasicCatalog, CatalogDocument, CatalogItem, parse_legacy_document
from catalog_bootstrap.utils.logger import get_logger
from catalog_bootstrap.utils.resources import ResourceLoader

from .sources import PopulateMode

logger = get_logger(name="CATALOG_INIT", color="sky_blue2")


@dataclass
class InitialLoadResult:
    """Outcome of :func:`populate_initial_from_uri`."""

    uri: str
    mode: PopulateMode
    items: list[CatalogItem] | None = None
    document: CatalogDocument | None = None
    problem: Exception | None = field(default=None, repr=False)

    @property
    def succeeded(self) -> bool:
        return self.items is not None or self.document is not None


def populate_initial_from_uri(
    catalog: BasicCatalog, uri: str, mode: PopulateMode, resource_loader: ResourceLoader
) -> InitialLoadResult:
    """Load ``uri`` into ``catalog`` trying the formats ``mode`` allows.

    Returns:
        What was loaded and the first problem encountered, if any
    """
    logger.debug(f"Loading initial catalog from {uri}")
    result = InitialLoadResult(uri=uri, mode=mode)

    contents = None
    try:
        contents = resource_loader.get_resource_as_string(uri)
    except Exception as e:
        propagate_if_fatal(e)
        result.problem = e

    if contents is not None and mode.allows_yaml:
        try:
            catalog.reset([])
            result.items = catalog.add_items(contents, source=uri)
        except Exception as e:
            propagate_if_fatal(e)
            if result.problem is None:
                result.problem = e

    if result.items is None and contents is not None and mode.allows_xml:
        try:
            result.document = parse_legacy_document(contents, uri)
        except Exception as e:
            propagate_if_fatal(e)
            if result.problem is None:
                result.problem = e
        if result.document is not None:
            catalog.reset(result.document)

    if result.items is not None:
        logger.debug(f"Loaded initial catalog from {uri}: {len(result.items)} item(s)")
    elif result.document is not None:
        logger.debug(
            f"Loaded legacy initial catalog from {uri}: {len(result.document.items)} item(s)"
            + (f" (structured parse failed first: {result.problem})" if result.problem else "")
        )
    elif result.problem is not None:
        logger.warning(f"Error importing catalog from {uri}: {result.problem}", exc_info=result.problem)

    return result
