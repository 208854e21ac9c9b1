"""Synchronized installation of a catalog into a runtime context.

This is the single synchronization point for the catalog reference. Every
other initialization stage works on a catalog obtained through here and does
not lock again.
"""

from typing import TYPE_CHECKING, Optional

from catalog_bootstrap.utils.logger import get_logger

if TYPE_CHECKING:
    from catalog_bootstrap.catalog import BasicCatalog
    from catalog_bootstrap.runtime import RuntimeContext

logger = get_logger(name="CATALOG_INIT", color="sky_blue2")


def set_catalog(
    context: "RuntimeContext",
    catalog: "BasicCatalog",
    message_if_already: str | None = None,
    prefer_new: bool = False,
) -> Optional["BasicCatalog"]:
    """Install ``catalog`` in ``context``, choosing when one is already there.

    The check and the install happen under ``context.lock``. When a catalog
    exists and ``prefer_new`` is set, the slot is cleared before the new
    catalog goes in; any transient state is "no catalog", never two
    catalogs both considered current.

    Args:
        context: Runtime context owning the catalog slot
        catalog: Candidate catalog
        message_if_already: Logged as a warning when a catalog already existed
        prefer_new: Replace an existing catalog instead of keeping it

    Returns:
        The previously installed catalog (whether or not it was replaced),
        or None if the slot was empty and ``catalog`` was installed
    """
    with context.lock:
        previous = context.get_catalog_if_set()
        if previous is None:
            context.set_catalog(catalog)
            return None
        if prefer_new:
            context.set_catalog(None)
            context.set_catalog(catalog)

    if message_if_already and message_if_already.strip():
        logger.warning(message_if_already)
    return previous
