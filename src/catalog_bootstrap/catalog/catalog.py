"""In-memory catalog of item descriptors.

:class:`BasicCatalog` is the registry that catalog initialization installs
into a runtime context. Storage is an insertion-ordered mapping keyed by
``CatalogItem.catalog_id``, guarded by an internal lock so that readers on
other threads never observe a half-applied reset or addition.
"""

import threading
from collections.abc import Iterable
from typing import Any

from catalog_bootstrap.base.errors import ItemConflictError
from catalog_bootstrap.utils.logger import get_logger

from .models import CatalogDocument, CatalogItem
from .parsers import parse_catalog_bom

logger = get_logger("catalog")


class BasicCatalog:
    """Thread-safe, insertion-ordered store of catalog items."""

    def __init__(self, context: Any = None):
        """
        Args:
            context: Runtime context this catalog belongs to (informational only)
        """
        self.context = context
        self.document_name: str | None = None
        self._items: dict[str, CatalogItem] = {}
        self._lock = threading.RLock()

    def reset(self, source: Iterable[CatalogItem] | CatalogDocument) -> None:
        """Replace the whole contents with ``source``.

        Args:
            source: Items, or a legacy replacement document
        """
        if isinstance(source, CatalogDocument):
            items = source.items
            document_name = source.name or source.id
        else:
            items = list(source)
            document_name = None

        replacement = {item.catalog_id: item for item in items}
        with self._lock:
            self._items = replacement
            self.document_name = document_name
        logger.debug(f"Catalog reset with {len(replacement)} item(s)")

    def add_item(self, item: CatalogItem, force: bool = False) -> CatalogItem:
        """Add one item.

        Raises:
            ItemConflictError: If an item with the same id exists and ``force`` is False
        """
        with self._lock:
            if item.catalog_id in self._items and not force:
                raise ItemConflictError([item.catalog_id])
            self._items[item.catalog_id] = item
        return item

    def add_items(self, text: str, force: bool = False, source: str | None = None) -> list[CatalogItem]:
        """Parse structured ``text`` and add every item it declares.

        With ``force`` existing items with the same id are replaced. Without
        it conflicting items are rejected while the others are still added,
        and the rejection is reported once the batch is done.

        Returns:
            The items that were added

        Raises:
            CatalogParseError: If ``text`` is not valid structured content
            ItemConflictError: If any item conflicted and ``force`` is False
        """
        parsed = parse_catalog_bom(text, source)

        added: list[CatalogItem] = []
        conflicts: list[str] = []
        with self._lock:
            for item in parsed:
                if item.catalog_id in self._items and not force:
                    conflicts.append(item.catalog_id)
                    continue
                self._items[item.catalog_id] = item
                added.append(item)

        if conflicts:
            raise ItemConflictError(conflicts, added)
        return added

    def get_item(self, symbolic_name: str, version: str | None = None) -> CatalogItem | None:
        """Look up an item by name, optionally pinned to a version.

        Without a version the most recently added item with that name wins.
        """
        with self._lock:
            if version is not None:
                return self._items.get(f"{symbolic_name}:{version}")
            matches = [item for item in self._items.values() if item.symbolic_name == symbolic_name]
        return matches[-1] if matches else None

    def list_items(self) -> list[CatalogItem]:
        with self._lock:
            return list(self._items.values())

    def get_stats(self) -> dict[str, Any]:
        """Counts by item type plus the list of ids."""
        items = self.list_items()
        by_type: dict[str, int] = {}
        for item in items:
            by_type[item.item_type.value] = by_type.get(item.item_type.value, 0) + 1
        return {
            "items": len(items),
            "by_type": by_type,
            "item_ids": [item.catalog_id for item in items],
            "document_name": self.document_name,
        }

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, catalog_id: object) -> bool:
        with self._lock:
            return catalog_id in self._items

    def __repr__(self) -> str:
        return f"BasicCatalog(items={len(self)})"
