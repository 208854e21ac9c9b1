"""Catalog content parsers.

Two formats are understood:

Structured (YAML, ``catalog.bom``)::

    catalog:
      version: "1.0"            # default for items below
      item_type: entity         # default for items below
      items:
        - id: web-server
          name: Web Server
          item:
            type: server
        - id: db
          version: "2.1"

A section with an ``id`` and no ``items`` is a single item.

Legacy (XML, ``catalog.xml``)::

    <catalog id="default" name="Default catalog">
      <description>Bundled items</description>
      <template id="web-app" version="1.0" name="Web App">
        <description>Three-tier web app</description>
        <plan>services: [...]</plan>
      </template>
      <entity type="db" />
    </catalog>
"""

from typing import Any

import yaml
from lxml import etree
from pydantic import ValidationError

from catalog_bootstrap.base.errors import CatalogParseError
from catalog_bootstrap.utils.logger import get_logger

from .models import CatalogDocument, CatalogItem, CatalogItemType

logger = get_logger("parsers")

CATALOG_KEY = "catalog"
_SECTION_DEFAULT_KEYS = ("version", "item_type", "description")
_LEGACY_ITEM_TAGS = {item_type.value: item_type for item_type in CatalogItemType}


def parse_catalog_bom(text: str, source: str | None = None) -> list[CatalogItem]:
    """Parse structured (YAML) catalog content into item descriptors.

    Args:
        text: Raw YAML text
        source: URI or label recorded on each item and in error messages

    Returns:
        Items in document order

    Raises:
        CatalogParseError: If the text is not YAML or lacks a ``catalog`` mapping
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise CatalogParseError(f"Invalid YAML catalog content: {e}", source) from e

    if not isinstance(data, dict) or CATALOG_KEY not in data:
        raise CatalogParseError(f"Catalog content must be a mapping with a '{CATALOG_KEY}' key", source)

    section = data[CATALOG_KEY]
    if not isinstance(section, dict):
        raise CatalogParseError(f"'{CATALOG_KEY}' must be a mapping", source)

    defaults = {key: section[key] for key in _SECTION_DEFAULT_KEYS if key in section}

    if "items" in section:
        entries = section["items"] or []
        if not isinstance(entries, list):
            raise CatalogParseError("'items' must be a list", source)
    elif "id" in section:
        entries = [section]
    else:
        raise CatalogParseError(f"'{CATALOG_KEY}' must define 'items' or a single item 'id'", source)

    items = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise CatalogParseError(f"Catalog item #{index} must be a mapping", source)
        fields = {**defaults, **{k: v for k, v in entry.items() if k != "items"}}
        items.append(_build_item(fields, source, f"#{index}"))

    return items


def parse_legacy_document(text: str, source_label: str | None = None) -> CatalogDocument:
    """Parse legacy (XML) catalog content into a replacement document.

    Entity resolution and network access are disabled in the parser.

    Raises:
        CatalogParseError: If the text is not XML or the root is not ``<catalog>``
    """
    parser = etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)
    try:
        root = etree.fromstring(text.encode("utf-8"), parser)
    except etree.XMLSyntaxError as e:
        raise CatalogParseError(f"Invalid XML catalog content: {e}", source_label) from e

    if root.tag != CATALOG_KEY:
        raise CatalogParseError(f"Legacy catalog root must be <{CATALOG_KEY}>, found <{root.tag}>", source_label)

    items = []
    for element in root:
        if not isinstance(element.tag, str):
            continue
        if element.tag == "description":
            continue
        item_type = _LEGACY_ITEM_TAGS.get(element.tag)
        if item_type is None:
            logger.debug(f"Ignoring unsupported legacy catalog element <{element.tag}> in {source_label}")
            continue

        fields: dict[str, Any] = {
            "id": element.get("id") or element.get("type"),
            "name": element.get("name"),
            "item_type": item_type,
            "description": _child_text(element, "description"),
            "item": _child_text(element, "plan"),
        }
        if element.get("version"):
            fields["version"] = element.get("version")
        items.append(_build_item(fields, source_label, f"<{element.tag}> #{len(items)}"))

    return CatalogDocument(
        id=root.get("id"),
        name=root.get("name"),
        description=_child_text(root, "description"),
        source=source_label,
        items=items,
    )


def _build_item(fields: dict[str, Any], source: str | None, where: str) -> CatalogItem:
    try:
        return CatalogItem.model_validate({**fields, "source": source})
    except ValidationError as e:
        raise CatalogParseError(f"Invalid catalog item {where}: {e}", source) from e


def _child_text(element, tag: str) -> str | None:
    child = element.find(tag)
    if child is None or child.text is None:
        return None
    return child.text.strip()
