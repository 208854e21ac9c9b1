"""Catalog item models, content parsers and the in-memory catalog."""

from .catalog import BasicCatalog
from .models import DEFAULT_VERSION, CatalogDocument, CatalogItem, CatalogItemType
from .parsers import parse_catalog_bom, parse_legacy_document

__all__ = [
    "BasicCatalog",
    "CatalogItem",
    "CatalogItemType",
    "CatalogDocument",
    "DEFAULT_VERSION",
    "parse_catalog_bom",
    "parse_legacy_document",
]
