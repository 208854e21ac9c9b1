"""Pydantic models for catalog item descriptors.

The initialization core treats these as opaque units: it moves lists of
:class:`CatalogItem` and whole :class:`CatalogDocument` instances between
parsers and the catalog without looking inside them.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_VERSION = "0.0.0-SNAPSHOT"


class CatalogItemType(str, Enum):
    """Kinds of item a catalog can hold."""

    TEMPLATE = "template"
    ENTITY = "entity"
    POLICY = "policy"
    LOCATION = "location"


class CatalogItem(BaseModel):
    """A single catalog item descriptor."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    symbolic_name: str = Field(alias="id", min_length=1, description="Symbolic name of the item")
    version: str = Field(default=DEFAULT_VERSION, description="Item version")
    display_name: str | None = Field(default=None, alias="name", description="Human-readable name")
    description: str | None = Field(default=None, description="What the item provides")
    item_type: CatalogItemType = Field(default=CatalogItemType.ENTITY, description="Item kind")
    plan: Any = Field(default=None, alias="item", description="Opaque item body")
    source: str | None = Field(default=None, description="URI or label the item was read from")

    @field_validator("symbolic_name", "version", mode="before")
    @classmethod
    def _coerce_to_string(cls, value: Any) -> Any:
        # YAML turns `version: 1.0` into a float
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def catalog_id(self) -> str:
        """Identity used for conflict detection: ``symbolic_name:version``."""
        return f"{self.symbolic_name}:{self.version}"


class CatalogDocument(BaseModel):
    """A whole-catalog replacement document produced by the legacy parser."""

    id: str | None = Field(default=None, description="Catalog identifier")
    name: str | None = Field(default=None, description="Catalog display name")
    description: str | None = Field(default=None, description="Catalog description")
    source: str | None = Field(default=None, description="URI or label the document was read from")
    items: list[CatalogItem] = Field(default_factory=list, description="Items in document order")
