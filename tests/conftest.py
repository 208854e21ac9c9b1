"""
Pytest configuration and shared test utilities.

This module provides shared fixtures for all Catalog Bootstrap tests: sample
catalog content in both formats, an in-memory ``mem://`` resource scheme and
a factory for runtime contexts rooted in a temporary base directory.
"""

import pytest

from catalog_bootstrap.runtime import RuntimeContext
from catalog_bootstrap.utils import config as config_module
from catalog_bootstrap.utils.config import ConfigBuilder
from catalog_bootstrap.utils.resources import ResourceLoader

# ===================================================================
# Sample Catalog Content
# ===================================================================

SAMPLE_BOM = """
catalog:
  version: "1.0"
  items:
    - id: web-server
      name: Web Server
      description: Nginx front end
      item:
        type: server
        port: 80
    - id: database
      item_type: entity
      item:
        type: postgres
"""

ADDITIONS_BOM = """
catalog:
  id: load-balancer
  version: "2.0"
  name: Load Balancer
  item_type: policy
"""

CONFLICTING_BOM = """
catalog:
  version: "1.0"
  items:
    - id: web-server
      name: Replacement Web Server
    - id: cache
      name: Cache
"""

LEGACY_XML = """<catalog id="legacy" name="Legacy Catalog">
  <description>Old style catalog</description>
  <template id="three-tier" version="1.0" name="Three Tier App">
    <description>Web, app and database tiers</description>
    <plan>services: [web, app, db]</plan>
  </template>
  <entity type="db" />
</catalog>
"""


class MemoryResources(dict):
    """URI -> text mapping usable as a ResourceLoader scheme handler."""

    def __init__(self):
        super().__init__()
        self.requests: list[str] = []

    def __call__(self, uri: str) -> str:
        self.requests.append(uri)
        if uri not in self:
            raise FileNotFoundError(f"No in-memory resource at {uri}")
        return self[uri]


# ===================================================================
# Pytest Fixtures
# ===================================================================

@pytest.fixture(autouse=True)
def clean_config_cache():
    """Keep the configuration singleton from leaking between tests."""
    config_module.reset_config()
    yield
    config_module.reset_config()


@pytest.fixture
def memory_resources():
    """In-memory resources served under the ``mem://`` scheme."""
    return MemoryResources()


@pytest.fixture
def resource_loader(memory_resources):
    """ResourceLoader with the ``mem://`` scheme registered."""
    loader = ResourceLoader()
    loader.register_scheme("mem", memory_resources)
    return loader


@pytest.fixture
def make_context(tmp_path):
    """Factory for runtime contexts whose base directory is ``tmp_path``.

    Examples:
        context = make_context()
        context = make_context({"catalog": {"url": "mem://remote.bom"}})
    """

    def _make(config: dict | None = None) -> RuntimeContext:
        data = {"runtime": {"base_dir": str(tmp_path)}}
        data.update(config or {})
        return RuntimeContext(ConfigBuilder.from_dict(data))

    return _make


@pytest.fixture
def sample_bom():
    """Structured catalog with two items."""
    return SAMPLE_BOM


@pytest.fixture
def additions_bom():
    """Structured catalog declaring a single item."""
    return ADDITIONS_BOM


@pytest.fixture
def conflicting_bom():
    """Structured catalog sharing ``web-server:1.0`` with ``sample_bom``."""
    return CONFLICTING_BOM


@pytest.fixture
def legacy_xml():
    """Legacy XML catalog document with two items."""
    return LEGACY_XML
