"""Catalog Bootstrap.

Initialization of a runtime's item catalog: choosing where the initial
contents come from, loading them in the structured (YAML) or legacy (XML)
format, layering additions on top and notifying population callbacks.

This package contains:
- Error taxonomy
- Configuration and logging utilities
- Catalog item models, parsers and the in-memory catalog
- The runtime context that owns the shared catalog reference
- The initialization orchestrator
"""

# Version information
__version__ = "0.3.1"

__all__ = ["__version__"]

# Imports are kept on-demand to avoid circular dependencies
# Use specific imports like: from catalog_bootstrap.initialization import CatalogInitialization
