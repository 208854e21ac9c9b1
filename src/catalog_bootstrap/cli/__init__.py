"""Command line interface for Catalog Bootstrap."""
