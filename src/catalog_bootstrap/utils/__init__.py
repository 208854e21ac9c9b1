"""Utilities: configuration, logging, log filters and resource loading."""
