"""Catalog integrity validation."""

from .validator import count_entries, validate_catalog

__all__ = ["count_entries", "validate_catalog"]
