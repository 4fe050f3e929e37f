"""Catalog parsing, loading and snapshot publishing."""

from .loader import load_catalog
from .parser import parse_entry, split_front_matter
from .sources import find_source_files, iter_directory_sources
from .store import CatalogSnapshot, CatalogStore

__all__ = [
    "CatalogSnapshot",
    "CatalogStore",
    "find_source_files",
    "iter_directory_sources",
    "load_catalog",
    "parse_entry",
    "split_front_matter",
]
