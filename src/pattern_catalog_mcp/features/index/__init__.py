"""Inverted index construction and persistence."""

from .builder import build_index
from .storage import index_from_dict, index_to_dict, load_index_cache, save_index

__all__ = ["build_index", "index_from_dict", "index_to_dict", "load_index_cache", "save_index"]
