"""Query and ranking engine."""

from .engine import query_catalog, select_variant, suggest_related

__all__ = ["query_catalog", "select_variant", "suggest_related"]
