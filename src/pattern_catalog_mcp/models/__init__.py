"""Data models for the pattern catalog server."""

from pattern_catalog_mcp.models.catalog import (
    Catalog,
    Entry,
    LoadError,
    LoadResult,
    RelatedLink,
    Taxonomy,
    Variant,
)
from pattern_catalog_mcp.models.config import CatalogConfig
from pattern_catalog_mcp.models.index import CatalogIndex, IndexFields
from pattern_catalog_mcp.models.query import (
    MatchReason,
    QueryFilters,
    QueryResult,
    RankedEntry,
)
from pattern_catalog_mcp.models.summary import CatalogSummary
from pattern_catalog_mcp.models.validation import (
    Rules,
    Severity,
    ValidationReport,
    Violation,
)

__all__ = [
    # Catalog models
    "Catalog",
    "Entry",
    "LoadError",
    "LoadResult",
    "RelatedLink",
    "Taxonomy",
    "Variant",
    # Config models
    "CatalogConfig",
    # Index models
    "CatalogIndex",
    "IndexFields",
    # Query models
    "MatchReason",
    "QueryFilters",
    "QueryResult",
    "RankedEntry",
    # Summary models
    "CatalogSummary",
    # Validation models
    "Rules",
    "Severity",
    "ValidationReport",
    "Violation",
]
