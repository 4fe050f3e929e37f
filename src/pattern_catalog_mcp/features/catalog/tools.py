"""MCP tool definitions for catalog access.

This module registers MCP tools for:
- get_entry: Fetch one entry with all of its variants
- list_categories: Categories with entry counts and examples
- refresh_catalog: Re-read the catalog sources and publish a new snapshot
"""
import time
from typing import Any, Dict, List, Optional

import sentry_sdk
from mcp.server.fastmcp import FastMCP
from pydantic import Field

from pattern_catalog_mcp.core.cache import get_query_cache
from pattern_catalog_mcp.core.logging import get_logger
from pattern_catalog_mcp.features.catalog.store import get_catalog_store, get_source_provider
from pattern_catalog_mcp.utils.formatters import format_entry, format_load_error

CATEGORY_EXAMPLES = 3


def get_entry_tool(entry_id: str, language: Optional[str] = None, include_payload: bool = True) -> Dict[str, Any]:
    """
    Fetch a catalog entry by id.

    Args:
        entry_id: Entry id (e.g. "singleton")
        language: Only return variants for this language
        include_payload: Include variant implementation text

    Returns:
        Dictionary with the entry, or {"found": False} when the id is unknown
    """
    logger = get_logger("tool.get_entry")
    snapshot = get_catalog_store().current()

    entry = snapshot.catalog.get(entry_id)
    if entry is None:
        logger.info("entry_not_found", entry_id=entry_id)
        return {"found": False, "entry_id": entry_id}

    data = format_entry(entry, include_payload=include_payload)
    if language is not None:
        canonical = snapshot.taxonomy.resolve_language(language) or language
        data["variants"] = {k: v for k, v in data["variants"].items() if k == canonical}
    data["found"] = True
    return data


def list_categories_tool() -> List[Dict[str, Any]]:
    """
    List catalog categories with entry counts and example ids.

    Returns:
        One dictionary per category: category, count, examples
    """
    snapshot = get_catalog_store().current()
    index = snapshot.index
    categories: List[Dict[str, Any]] = []
    for category in list(snapshot.taxonomy.categories) + sorted(set(index.by_category) - set(snapshot.taxonomy.categories)):
        ids = index.ids_for_category(category)
        if not ids:
            continue
        categories.append({"category": category, "count": len(ids), "examples": list(ids[:CATEGORY_EXAMPLES])})
    return categories


def refresh_catalog_tool() -> Dict[str, Any]:
    """
    Re-read catalog sources and publish a new snapshot.

    The previous snapshot keeps serving queries until the new one is
    complete; a failed refresh leaves it in place.

    Returns:
        Dictionary containing entry count, load errors and catalog version
    """
    logger = get_logger("tool.refresh_catalog")
    start_time = time.time()
    logger.info("tool_invoked", tool="refresh_catalog")

    try:
        provider = get_source_provider()
        if provider is None:
            raise RuntimeError("No catalog source configured; start the server with --catalog-dir")

        store = get_catalog_store()
        previous_version = store.current().version if store.has_snapshot else None
        snapshot = store.refresh_from(provider)

        cache = get_query_cache()
        if cache is not None and snapshot.version != previous_version:
            cache.clear()

        execution_time = time.time() - start_time
        logger.info(
            "tool_completed",
            tool="refresh_catalog",
            execution_time_seconds=round(execution_time, 3),
            entries=len(snapshot.catalog),
        )
        return {
            "entries": len(snapshot.catalog),
            "load_errors": [format_load_error(e) for e in snapshot.load_errors],
            "catalog_version": snapshot.version,
            "previous_version": previous_version,
            "changed": snapshot.version != previous_version,
            "loaded_at": snapshot.loaded_at,
        }

    except Exception as e:
        logger.error(
            "tool_failed",
            tool="refresh_catalog",
            execution_time_seconds=round(time.time() - start_time, 3),
            error=str(e)[:200],
        )
        sentry_sdk.capture_exception(e)
        raise


def _create_mcp_field_definitions() -> Dict[str, Dict[str, Any]]:
    """Create field definitions for MCP tool registration."""
    return {
        "get_entry": {
            "entry_id": Field(description="Entry id (e.g. 'singleton', 'retry-with-backoff')"),
            "language": Field(default=None, description="Only return variants for this language"),
            "include_payload": Field(default=True, description="Include variant implementation text"),
        },
    }


def register_catalog_tools(mcp: FastMCP) -> None:
    """Register catalog access tools with MCP server.

    Args:
        mcp: FastMCP server instance
    """
    fields = _create_mcp_field_definitions()

    @mcp.tool()
    def get_entry(
        entry_id: str = fields["get_entry"]["entry_id"],
        language: Optional[str] = fields["get_entry"]["language"],
        include_payload: bool = fields["get_entry"]["include_payload"],
    ) -> Dict[str, Any]:
        """Fetch one catalog entry with its variants."""
        return get_entry_tool(entry_id=entry_id, language=language, include_payload=include_payload)

    @mcp.tool()
    def list_categories() -> List[Dict[str, Any]]:
        """List catalog categories with entry counts."""
        return list_categories_tool()

    @mcp.tool()
    def refresh_catalog() -> Dict[str, Any]:
        """Re-read catalog sources and publish a new snapshot."""
        return refresh_catalog_tool()
