"""MCP tool definitions for catalog queries.

This module registers MCP tools for:
- query_catalog: Rank catalog entries for a stated need
"""
import time
from typing import Any, Dict, Optional

import sentry_sdk
from mcp.server.fastmcp import FastMCP
from pydantic import Field

from pattern_catalog_mcp.constants import QueryDefaults
from pattern_catalog_mcp.core.cache import get_query_cache
from pattern_catalog_mcp.core.logging import get_logger
from pattern_catalog_mcp.features.catalog.store import get_catalog_store
from pattern_catalog_mcp.features.query.engine import query_catalog, suggest_related
from pattern_catalog_mcp.models.query import QueryFilters
from pattern_catalog_mcp.utils.formatters import format_query_result


def query_catalog_tool(
    need_text: str,
    language: Optional[str] = None,
    category: Optional[str] = None,
    max_difficulty: Optional[str] = None,
    library: Optional[str] = None,
    max_results: int = QueryDefaults.MAX_RESULTS,
    include_payload: bool = True,
) -> Dict[str, Any]:
    """
    Find the catalog entry and variant that fit a developer's need.

    Scoring is explainable: each query token earns 3 points when it matches
    an entry tag, 2 when it appears in a "when to use" scenario and 1 when it
    appears in the title or purpose. Every result lists the tokens that
    matched. Filters exclude entries before scoring.

    Args:
        need_text: Free-text need (e.g. "undo redo", "retry external API calls").
            Empty text lists every entry passing the filters.
        language: Only entries with a variant in this language; results then
            include the recommended variant for it
        category: Only entries in this category
        max_difficulty: Only entries at or below this difficulty
        library: Prefer variants built on this library when selecting
        max_results: Maximum number of results
        include_payload: Include variant implementation text

    Returns:
        Dictionary containing:
        - results: Ranked entries with score, matched_reasons and variant
        - error: Set only when a filter value is invalid
        - suggestions: Related entries of the top results

    Example usage:
        result = query_catalog(need_text="event handling", language="python")
    """
    logger = get_logger("tool.query_catalog")
    start_time = time.time()

    logger.info(
        "tool_invoked",
        tool="query_catalog",
        need_text=need_text,
        language=language,
        category=category,
        max_difficulty=max_difficulty,
    )

    try:
        snapshot = get_catalog_store().current()
        filters = QueryFilters(language=language, category=category, max_difficulty=max_difficulty)
        cache = get_query_cache()
        cache_parts = filters.cache_parts() + [f"library={library or ''}"]

        result = cache.get(snapshot.version, need_text, cache_parts, max_results) if cache else None
        if result is None:
            result = query_catalog(
                snapshot.index,
                snapshot.catalog,
                need_text,
                filters,
                taxonomy=snapshot.taxonomy,
                limit=max_results,
                library=library,
            )
            if cache and result.ok:
                cache.put(snapshot.version, need_text, cache_parts, result, max_results)

        response = format_query_result(result, include_payload=include_payload)
        response["suggestions"] = suggest_related(
            snapshot.catalog,
            [item.entry_id for item in result.results[:3]],
            QueryDefaults.MAX_SUGGESTIONS,
        )

        logger.info(
            "tool_completed",
            tool="query_catalog",
            execution_time_seconds=round(time.time() - start_time, 3),
            results=len(result.results),
            error=result.error,
        )
        return response

    except Exception as e:
        logger.error(
            "tool_failed",
            tool="query_catalog",
            execution_time_seconds=round(time.time() - start_time, 3),
            error=str(e)[:200],
        )
        sentry_sdk.capture_exception(e)
        raise


def _create_mcp_field_definitions() -> Dict[str, Dict[str, Any]]:
    """Create field definitions for MCP tool registration."""
    return {
        "query_catalog": {
            "need_text": Field(description="What you need (e.g. 'undo/redo', 'call an external API with retries')"),
            "language": Field(default=None, description="Target language filter (e.g. 'python', 'typescript')"),
            "category": Field(default=None, description="Category filter (e.g. 'behavioral', 'function-pattern')"),
            "max_difficulty": Field(default=None, description="Highest difficulty to include ('beginner', 'intermediate', 'advanced')"),
            "library": Field(default=None, description="Prefer variants that use this library"),
            "max_results": Field(default=QueryDefaults.MAX_RESULTS, description="Maximum number of results"),
            "include_payload": Field(default=True, description="Include variant implementation text"),
        },
    }


def register_query_tools(mcp: FastMCP) -> None:
    """Register query tools with MCP server.

    Args:
        mcp: FastMCP server instance
    """
    fields = _create_mcp_field_definitions()

    @mcp.tool()
    def query_catalog(
        need_text: str = fields["query_catalog"]["need_text"],
        language: Optional[str] = fields["query_catalog"]["language"],
        category: Optional[str] = fields["query_catalog"]["category"],
        max_difficulty: Optional[str] = fields["query_catalog"]["max_difficulty"],
        library: Optional[str] = fields["query_catalog"]["library"],
        max_results: int = fields["query_catalog"]["max_results"],
        include_payload: bool = fields["query_catalog"]["include_payload"],
    ) -> Dict[str, Any]:
        """Find the catalog entry and variant that fit a stated need."""
        return query_catalog_tool(
            need_text=need_text,
            language=language,
            category=category,
            max_difficulty=max_difficulty,
            library=library,
            max_results=max_results,
            include_payload=include_payload,
        )
