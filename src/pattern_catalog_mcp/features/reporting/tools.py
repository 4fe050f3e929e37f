"""MCP tool definitions for catalog statistics.

This module registers MCP tools for:
- catalog_summary: Entry counts per category, language and difficulty
"""
from typing import Any, Dict

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from pattern_catalog_mcp.core.logging import get_logger
from pattern_catalog_mcp.features.catalog.store import get_catalog_store
from pattern_catalog_mcp.features.reporting.summary import render_summary_markdown, summarize_catalog


def catalog_summary_tool(as_markdown: bool = False) -> Dict[str, Any]:
    """
    Summarize the catalog.

    Args:
        as_markdown: Also return the summary rendered as Markdown tables

    Returns:
        Dictionary with total_entries, total_variants, by_category,
        by_language, by_difficulty, by_group and recommended_coverage
    """
    logger = get_logger("tool.catalog_summary")
    snapshot = get_catalog_store().current()
    summary = summarize_catalog(snapshot.catalog, snapshot.taxonomy)
    response = summary.to_dict()
    if as_markdown:
        response["markdown"] = render_summary_markdown(summary)
    logger.info("tool_completed", tool="catalog_summary", total_entries=summary.total_entries)
    return response


def register_reporting_tools(mcp: FastMCP) -> None:
    """Register reporting tools with MCP server.

    Args:
        mcp: FastMCP server instance
    """

    @mcp.tool()
    def catalog_summary(
        as_markdown: bool = Field(default=False, description="Also return the summary as Markdown tables"),
    ) -> Dict[str, Any]:
        """Summarize entry counts per category, language and difficulty."""
        return catalog_summary_tool(as_markdown=as_markdown)
