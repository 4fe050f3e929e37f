"""Central tool registration for MCP server."""

from mcp.server.fastmcp import FastMCP

from pattern_catalog_mcp.features.catalog.tools import register_catalog_tools
from pattern_catalog_mcp.features.query.tools import register_query_tools
from pattern_catalog_mcp.features.reporting.tools import register_reporting_tools
from pattern_catalog_mcp.features.validation.tools import register_validation_tools


def register_all_tools(mcp: FastMCP) -> None:
    """Register all MCP tools from all features.

    Tools are organized by feature and registered in order:
    1. Query (query_catalog)
    2. Catalog (get_entry, list_categories, refresh_catalog)
    3. Validation (validate_catalog)
    4. Reporting (catalog_summary)

    Total: 6 tools
    """
    register_query_tools(mcp)
    register_catalog_tools(mcp)
    register_validation_tools(mcp)
    register_reporting_tools(mcp)
