"""MCP server entry point."""

from functools import partial
from typing import List, Optional

from mcp.server.fastmcp import FastMCP

from pattern_catalog_mcp.core import config
from pattern_catalog_mcp.core.logging import get_logger
from pattern_catalog_mcp.core.sentry import init_sentry
from pattern_catalog_mcp.features.catalog.sources import iter_directory_sources
from pattern_catalog_mcp.features.catalog.store import init_catalog_store
from pattern_catalog_mcp.server.registry import register_all_tools

# Create FastMCP instance
mcp = FastMCP("pattern-catalog")


def load_initial_catalog() -> None:
    """Create the global store and publish the first snapshot.

    Without a catalog directory the store stays empty and the tools report
    that no catalog has been loaded.
    """
    logger = get_logger("server")
    catalog_config = config.CATALOG_CONFIG
    provider = None
    if config.CATALOG_DIR:
        provider = partial(
            iter_directory_sources,
            config.CATALOG_DIR,
            catalog_config.include,
            catalog_config.exclude,
        )

    store = init_catalog_store(catalog_config.to_taxonomy(), config.WORKERS, provider)
    if provider is None:
        logger.warning("catalog_dir_not_configured")
        return

    snapshot = store.refresh_from(provider)
    logger.info(
        "server_catalog_ready",
        catalog_dir=config.CATALOG_DIR,
        entries=len(snapshot.catalog),
        load_errors=len(snapshot.load_errors),
    )


def run_mcp_server(argv: Optional[List[str]] = None) -> None:
    """Run the MCP server.

    This function:
    1. Parses command-line arguments and loads configuration
    2. Initializes Sentry error tracking (if configured)
    3. Loads the catalog and publishes the first snapshot
    4. Registers all MCP tools and starts the stdio transport
    """
    config.parse_args_and_get_config(argv)
    init_sentry()
    load_initial_catalog()
    register_all_tools(mcp)
    mcp.run(transport="stdio")
