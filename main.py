"""Pattern catalog MCP server entry point.

Runs the MCP server over stdio:

    python main.py --catalog-dir ./catalog

For the validate/query/summary commands use the ``pattern-catalog`` CLI.
"""

from pattern_catalog_mcp.server.runner import run_mcp_server

if __name__ == "__main__":
    run_mcp_server()
