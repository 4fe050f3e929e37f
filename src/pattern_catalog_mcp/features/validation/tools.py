"""MCP tool definitions for catalog integrity checks.

This module registers MCP tools for:
- validate_catalog: Run the integrity rules over the published catalog
"""
import time
from typing import Any, Dict, Optional

import sentry_sdk
from mcp.server.fastmcp import FastMCP
from pydantic import Field

from pattern_catalog_mcp.core.logging import get_logger
from pattern_catalog_mcp.features.catalog.store import get_catalog_store
from pattern_catalog_mcp.features.validation.validator import validate_catalog
from pattern_catalog_mcp.models.validation import Severity
from pattern_catalog_mcp.utils.formatters import format_load_error, format_validation_report


def validate_catalog_tool(severity: Optional[str] = None) -> Dict[str, Any]:
    """
    Check the catalog for integrity problems.

    Reports unresolved related references, multiple recommended variants per
    language, languages without a recommended variant, declared totals that
    do not match actual entry counts, duplicate titles and more. Violations
    are data: the tool never fails because the catalog is inconsistent.

    Args:
        severity: Only report violations of this severity ('error' or 'warning')

    Returns:
        Dictionary containing error_count, warning_count, violations and the
        load errors from the last refresh, or only "error" when the severity
        value is not recognized
    """
    logger = get_logger("tool.validate_catalog")
    start_time = time.time()
    logger.info("tool_invoked", tool="validate_catalog", severity=severity)

    allowed = [s.value for s in Severity]
    if severity is not None and severity.lower() not in allowed:
        logger.info("validate_rejected", severity=severity)
        return {"error": f"Unknown severity '{severity}'; expected one of: {', '.join(allowed)}"}

    try:
        snapshot = get_catalog_store().current()
        report = validate_catalog(snapshot.catalog, snapshot.taxonomy)
        response = format_validation_report(report)
        response["error"] = None
        if severity is not None:
            wanted = Severity(severity.lower())
            response["violations"] = [v.to_dict() for v in report.violations if v.severity is wanted]
        response["load_errors"] = [format_load_error(e) for e in snapshot.load_errors]

        logger.info(
            "tool_completed",
            tool="validate_catalog",
            execution_time_seconds=round(time.time() - start_time, 3),
            errors=response["error_count"],
            warnings=response["warning_count"],
        )
        return response

    except Exception as e:
        logger.error(
            "tool_failed",
            tool="validate_catalog",
            execution_time_seconds=round(time.time() - start_time, 3),
            error=str(e)[:200],
        )
        sentry_sdk.capture_exception(e)
        raise


def register_validation_tools(mcp: FastMCP) -> None:
    """Register validation tools with MCP server.

    Args:
        mcp: FastMCP server instance
    """

    @mcp.tool()
    def validate_catalog(
        severity: Optional[str] = Field(default=None, description="Only report 'error' or 'warning' violations"),
    ) -> Dict[str, Any]:
        """Check the catalog for integrity problems."""
        return validate_catalog_tool(severity=severity)
