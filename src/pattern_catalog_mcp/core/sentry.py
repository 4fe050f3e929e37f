"""Sentry error tracking integration for the pattern catalog server."""
import os
from typing import Any

import sentry_sdk

from pattern_catalog_mcp.constants import LoggingDefaults
from pattern_catalog_mcp.core.logging import get_logger

# Re-export so feature modules need a single import
from sentry_sdk import capture_exception


def init_sentry(service_name: str = "pattern-catalog-mcp") -> bool:
    """Initialize Sentry with service tagging.

    Args:
        service_name: Unique service identifier (default: 'pattern-catalog-mcp')

    Returns:
        True if Sentry was initialized, False when SENTRY_DSN is not set
    """
    def _tag_event(event: Any, hint: Any) -> Any:
        """Add service tags to every event."""
        event.setdefault("tags", {})
        event["tags"]["service"] = service_name
        event["tags"]["component"] = "catalog-engine"
        return event

    dsn = os.getenv("SENTRY_DSN")
    if not dsn:
        return False

    environment = os.getenv("SENTRY_ENVIRONMENT", "development")
    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        traces_sample_rate=1.0 if environment == "development" else 0.1,
        attach_stacktrace=True,
        max_breadcrumbs=LoggingDefaults.MAX_BREADCRUMBS,
        debug=environment == "development",
        before_send=_tag_event,
    )

    sentry_sdk.set_tag("service", service_name)
    sentry_sdk.set_tag("component", "catalog-engine")

    logger = get_logger("sentry")
    logger.info("sentry_initialized", service=service_name, environment=environment)
    return True


__all__ = ["init_sentry", "capture_exception"]
