"""Core infrastructure for the pattern catalog server."""

from pattern_catalog_mcp.core.cache import (
    QueryCache,
    get_query_cache,
    init_query_cache,
)
from pattern_catalog_mcp.core.config import (
    add_common_arguments,
    apply_config_args,
    parse_args_and_get_config,
    validate_config_file,
)
from pattern_catalog_mcp.core.exceptions import (
    CatalogError,
    ConfigurationError,
    DuplicateVariantNameError,
    InvalidFieldError,
    MalformedDocumentError,
    MissingFieldError,
    ParseError,
    SnapshotUnavailableError,
    StaleIndexError,
    UnreadableSourceError,
)
from pattern_catalog_mcp.core.logging import (
    configure_logging,
    get_logger,
)
from pattern_catalog_mcp.core.sentry import (
    capture_exception,
    init_sentry,
)

__all__ = [
    # Exceptions
    "CatalogError",
    "ConfigurationError",
    "ParseError",
    "MalformedDocumentError",
    "MissingFieldError",
    "InvalidFieldError",
    "DuplicateVariantNameError",
    "StaleIndexError",
    "UnreadableSourceError",
    "SnapshotUnavailableError",
    # Logging
    "configure_logging",
    "get_logger",
    # Config
    "add_common_arguments",
    "apply_config_args",
    "validate_config_file",
    "parse_args_and_get_config",
    # Sentry
    "capture_exception",
    "init_sentry",
    # Cache
    "QueryCache",
    "get_query_cache",
    "init_query_cache",
]
