"""Configuration management for the pattern catalog server."""

import argparse
import os
import sys
from typing import List, Optional

import yaml
from pydantic import ValidationError

from pattern_catalog_mcp.constants import CacheDefaults, LoggingDefaults, ParallelProcessing
from pattern_catalog_mcp.core.cache import init_query_cache
from pattern_catalog_mcp.core.exceptions import ConfigurationError
from pattern_catalog_mcp.core.logging import configure_logging, get_logger
from pattern_catalog_mcp.models.config import CatalogConfig

# Set by apply_config_args / parse_args_and_get_config
CONFIG_PATH: Optional[str] = None
CATALOG_DIR: Optional[str] = None
CATALOG_CONFIG: CatalogConfig = CatalogConfig()
WORKERS: int = ParallelProcessing.DEFAULT_WORKERS

CACHE_ENABLED: bool = True
CACHE_SIZE: int = CacheDefaults.DEFAULT_CACHE_SIZE
CACHE_TTL: int = CacheDefaults.TTL_SECONDS


def validate_config_file(config_path: str) -> CatalogConfig:
    """Validate a catalog.yaml file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Validated CatalogConfig model

    Raises:
        ConfigurationError: If config file is invalid
    """
    if not os.path.exists(config_path):
        raise ConfigurationError(config_path, "File does not exist")

    if not os.path.isfile(config_path):
        raise ConfigurationError(config_path, "Path is not a file")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(config_path, f"YAML parsing failed: {e}") from e
    except OSError as e:
        raise ConfigurationError(config_path, f"Failed to read file: {e}") from e

    if config_data is None:
        raise ConfigurationError(config_path, "Config file is empty")

    if not isinstance(config_data, dict):
        raise ConfigurationError(config_path, "Config must be a YAML dictionary")

    try:
        return CatalogConfig(**config_data)
    except ValidationError as e:
        raise ConfigurationError(config_path, f"Validation failed: {e}") from e


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Attach the flags shared by the server and the CLI subcommands."""
    parser.add_argument(
        "--catalog-dir",
        type=str,
        metavar="PATH",
        default=None,
        help="Directory of catalog documents. Can also be set via CATALOG_DIR env var.",
    )
    parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="Path to catalog.yaml (languages, categories, difficulties, count groups)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        metavar="LEVEL",
        help="Logging level (DEBUG, INFO, WARNING, ERROR). Can also be set via LOG_LEVEL env var. Default: INFO",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        metavar="PATH",
        default=None,
        help="Path to log file (logs to stderr by default). Can also be set via LOG_FILE env var.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        metavar="N",
        default=None,
        help="Parser threads used while loading the catalog (0 = auto). Can also be set via CATALOG_WORKERS env var.",
    )


def _add_cache_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--no-cache", action="store_true", help="Disable query result caching. Can also be set via CACHE_DISABLED=1 env var."
    )
    parser.add_argument(
        "--cache-size",
        type=int,
        metavar="N",
        default=None,
        help=(
            f"Maximum cached query results (default: {CacheDefaults.DEFAULT_CACHE_SIZE}). "
            "Also settable via CACHE_SIZE env var."
        ),
    )
    parser.add_argument(
        "--cache-ttl",
        type=int,
        metavar="SECONDS",
        default=None,
        help=(
            f"Cache TTL in seconds (default: {CacheDefaults.TTL_SECONDS}). "
            "Also settable via CACHE_TTL env var."
        ),
    )


def _create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the server argument parser.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="pattern-catalog-mcp",
        description="Pattern Catalog MCP Server - Retrieval and integrity checks over a catalog of design patterns",
        epilog="""
environment variables:
  CATALOG_DIR             Directory of catalog documents (overridden by --catalog-dir)
  PATTERN_CATALOG_CONFIG  Path to catalog.yaml (overridden by --config flag)
  LOG_LEVEL               Logging level: DEBUG, INFO, WARNING, ERROR (default: INFO)
  LOG_FILE                Path to log file (logs to stderr by default)
  SENTRY_DSN              Enables Sentry error reporting when set
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    add_common_arguments(parser)
    _add_cache_arguments(parser)
    return parser


def _resolve_config(args: argparse.Namespace) -> Optional[str]:
    """Resolve and validate the config file path from args or environment.

    Precedence: --config flag > PATTERN_CATALOG_CONFIG env > None

    Note:
        Calls sys.exit(1) if validation fails.
    """
    global CATALOG_CONFIG

    config_path = getattr(args, "config", None) or os.environ.get("PATTERN_CATALOG_CONFIG") or None
    if config_path is None:
        CATALOG_CONFIG = CatalogConfig()
        return None

    try:
        CATALOG_CONFIG = validate_config_file(config_path)
    except ConfigurationError as e:
        logger = get_logger("config")
        logger.error("config_validation_failed", config_path=config_path, error=str(e))
        sys.exit(1)

    return config_path


def _resolve_catalog_dir(args: argparse.Namespace) -> Optional[str]:
    """Precedence: --catalog-dir flag > CATALOG_DIR env > catalog_dir in config file."""
    return getattr(args, "catalog_dir", None) or os.environ.get("CATALOG_DIR") or CATALOG_CONFIG.catalog_dir


def _configure_logging_from_args(args: argparse.Namespace) -> None:
    """Precedence: --log-level/--log-file flags > env vars > defaults."""
    log_level = getattr(args, "log_level", None) or os.environ.get("LOG_LEVEL", LoggingDefaults.DEFAULT_LEVEL)
    log_file = getattr(args, "log_file", None) or os.environ.get("LOG_FILE")
    configure_logging(log_level=log_level, log_file=log_file)


def _int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        get_logger("config").warning("invalid_int_env", variable=name, using_default=default)
        return default


def _resolve_workers(args: argparse.Namespace) -> int:
    requested = getattr(args, "workers", None)
    if requested is None:
        requested = _int_from_env("CATALOG_WORKERS", 0)
    return ParallelProcessing.get_optimal_workers(requested)


def _configure_cache_from_args(args: argparse.Namespace) -> tuple[bool, int, int]:
    """Configure cache settings from command-line arguments and environment.

    Precedence: command-line flags > env vars > defaults

    Returns:
        Tuple of (cache_enabled, cache_size, cache_ttl).
    """
    cache_logger = get_logger("cache.init")

    cache_enabled = not (getattr(args, "no_cache", False) or os.environ.get("CACHE_DISABLED"))

    cache_size = getattr(args, "cache_size", None)
    if cache_size is None:
        cache_size = _int_from_env("CACHE_SIZE", CacheDefaults.DEFAULT_CACHE_SIZE)

    cache_ttl = getattr(args, "cache_ttl", None)
    if cache_ttl is None:
        cache_ttl = _int_from_env("CACHE_TTL", CacheDefaults.TTL_SECONDS)

    cache_logger.info("cache_config", cache_enabled=cache_enabled, cache_size=cache_size, cache_ttl=cache_ttl)

    return cache_enabled, cache_size, cache_ttl


def apply_config_args(args: argparse.Namespace) -> None:
    """Populate the module-level settings from parsed arguments."""
    global CONFIG_PATH, CATALOG_DIR, WORKERS, CACHE_ENABLED, CACHE_SIZE, CACHE_TTL

    _configure_logging_from_args(args)
    CONFIG_PATH = _resolve_config(args)
    CATALOG_DIR = _resolve_catalog_dir(args)
    WORKERS = _resolve_workers(args)

    CACHE_ENABLED, CACHE_SIZE, CACHE_TTL = _configure_cache_from_args(args)
    if CACHE_ENABLED:
        init_query_cache(max_size=CACHE_SIZE, ttl_seconds=CACHE_TTL)


def parse_args_and_get_config(argv: Optional[List[str]] = None) -> None:
    """Parse server command-line arguments and apply the configuration."""
    parser = _create_argument_parser()
    args = parser.parse_args(argv)
    apply_config_args(args)
