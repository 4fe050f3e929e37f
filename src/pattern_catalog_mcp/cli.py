"""Command-line interface for the pattern catalog.

Usage:
    pattern-catalog validate --catalog-dir ./catalog
    pattern-catalog query "undo redo" --catalog-dir ./catalog --language python
    pattern-catalog summary --catalog-dir ./catalog --markdown
    pattern-catalog serve --catalog-dir ./catalog

Exit status:
    0  success (warnings never change the status)
    1  validation found error-severity violations, or no usable entries loaded
    2  invalid arguments or malformed query
"""

import argparse
import os
import sys
from typing import List, Optional

from pattern_catalog_mcp.core import config
from pattern_catalog_mcp.core.config import add_common_arguments, apply_config_args
from pattern_catalog_mcp.core.logging import get_logger
from pattern_catalog_mcp.features.catalog.loader import load_catalog
from pattern_catalog_mcp.features.catalog.sources import iter_directory_sources
from pattern_catalog_mcp.features.index.builder import build_index
from pattern_catalog_mcp.features.index.storage import load_index_cache
from pattern_catalog_mcp.features.query.engine import query_catalog
from pattern_catalog_mcp.features.reporting.summary import render_summary_markdown, summarize_catalog
from pattern_catalog_mcp.features.validation.validator import validate_catalog
from pattern_catalog_mcp.models.catalog import LoadResult
from pattern_catalog_mcp.models.query import QueryFilters
from pattern_catalog_mcp.utils.console_logger import console
from pattern_catalog_mcp.utils.formatters import (
    format_load_error,
    format_query_result,
    format_results_as_text,
    format_validation_report,
    format_violation_line,
)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2

CLI_DEFAULT_LOG_LEVEL = "WARNING"


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pattern-catalog",
        description="Query and validate a catalog of design patterns and function templates",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser("validate", help="Check catalog integrity")
    add_common_arguments(validate)
    validate.add_argument("--json", action="store_true", help="Print the report as JSON")
    validate.add_argument("--errors-only", action="store_true", help="Hide warning-severity violations")

    query = subparsers.add_parser("query", help="Rank entries for a stated need")
    add_common_arguments(query)
    query.add_argument("need_text", nargs="*", help="What you need, e.g. 'undo redo'")
    query.add_argument("--language", default=None, help="Only entries with a variant in this language")
    query.add_argument("--category", default=None, help="Only entries in this category")
    query.add_argument("--max-difficulty", default=None, help="Highest difficulty to include")
    query.add_argument("--library", default=None, help="Prefer variants that use this library")
    query.add_argument("--limit", type=int, default=None, help="Maximum number of results")
    query.add_argument("--index-cache", default=None, metavar="PATH", help="Reuse or write a JSON index at PATH")
    query.add_argument("--json", action="store_true", help="Print results as JSON")

    summary = subparsers.add_parser("summary", help="Print entry counts")
    add_common_arguments(summary)
    summary.add_argument("--markdown", action="store_true", help="Print Markdown tables")
    summary.add_argument("--json", action="store_true", help="Print the summary as JSON")

    serve = subparsers.add_parser("serve", help="Run the MCP server over stdio")
    add_common_arguments(serve)

    return parser


def _load(show_errors: bool = True) -> Optional[LoadResult]:
    """Load the configured catalog directory, reporting problems on the console."""
    if not config.CATALOG_DIR:
        console.error("No catalog directory given (use --catalog-dir or CATALOG_DIR)")
        return None
    if not os.path.isdir(config.CATALOG_DIR):
        console.error(f"Catalog directory does not exist: {config.CATALOG_DIR}")
        return None

    catalog_config = config.CATALOG_CONFIG
    sources = iter_directory_sources(config.CATALOG_DIR, catalog_config.include, catalog_config.exclude)
    result = load_catalog(sources, taxonomy=catalog_config.to_taxonomy(), max_workers=config.WORKERS)

    if show_errors:
        for error in result.errors:
            console.warning(f"{error.source_id}: {error.kind} - {error.message}")

    if not result.usable:
        console.error(f"No usable entries loaded from {config.CATALOG_DIR}")
        return None
    return result


def _run_validate(args: argparse.Namespace) -> int:
    result = _load(show_errors=not args.json)
    if result is None:
        return EXIT_FAILED

    report = validate_catalog(result.catalog, config.CATALOG_CONFIG.to_taxonomy())
    violations = report.errors if args.errors_only else report.violations

    if args.json:
        data = format_validation_report(report)
        data["violations"] = [v.to_dict() for v in violations]
        data["load_errors"] = [format_load_error(e) for e in result.errors]
        console.json(data)
    else:
        console.header(f"Catalog validation: {len(result.catalog)} entries")
        for violation in violations:
            console.log(format_violation_line(violation))
        console.separator()
        console.table({
            "Errors": len(report.errors),
            "Warnings": len(report.warnings),
            "Load errors": len(result.errors),
        })
        if not report.has_errors:
            console.success("No error-severity violations")

    return EXIT_FAILED if report.has_errors else EXIT_OK


def _run_query(args: argparse.Namespace) -> int:
    result = _load(show_errors=False)
    if result is None:
        return EXIT_FAILED

    taxonomy = config.CATALOG_CONFIG.to_taxonomy()
    if args.index_cache:
        index = load_index_cache(result.catalog, args.index_cache, taxonomy)
    else:
        index = build_index(result.catalog, taxonomy)

    filters = QueryFilters(language=args.language, category=args.category, max_difficulty=args.max_difficulty)
    outcome = query_catalog(
        index,
        result.catalog,
        " ".join(args.need_text),
        filters,
        taxonomy=taxonomy,
        limit=args.limit,
        library=args.library,
    )

    if args.json:
        console.json(format_query_result(outcome, include_payload=False))
    else:
        console.log(format_results_as_text(outcome))

    return EXIT_OK if outcome.ok else EXIT_USAGE


def _run_summary(args: argparse.Namespace) -> int:
    result = _load()
    if result is None:
        return EXIT_FAILED

    summary = summarize_catalog(result.catalog, config.CATALOG_CONFIG.to_taxonomy())
    if args.json:
        console.json(summary.to_dict())
    elif args.markdown:
        console.log(render_summary_markdown(summary))
    else:
        console.header(f"Catalog summary: {summary.total_entries} entries, {summary.total_variants} variants")
        console.log("By category:")
        console.table(summary.by_category)
        console.log("By language:")
        console.table(summary.by_language)
        console.log("By difficulty:")
        console.table(summary.by_difficulty)
    return EXIT_OK


def _run_serve(argv: List[str]) -> int:
    from pattern_catalog_mcp.server.runner import run_mcp_server

    run_mcp_server(argv)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point; returns the process exit status."""
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = _create_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        return _run_serve(argv[1:])

    if args.log_level is None and not os.environ.get("LOG_LEVEL"):
        args.log_level = CLI_DEFAULT_LOG_LEVEL
    apply_config_args(args)

    handlers = {
        "validate": _run_validate,
        "query": _run_query,
        "summary": _run_summary,
    }
    try:
        return handlers[args.command](args)
    except OSError as e:
        get_logger("cli").error("cli_io_failed", command=args.command, error=str(e))
        console.error(str(e))
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
