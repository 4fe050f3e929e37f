"""Utilities module for the pattern catalog server.

This module provides:
- Tokenization and reference normalization
- Output formatting for tools and the CLI
- Console output for the CLI
"""

from .console_logger import ConsoleLogger, console
from .formatters import (
    format_entry,
    format_query_result,
    format_ranked_entry,
    format_results_as_text,
    format_validation_report,
    format_violation_line,
)
from .text import normalize_reference, tokenize, unique_tokens

__all__ = [
    # Console
    "ConsoleLogger",
    "console",
    # Formatting
    "format_entry",
    "format_query_result",
    "format_ranked_entry",
    "format_results_as_text",
    "format_validation_report",
    "format_violation_line",
    # Text
    "normalize_reference",
    "tokenize",
    "unique_tokens",
]
