"""Console output for the command-line interface.

Structured logs go to stderr through structlog; this module is for the
human-facing report text the CLI prints to stdout.

Usage:
    from pattern_catalog_mcp.utils.console_logger import console

    console.log("Loading catalog...")
    console.error("Catalog directory does not exist")
    console.json({"result": "data"})
"""

import json
import sys
from typing import Any, Dict, Optional

from pattern_catalog_mcp.constants import FormattingDefaults


class ConsoleLogger:
    """Simple console logger for CLI commands."""

    def __init__(self, quiet: bool = False) -> None:
        """Initialize console logger.

        Args:
            quiet: If True, suppress normal log output
        """
        self.quiet = quiet

    def log(self, message: str = "", **kwargs: Any) -> None:
        """Output a normal message; respects quiet mode."""
        if not self.quiet:
            print(message, **kwargs)

    def success(self, message: str, **kwargs: Any) -> None:
        if not self.quiet:
            print(f"✓ {message}", **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Output an error message to stderr, regardless of quiet mode."""
        print(f"ERROR: {message}", file=sys.stderr, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Output a warning message to stderr, regardless of quiet mode."""
        print(f"WARNING: {message}", file=sys.stderr, **kwargs)

    def json(self, data: Any, indent: Optional[int] = 2, **kwargs: Any) -> None:
        """Output data as JSON for programmatic consumption."""
        if not self.quiet:
            print(json.dumps(data, indent=indent, default=str), **kwargs)

    def separator(self, char: str = "=", length: int = FormattingDefaults.SEPARATOR_LENGTH, **kwargs: Any) -> None:
        if not self.quiet:
            print(char * length, **kwargs)

    def header(self, message: str, **kwargs: Any) -> None:
        """Output a header between separator lines."""
        if not self.quiet:
            self.separator()
            print(message, **kwargs)
            self.separator()

    def table(self, rows: Dict[str, Any], **kwargs: Any) -> None:
        """Output aligned key/value rows."""
        if self.quiet or not rows:
            return
        width = max(len(str(key)) for key in rows)
        for key, value in rows.items():
            print(f"  {str(key):<{width}}  {value}", **kwargs)


# Global console logger instance
console = ConsoleLogger()
