"""Catalog statistics."""

from .summary import render_summary_markdown, summarize_catalog

__all__ = ["render_summary_markdown", "summarize_catalog"]
