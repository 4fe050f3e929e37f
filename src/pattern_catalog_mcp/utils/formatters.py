"""Output formatting utilities.

Converts engine results into the JSON-friendly dictionaries returned by MCP
tools and into the plain-text tables printed by the CLI.
"""

from typing import Any, Dict, List, Optional

from pattern_catalog_mcp.constants import FormattingDefaults
from pattern_catalog_mcp.models.catalog import Entry, LoadError, Variant
from pattern_catalog_mcp.models.query import MatchReason, QueryResult, RankedEntry
from pattern_catalog_mcp.models.validation import ValidationReport, Violation


def format_variant(variant: Optional[Variant], include_payload: bool = True) -> Optional[Dict[str, Any]]:
    if variant is None:
        return None
    data: Dict[str, Any] = {
        "name": variant.name,
        "language": variant.language,
        "library_ref": variant.library_ref,
        "recommended": variant.recommended,
    }
    if include_payload:
        data["payload"] = variant.payload
    return data


def format_reason(reason: MatchReason) -> Dict[str, Any]:
    return {"token": reason.token, "field": reason.field, "weight": reason.weight}


def format_ranked_entry(item: RankedEntry, include_payload: bool = True) -> Dict[str, Any]:
    """Format a single ranked query result."""
    return {
        "entry_id": item.entry_id,
        "score": item.score,
        "title": item.title,
        "category": item.category,
        "difficulty": item.difficulty,
        "matched_reasons": [format_reason(r) for r in item.matched_reasons],
        "variant": format_variant(item.variant, include_payload),
        "alternatives": [format_variant(v, include_payload=False) for v in item.alternatives],
    }


def format_query_result(result: QueryResult, include_payload: bool = True) -> Dict[str, Any]:
    """Format a query result for tool output."""
    return {
        "need_text": result.need_text,
        "filters": {
            "language": result.filters.language,
            "category": result.filters.category,
            "max_difficulty": result.filters.max_difficulty,
        },
        "tokens": list(result.tokens),
        "error": result.error,
        "results": [format_ranked_entry(item, include_payload) for item in result.results],
        "total_results": len(result.results),
        "catalog_version": result.catalog_version,
        "execution_time_ms": result.execution_time_ms,
    }


def format_entry(entry: Entry, include_payload: bool = True) -> Dict[str, Any]:
    """Format a full catalog entry."""
    return {
        "id": entry.id,
        "kind": entry.kind,
        "title": entry.title,
        "category": entry.category,
        "difficulty": entry.difficulty,
        "purpose": entry.purpose,
        "when_to_use": list(entry.when_to_use),
        "tags": list(entry.tags),
        "updated": entry.updated.isoformat() if entry.updated else None,
        "languages": entry.languages,
        "variants": {
            language: [format_variant(v, include_payload) for v in variants]
            for language, variants in sorted(entry.variants.items())
        },
        "related": [{"id": link.to_id, "relation": link.relation} for link in entry.related],
        "declared_totals": dict(entry.declared_totals),
        "warnings": list(entry.warnings),
    }


def format_load_error(error: LoadError) -> Dict[str, str]:
    return {"source_id": error.source_id, "kind": error.kind, "message": error.message}


def format_validation_report(report: ValidationReport) -> Dict[str, Any]:
    """Format a validation report for tool output."""
    return {
        "catalog_version": report.catalog_version,
        "entries_checked": report.entries_checked,
        "error_count": len(report.errors),
        "warning_count": len(report.warnings),
        "has_errors": report.has_errors,
        "violations": [v.to_dict() for v in report.violations],
    }


def format_violation_line(violation: Violation) -> str:
    return f"[{violation.severity.value.upper():7}] {violation.entry_id}: {violation.rule} - {violation.message}"


def format_results_as_text(result: QueryResult) -> str:
    """Render ranked results as a fixed-width text table."""
    if result.error:
        return f"Invalid query: {result.error}"
    if not result.results:
        return "No matching entries."

    width = FormattingDefaults.TITLE_COLUMN_WIDTH
    lines: List[str] = [f"{'#':>3}  {'SCORE':>5}  {'ID':<24} {'TITLE':<{width}} DIFFICULTY"]
    for position, item in enumerate(result.results, start=1):
        lines.append(f"{position:>3}  {item.score:>5}  {item.entry_id:<24} {item.title[:width]:<{width}} {item.difficulty}")
        if item.matched_reasons:
            reasons = ", ".join(f"{r.token}->{r.field}(+{r.weight})" for r in item.matched_reasons)
            lines.append(f"{'':>12}matched: {reasons}")
        if item.variant is not None:
            marker = " (recommended)" if item.variant.recommended else ""
            lines.append(f"{'':>12}use: {item.variant.name}{marker} [{item.variant.library_ref}]")
    return "\n".join(lines)
