"""Aggregate catalog statistics and their Markdown rendering."""

from collections import Counter
from typing import Dict, List, Optional

from pattern_catalog_mcp.models.catalog import Catalog, Taxonomy
from pattern_catalog_mcp.models.summary import CatalogSummary


def _ordered_counts(counter: Counter, order: List[str]) -> Dict[str, int]:
    """Known keys in taxonomy order first, then any others alphabetically."""
    result = {key: counter[key] for key in order if counter.get(key)}
    for key in sorted(counter):
        if key not in result and counter[key]:
            result[key] = counter[key]
    return result


def summarize_catalog(catalog: Catalog, taxonomy: Optional[Taxonomy] = None) -> CatalogSummary:
    """Compute the counts shown on the catalog's index pages.

    Args:
        catalog: Catalog to summarize
        taxonomy: Supplies display order and count groups

    Returns:
        CatalogSummary over the non-summary entries
    """
    taxonomy = taxonomy or Taxonomy.default()
    entries = catalog.pattern_entries

    by_category: Counter = Counter(entry.category for entry in entries)
    by_difficulty: Counter = Counter(entry.difficulty for entry in entries)
    by_language: Counter = Counter()
    recommended: Counter = Counter()
    total_variants = 0

    for entry in entries:
        total_variants += entry.variant_count
        for language in entry.languages:
            by_language[language] += 1
            if entry.recommended_variants(language):
                recommended[language] += 1

    by_group = {
        label: sum(by_category.get(category, 0) for category in categories)
        for label, categories in taxonomy.count_groups.items()
    }

    language_counts = _ordered_counts(by_language, sorted(taxonomy.languages))
    return CatalogSummary(
        catalog_version=catalog.version,
        total_entries=len(entries),
        total_variants=total_variants,
        by_category=_ordered_counts(by_category, list(taxonomy.categories)),
        by_language=language_counts,
        by_difficulty=_ordered_counts(by_difficulty, list(taxonomy.difficulties)),
        by_group=by_group,
        recommended_coverage={
            language: round(recommended[language] / count, 3) for language, count in language_counts.items()
        },
    )


def _table(header: str, counts: Dict[str, int]) -> List[str]:
    lines = [f"| {header} | Entries |", "|---|---|"]
    lines.extend(f"| {key} | {value} |" for key, value in counts.items())
    return lines


def render_summary_markdown(summary: CatalogSummary) -> str:
    """Render a summary as the Markdown tables used on index pages."""
    lines: List[str] = ["# Catalog Summary", ""]
    for label, count in summary.by_group.items():
        lines.append(f"**Total {label.title()}:** {count}")
    lines.append(f"**Total Entries:** {summary.total_entries}")
    lines.append(f"**Variants:** {summary.total_variants}")
    lines.append("")
    lines.extend(_table("Category", summary.by_category))
    lines.append("")
    lines.extend(_table("Language", summary.by_language))
    lines.append("")
    lines.extend(_table("Difficulty", summary.by_difficulty))
    lines.append("")
    return "\n".join(lines)
