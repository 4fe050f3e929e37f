"""Catalog integrity validation.

Checks catalog-wide invariants and returns every problem as a
``Violation``. Nothing here raises or mutates the catalog; callers decide
whether error-severity violations are fatal.

Rules:
- unresolved-reference (error): related_* target id does not exist
- self-reference (warning): an entry lists itself as related
- duplicate-recommended (error): two recommended variants in one language
- no-recommended-variant (warning): variants in a language, none recommended
- missing-variants (error): a non-summary entry has no variants at all
- empty-variant (warning): a variant has no implementation content
- coverage-count (error): a declared total differs from the actual count
- unknown-total-key (warning): a declared total names no category or group
- duplicate-title (warning): same title under different ids in one category
- unknown-category (warning): category outside the configured taxonomy
- unknown-language (warning): parser skipped an unknown language section
"""

from collections import defaultdict
from typing import Callable, Dict, List, Optional

from pattern_catalog_mcp.core.logging import get_logger
from pattern_catalog_mcp.models.catalog import Catalog, Entry, Taxonomy
from pattern_catalog_mcp.models.validation import Rules, Severity, ValidationReport, Violation

logger = get_logger(__name__)

RuleCheck = Callable[[Catalog, Taxonomy], List[Violation]]

ALL_ENTRIES_KEY = "entries"


def _error(entry_id: str, rule: str, message: str) -> Violation:
    return Violation(severity=Severity.ERROR, entry_id=entry_id, rule=rule, message=message)


def _warning(entry_id: str, rule: str, message: str) -> Violation:
    return Violation(severity=Severity.WARNING, entry_id=entry_id, rule=rule, message=message)


def check_references(catalog: Catalog, taxonomy: Taxonomy) -> List[Violation]:
    violations: List[Violation] = []
    for link in catalog.related_links:
        if link.to_id == link.from_id:
            violations.append(_warning(link.from_id, Rules.SELF_REFERENCE, f"Entry lists itself in {link.relation}"))
        elif link.to_id not in catalog:
            violations.append(
                _error(link.from_id, Rules.UNRESOLVED_REFERENCE, f"{link.relation} target '{link.to_id}' does not exist")
            )
    return violations


def check_variants(catalog: Catalog, taxonomy: Taxonomy) -> List[Violation]:
    violations: List[Violation] = []
    for entry in catalog.pattern_entries:
        if not entry.languages:
            violations.append(_error(entry.id, Rules.MISSING_VARIANTS, "Entry has no implementation variants"))
            continue

        for language in entry.languages:
            variants = entry.variants_for(language)
            recommended = [v.name for v in variants if v.recommended]
            if len(recommended) > 1:
                violations.append(
                    _error(
                        entry.id,
                        Rules.DUPLICATE_RECOMMENDED,
                        f"{language} has {len(recommended)} recommended variants: {', '.join(recommended)}",
                    )
                )
            elif not recommended:
                violations.append(
                    _warning(entry.id, Rules.NO_RECOMMENDED_VARIANT, f"{language} has variants but none is recommended")
                )

            for variant in variants:
                if variant.is_empty:
                    violations.append(
                        _warning(entry.id, Rules.EMPTY_VARIANT, f"{language} variant '{variant.name}' has no content")
                    )
    return violations


def count_entries(catalog: Catalog, taxonomy: Taxonomy) -> Dict[str, int]:
    """Actual entry counts keyed by category and by count-group label."""
    counts: Dict[str, int] = defaultdict(int)
    for entry in catalog.pattern_entries:
        counts[entry.category] += 1
    for label, categories in taxonomy.count_groups.items():
        counts[label] = sum(counts.get(category, 0) for category in categories)
    counts[ALL_ENTRIES_KEY] = len(catalog.pattern_entries)
    return dict(counts)


def _resolve_total_key(key: str, taxonomy: Taxonomy) -> Optional[str]:
    """Match a declared totals label to a group or category ("pattern" -> "patterns")."""
    candidates = [key, f"{key}s", key[:-1] if key.endswith("s") else key]
    for candidate in candidates:
        if candidate == ALL_ENTRIES_KEY or candidate in taxonomy.count_groups or candidate in taxonomy.categories:
            return candidate
    return None


def check_coverage_counts(catalog: Catalog, taxonomy: Taxonomy) -> List[Violation]:
    violations: List[Violation] = []
    actual = count_entries(catalog, taxonomy)
    for summary in catalog.summary_entries:
        for key, declared in sorted(summary.declared_totals.items()):
            resolved = _resolve_total_key(key, taxonomy)
            if resolved is None:
                violations.append(
                    _warning(summary.id, Rules.UNKNOWN_TOTAL_KEY, f"Declared total '{key}' matches no category or count group")
                )
                continue
            count = actual.get(resolved, 0)
            if count != declared:
                violations.append(
                    _error(
                        summary.id,
                        Rules.COVERAGE_COUNT,
                        f"Declares {declared} {key} but the catalog has {count}",
                    )
                )
    return violations


def check_duplicate_titles(catalog: Catalog, taxonomy: Taxonomy) -> List[Violation]:
    violations: List[Violation] = []
    seen: Dict[tuple, List[Entry]] = defaultdict(list)
    for entry in catalog.pattern_entries:
        seen[(entry.category, entry.title.strip().casefold())].append(entry)

    for (category, _), entries in sorted(seen.items()):
        if len(entries) < 2:
            continue
        ids = [e.id for e in entries]
        for entry in entries[1:]:
            violations.append(
                _warning(
                    entry.id,
                    Rules.DUPLICATE_TITLE,
                    f"Title '{entry.title}' is shared with {ids[0]} in category '{category}'",
                )
            )
    return violations


def check_taxonomy(catalog: Catalog, taxonomy: Taxonomy) -> List[Violation]:
    violations: List[Violation] = []
    for entry in catalog.pattern_entries:
        if taxonomy.categories and entry.category not in taxonomy.categories:
            violations.append(
                _warning(entry.id, Rules.UNKNOWN_CATEGORY, f"Category '{entry.category}' is not in the configured taxonomy")
            )
        for warning in entry.warnings:
            violations.append(_warning(entry.id, Rules.UNKNOWN_LANGUAGE, warning))
    return violations


RULE_CHECKS: List[RuleCheck] = [
    check_references,
    check_variants,
    check_coverage_counts,
    check_duplicate_titles,
    check_taxonomy,
]


def validate_catalog(catalog: Catalog, taxonomy: Optional[Taxonomy] = None) -> ValidationReport:
    """Run every integrity rule over a catalog.

    Args:
        catalog: Catalog to check
        taxonomy: Vocabularies and count groups to check against

    Returns:
        ValidationReport with violations sorted by entry id, rule, message
    """
    taxonomy = taxonomy or Taxonomy.default()
    violations: List[Violation] = []
    for check in RULE_CHECKS:
        violations.extend(check(catalog, taxonomy))

    violations.sort(key=lambda v: (v.entry_id, v.rule, v.message))
    report = ValidationReport(catalog_version=catalog.version, violations=violations, entries_checked=len(catalog))

    logger.info(
        "catalog_validated",
        entries=len(catalog),
        errors=len(report.errors),
        warnings=len(report.warnings),
    )
    return report
