"""Query and ranking engine.

Scores catalog entries against a free-text need:

    score = 3 * (query tokens matching tags)
          + 2 * (query tokens matching when_to_use phrases)
          + 1 * (query tokens matching title or purpose)

Hard filters (language, category, max difficulty) remove entries before
scoring. Results are ordered by score, then easier difficulty, then id, and
every result carries the tokens that earned its score.
"""

import time
from typing import Dict, List, Optional, Set, Tuple

from pattern_catalog_mcp.constants import ScoringWeights
from pattern_catalog_mcp.core.exceptions import StaleIndexError
from pattern_catalog_mcp.core.logging import get_logger
from pattern_catalog_mcp.models.catalog import Catalog, Entry, Taxonomy, Variant
from pattern_catalog_mcp.models.index import CatalogIndex, IndexFields
from pattern_catalog_mcp.models.query import MatchReason, QueryFilters, QueryResult, RankedEntry
from pattern_catalog_mcp.utils.text import unique_tokens

logger = get_logger(__name__)

FIELD_WEIGHTS: Tuple[Tuple[str, int], ...] = (
    (IndexFields.TAGS, ScoringWeights.TAG),
    (IndexFields.WHEN_TO_USE, ScoringWeights.WHEN_TO_USE),
    (IndexFields.TITLE_PURPOSE, ScoringWeights.TITLE_PURPOSE),
)


def validate_filters(filters: QueryFilters, taxonomy: Taxonomy) -> Optional[str]:
    """Check filter values against the taxonomy.

    Returns:
        An error message for the first invalid filter, or None
    """
    if filters.language is not None and not taxonomy.is_language(filters.language):
        return f"Unsupported language filter '{filters.language}'. Supported: {', '.join(sorted(taxonomy.languages))}"
    if filters.category is not None and filters.category not in taxonomy.categories:
        return f"Unknown category filter '{filters.category}'. Known: {', '.join(taxonomy.categories)}"
    if filters.max_difficulty is not None and filters.max_difficulty not in taxonomy.difficulties:
        return f"Unknown difficulty filter '{filters.max_difficulty}'. Known: {', '.join(taxonomy.difficulties)}"
    return None


def normalize_filters(filters: QueryFilters, taxonomy: Taxonomy) -> QueryFilters:
    """Lowercase filter values and resolve language aliases (e.g. "ts")."""
    language = filters.language
    if language is not None:
        language = taxonomy.resolve_language(language) or language.strip().lower()
    return QueryFilters(
        language=language,
        category=filters.category.strip().lower() if filters.category is not None else None,
        max_difficulty=filters.max_difficulty.strip().lower() if filters.max_difficulty is not None else None,
    )


def _candidate_ids(index: CatalogIndex, catalog: Catalog, filters: QueryFilters, taxonomy: Taxonomy) -> List[str]:
    """Entry ids passing every hard filter, sorted by id."""
    candidates: Set[str] = set(index.entry_ids)
    if filters.language is not None:
        candidates &= set(index.ids_for_language(filters.language))
    if filters.category is not None:
        candidates &= set(index.ids_for_category(filters.category))
    if filters.max_difficulty is not None:
        limit = taxonomy.difficulty_rank(filters.max_difficulty)
        candidates = {
            entry_id for entry_id in candidates
            if taxonomy.difficulty_rank(catalog.entries[entry_id].difficulty) <= limit
        }
    return sorted(candidates)


def _score_candidates(
    index: CatalogIndex, candidates: List[str], tokens: List[str]
) -> Dict[str, List[MatchReason]]:
    """Collect match reasons per candidate using the field postings."""
    allowed = set(candidates)
    reasons: Dict[str, List[MatchReason]] = {}
    for token in tokens:
        for field_name, weight in FIELD_WEIGHTS:
            for entry_id in index.ids_for_field_token(field_name, token):
                if entry_id in allowed:
                    reasons.setdefault(entry_id, []).append(MatchReason(token=token, field=field_name, weight=weight))
    return reasons


def select_variant(entry: Entry, language: str, library: Optional[str] = None) -> Tuple[Optional[Variant], Tuple[Variant, ...]]:
    """Pick the variant to use for a language.

    Preference order: a recommended variant using ``library``, any variant
    using ``library``, the recommended variant, the first variant.

    Args:
        entry: Entry to choose from
        language: Canonical language name
        library: Optional library_ref to prefer

    Returns:
        Tuple of (selected variant or None, the remaining variants in order)
    """
    variants = entry.variants_for(language)
    if not variants:
        return None, ()

    def uses_library(variant: Variant) -> bool:
        return library is not None and variant.library_ref.lower() == library.lower()

    ranked = (
        [v for v in variants if v.recommended and uses_library(v)]
        + [v for v in variants if uses_library(v)]
        + [v for v in variants if v.recommended]
        + list(variants)
    )
    selected = ranked[0]
    return selected, tuple(v for v in variants if v is not selected)


def _ranked_entry(
    entry: Entry, score: int, reasons: List[MatchReason], language: Optional[str], library: Optional[str]
) -> RankedEntry:
    variant: Optional[Variant] = None
    alternatives: Tuple[Variant, ...] = ()
    if language is not None:
        variant, alternatives = select_variant(entry, language, library)
    return RankedEntry(
        entry_id=entry.id,
        score=score,
        matched_reasons=tuple(reasons),
        title=entry.title,
        category=entry.category,
        difficulty=entry.difficulty,
        variant=variant,
        alternatives=alternatives,
    )


def query_catalog(
    index: CatalogIndex,
    catalog: Catalog,
    need_text: str,
    filters: Optional[QueryFilters] = None,
    taxonomy: Optional[Taxonomy] = None,
    limit: Optional[int] = None,
    library: Optional[str] = None,
) -> QueryResult:
    """Rank catalog entries for a developer's stated need.

    Args:
        index: Index built from ``catalog``
        catalog: Catalog to query
        need_text: Free-text need (e.g. "undo redo for an editor")
        filters: Optional language, category and max difficulty filters
        taxonomy: Vocabularies used to validate filters and tokenize
        limit: Maximum number of results (None for all)
        library: Preferred library_ref when selecting variants

    Returns:
        QueryResult; ``error`` is set for malformed filters, and an empty
        ``results`` list means nothing matched

    Raises:
        StaleIndexError: If the index was built from a different catalog
    """
    start_time = time.time()
    taxonomy = taxonomy or Taxonomy.default()
    filters = normalize_filters(filters or QueryFilters(), taxonomy)

    if index.catalog_version != catalog.version:
        raise StaleIndexError(index.catalog_version, catalog.version)

    result = QueryResult(need_text=need_text, filters=filters, catalog_version=catalog.version)

    error = validate_filters(filters, taxonomy)
    if error:
        logger.info("query_rejected", need_text=need_text, error=error)
        result.error = error
        return result

    tokens = unique_tokens([need_text or ""], taxonomy.stop_words)
    result.tokens = tokens
    candidates = _candidate_ids(index, catalog, filters, taxonomy)

    if tokens:
        reasons = _score_candidates(index, candidates, tokens)
        scored = [(entry_id, sum(r.weight for r in matched), matched) for entry_id, matched in reasons.items()]
    else:
        scored = [(entry_id, 0, []) for entry_id in candidates]

    scored.sort(key=lambda item: (-item[1], taxonomy.difficulty_rank(catalog.entries[item[0]].difficulty), item[0]))
    if limit is not None:
        scored = scored[:max(limit, 0)]

    result.results = [
        _ranked_entry(catalog.entries[entry_id], score, matched, filters.language, library)
        for entry_id, score, matched in scored
    ]
    result.execution_time_ms = int((time.time() - start_time) * 1000)

    logger.info(
        "query_completed",
        need_text=need_text,
        tokens=tokens,
        candidates=len(candidates),
        results=len(result.results),
        execution_time_ms=result.execution_time_ms,
    )
    return result


def suggest_related(catalog: Catalog, entry_ids: List[str], max_suggestions: int) -> List[str]:
    """Ids linked from the given entries that are not already among them."""
    found = set(entry_ids)
    suggestions: List[str] = []
    for entry_id in entry_ids:
        entry = catalog.get(entry_id)
        if entry is None:
            continue
        for link in entry.related:
            target = catalog.get(link.to_id)
            if target is None or target.is_summary or link.to_id in found or link.to_id in suggestions:
                continue
            suggestions.append(link.to_id)
    return suggestions[:max_suggestions]
