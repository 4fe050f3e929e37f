"""Catalog loading.

Parses a sequence of ``(id, text)`` sources into a ``Catalog``. One bad
document never aborts the load: it is left out and reported as a
``LoadError``. Parsing runs on a thread pool; results are merged in source
order so duplicate-id precedence does not depend on completion order.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from pattern_catalog_mcp.constants import ParallelProcessing
from pattern_catalog_mcp.core.exceptions import ParseError
from pattern_catalog_mcp.core.logging import get_logger
from pattern_catalog_mcp.features.catalog.parser import parse_entry
from pattern_catalog_mcp.models.catalog import Catalog, Entry, LoadError, LoadResult, Taxonomy

logger = get_logger(__name__)

# Text may be replaced by the error that prevented reading it
Source = Tuple[str, Union[str, ParseError]]
_Outcome = Union[Entry, ParseError]

DUPLICATE_ID = "duplicate-id"


def _parse_source(source: Source, taxonomy: Taxonomy) -> _Outcome:
    """Parse one source, returning the error instead of raising it."""
    source_id, text = source
    if isinstance(text, ParseError):
        return text
    try:
        return parse_entry(text, source_id=source_id, taxonomy=taxonomy)
    except ParseError as e:
        return e


def _parse_all(sources: Sequence[Source], taxonomy: Taxonomy, max_workers: int) -> List[_Outcome]:
    if max_workers <= 1 or len(sources) <= 1:
        return [_parse_source(source, taxonomy) for source in sources]

    # executor.map yields in submission order, which is source order
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(lambda source: _parse_source(source, taxonomy), sources))


def load_catalog(
    sources: Iterable[Source],
    taxonomy: Optional[Taxonomy] = None,
    max_workers: int = ParallelProcessing.DEFAULT_WORKERS,
) -> LoadResult:
    """Load catalog sources into an immutable Catalog.

    Args:
        sources: Sequence of (source id, raw document text or read error)
        taxonomy: Vocabularies used by the parser (defaults to built-ins)
        max_workers: Parser threads; 1 parses sequentially

    Returns:
        LoadResult with the catalog of entries that parsed and the errors
        for the ones that did not (parse failures and duplicate ids)
    """
    start_time = time.time()
    taxonomy = taxonomy or Taxonomy.default()
    source_list = list(sources)

    outcomes = _parse_all(source_list, taxonomy, max_workers)

    entries: Dict[str, Entry] = {}
    first_source: Dict[str, str] = {}
    errors: List[LoadError] = []

    for (source_id, _), outcome in zip(source_list, outcomes):
        if isinstance(outcome, ParseError):
            errors.append(LoadError(source_id=source_id, kind=outcome.kind, message=outcome.message))
            logger.warning("entry_parse_failed", source_id=source_id, kind=outcome.kind, error=outcome.message)
            continue

        if outcome.id in entries:
            message = f"Duplicate id '{outcome.id}' (already defined by source '{first_source[outcome.id]}')"
            errors.append(LoadError(source_id=source_id, kind=DUPLICATE_ID, message=message))
            logger.warning("duplicate_entry_id", source_id=source_id, entry_id=outcome.id, kept=first_source[outcome.id])
            continue

        for warning in outcome.warnings:
            logger.warning("entry_parse_warning", source_id=source_id, warning=warning)

        entries[outcome.id] = outcome
        first_source[outcome.id] = source_id

    catalog = Catalog.from_entries(list(entries.values()))
    execution_time = time.time() - start_time

    logger.info(
        "catalog_loaded",
        sources=len(source_list),
        entries=len(catalog),
        errors=len(errors),
        workers=max_workers,
        catalog_version=catalog.version[:12],
        execution_time_seconds=round(execution_time, 3),
    )

    return LoadResult(catalog=catalog, errors=tuple(errors), sources_seen=len(source_list))
