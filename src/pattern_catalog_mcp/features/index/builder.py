"""Inverted index construction.

The index is derived state: it is rebuilt wholesale from a catalog and
never edited in place. Postings lists are sorted by entry id, so the same
catalog always yields an identical index.
"""

import time
from collections import defaultdict
from typing import AbstractSet, Dict, Iterable, List, Optional, Set

from pattern_catalog_mcp.core.logging import get_logger
from pattern_catalog_mcp.models.catalog import Catalog, Entry, Taxonomy
from pattern_catalog_mcp.models.index import CatalogIndex, IndexFields, Postings
from pattern_catalog_mcp.utils.text import tokenize

logger = get_logger(__name__)


def tag_tokens(tags: Iterable[str], stop_words: AbstractSet[str] = frozenset()) -> Set[str]:
    """Tokens a tag set answers to: each whole tag plus its parts."""
    tokens: Set[str] = set()
    for tag in tags:
        tokens.add(tag.casefold())
        tokens.update(tokenize(tag, stop_words))
    return tokens


def entry_field_tokens(entry: Entry, stop_words: AbstractSet[str] = frozenset()) -> Dict[str, Set[str]]:
    """Distinct tokens per scored field of an entry."""
    when_tokens: Set[str] = set()
    for phrase in entry.when_to_use:
        when_tokens.update(tokenize(phrase, stop_words))
    return {
        IndexFields.TAGS: tag_tokens(entry.tags, stop_words),
        IndexFields.WHEN_TO_USE: when_tokens,
        IndexFields.TITLE_PURPOSE: set(tokenize(entry.title, stop_words)) | set(tokenize(entry.purpose, stop_words)),
    }


def _freeze(postings: Dict[str, Set[str]]) -> Postings:
    return {key: tuple(sorted(ids)) for key, ids in sorted(postings.items())}


def build_index(catalog: Catalog, taxonomy: Optional[Taxonomy] = None) -> CatalogIndex:
    """Build the inverted index for a catalog.

    Summary entries are not indexed.

    Args:
        catalog: Catalog to index
        taxonomy: Supplies stop words for tokenization

    Returns:
        CatalogIndex stamped with the catalog version
    """
    start_time = time.time()
    stop_words = (taxonomy or Taxonomy.default()).stop_words

    by_category: Dict[str, Set[str]] = defaultdict(set)
    by_tag: Dict[str, Set[str]] = defaultdict(set)
    by_language: Dict[str, Set[str]] = defaultdict(set)
    by_difficulty: Dict[str, Set[str]] = defaultdict(set)
    tokens: Dict[str, Set[str]] = defaultdict(set)
    field_tokens: Dict[str, Dict[str, Set[str]]] = {name: defaultdict(set) for name in IndexFields.ALL}

    entry_ids: List[str] = []
    for entry in catalog.pattern_entries:
        entry_ids.append(entry.id)
        by_category[entry.category].add(entry.id)
        by_difficulty[entry.difficulty].add(entry.id)
        for tag in entry.tags:
            by_tag[tag].add(entry.id)
        for language in entry.languages:
            by_language[language].add(entry.id)

        per_field = entry_field_tokens(entry, stop_words)
        for field_name, field_set in per_field.items():
            for token in field_set:
                field_tokens[field_name][token].add(entry.id)
        for token in per_field[IndexFields.WHEN_TO_USE] | per_field[IndexFields.TITLE_PURPOSE]:
            tokens[token].add(entry.id)

    index = CatalogIndex(
        catalog_version=catalog.version,
        entry_ids=tuple(sorted(entry_ids)),
        by_category=_freeze(by_category),
        by_tag=_freeze(by_tag),
        by_language=_freeze(by_language),
        by_difficulty=_freeze(by_difficulty),
        tokens=_freeze(tokens),
        field_tokens={name: _freeze(postings) for name, postings in field_tokens.items()},
    )

    logger.debug(
        "index_built",
        entries=len(index.entry_ids),
        tokens=len(index.tokens),
        tags=len(index.by_tag),
        catalog_version=catalog.version[:12],
        execution_time_seconds=round(time.time() - start_time, 3),
    )
    return index
