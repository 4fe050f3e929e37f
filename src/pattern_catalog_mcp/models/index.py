"""Data model for the derived catalog index."""
from dataclasses import dataclass, field
from typing import Dict, Tuple

Postings = Dict[str, Tuple[str, ...]]


class IndexFields:
    """Names of the token fields the ranking engine scores against."""

    TAGS = "tags"
    WHEN_TO_USE = "when_to_use"
    TITLE_PURPOSE = "title_purpose"

    ALL = (TAGS, WHEN_TO_USE, TITLE_PURPOSE)


@dataclass(frozen=True)
class CatalogIndex:
    """Read-only inverted index over one catalog.

    Every postings list is sorted by entry id. ``catalog_version`` names the
    catalog the index was built from so staleness is always detectable.

    Attributes:
        catalog_version: Version hash of the source catalog
        entry_ids: All indexed (non-summary) entry ids, sorted
        by_category: category -> entry ids
        by_tag: tag -> entry ids
        by_language: language -> ids of entries with at least one variant
        by_difficulty: difficulty -> entry ids
        tokens: token -> ids over title, purpose and when_to_use text
        field_tokens: field name -> token -> entry ids
    """
    catalog_version: str
    entry_ids: Tuple[str, ...] = ()
    by_category: Postings = field(default_factory=dict)
    by_tag: Postings = field(default_factory=dict)
    by_language: Postings = field(default_factory=dict)
    by_difficulty: Postings = field(default_factory=dict)
    tokens: Postings = field(default_factory=dict)
    field_tokens: Dict[str, Postings] = field(default_factory=dict)

    def ids_for_field_token(self, field_name: str, token: str) -> Tuple[str, ...]:
        return self.field_tokens.get(field_name, {}).get(token, ())

    def ids_for_language(self, language: str) -> Tuple[str, ...]:
        return self.by_language.get(language, ())

    def ids_for_category(self, category: str) -> Tuple[str, ...]:
        return self.by_category.get(category, ())
