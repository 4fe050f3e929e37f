"""Data models for catalog queries and ranked results."""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from pattern_catalog_mcp.models.catalog import Variant


@dataclass(frozen=True)
class QueryFilters:
    """Hard filters applied before scoring.

    Attributes:
        language: Only entries with at least one variant in this language
        category: Only entries in this category
        max_difficulty: Only entries at or below this difficulty
    """
    language: Optional[str] = None
    category: Optional[str] = None
    max_difficulty: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.language is None and self.category is None and self.max_difficulty is None

    def cache_parts(self) -> List[str]:
        return [
            f"language={self.language or ''}",
            f"category={self.category or ''}",
            f"max_difficulty={self.max_difficulty or ''}",
        ]


@dataclass(frozen=True)
class MatchReason:
    """One query token that contributed to a score.

    Attributes:
        token: The query token
        field: Index field it matched (tags, when_to_use, title_purpose)
        weight: Points contributed
    """
    token: str
    field: str
    weight: int


@dataclass(frozen=True)
class RankedEntry:
    """An entry selected by a query, with the evidence for its rank.

    Attributes:
        entry_id: Catalog id of the entry
        score: Sum of the weights in matched_reasons
        matched_reasons: Tokens that matched, per field
        title: Entry title
        category: Entry category
        difficulty: Entry difficulty
        variant: Selected variant when the query named a language
        alternatives: Other variants in that language
    """
    entry_id: str
    score: int
    matched_reasons: Tuple[MatchReason, ...] = ()
    title: str = ""
    category: str = ""
    difficulty: str = ""
    variant: Optional[Variant] = None
    alternatives: Tuple[Variant, ...] = ()


@dataclass
class QueryResult:
    """Result of a catalog query.

    ``error`` is set only for malformed queries (for example an unknown
    language filter); an empty ``results`` list with no error means nothing
    matched.
    """
    need_text: str
    filters: QueryFilters
    results: List[RankedEntry] = field(default_factory=list)
    tokens: List[str] = field(default_factory=list)
    error: Optional[str] = None
    catalog_version: str = ""
    execution_time_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None
