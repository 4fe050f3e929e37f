"""Data models for the pattern catalog.

This module defines:
- Taxonomy: the configurable languages, categories and difficulties
- Variant: one implementation approach for an entry in one language
- Entry: one parsed catalog document
- Catalog: the immutable collection of entries from one load cycle
- LoadError / LoadResult: outcome of loading a set of sources
"""
import hashlib
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, FrozenSet, Iterator, List, Optional, Tuple

from pattern_catalog_mcp.constants import (
    DEFAULT_CATEGORIES,
    DEFAULT_COUNT_GROUPS,
    DEFAULT_DIFFICULTIES,
    DEFAULT_LANGUAGES,
    DEFAULT_STOP_WORDS,
    EntryKinds,
)


@dataclass(frozen=True)
class Taxonomy:
    """Open vocabularies the engine validates against.

    Attributes:
        languages: Canonical language name -> accepted heading spellings
        categories: Known categories
        difficulties: Difficulty levels ordered from easiest to hardest
        count_groups: Totals label -> categories it sums (e.g. "patterns")
        stop_words: Tokens dropped by the tokenizer
    """
    languages: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    categories: Tuple[str, ...] = ()
    difficulties: Tuple[str, ...] = ()
    count_groups: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    stop_words: FrozenSet[str] = frozenset()

    @classmethod
    def default(cls) -> "Taxonomy":
        return cls(
            languages={name: tuple(aliases) for name, aliases in DEFAULT_LANGUAGES.items()},
            categories=tuple(DEFAULT_CATEGORIES),
            difficulties=tuple(DEFAULT_DIFFICULTIES),
            count_groups={label: tuple(cats) for label, cats in DEFAULT_COUNT_GROUPS.items()},
            stop_words=frozenset(DEFAULT_STOP_WORDS),
        )

    def resolve_language(self, name: str) -> Optional[str]:
        """Map a heading spelling to its canonical language name.

        Args:
            name: Heading text such as "C#" or "TypeScript"

        Returns:
            Canonical language name, or None when the name is not supported
        """
        needle = name.strip().lower()
        for canonical, aliases in self.languages.items():
            if needle == canonical or needle in aliases:
                return canonical
        return None

    def is_language(self, name: str) -> bool:
        return name in self.languages

    def difficulty_rank(self, difficulty: str) -> int:
        """Position of a difficulty in the configured order; unknown sorts last."""
        try:
            return self.difficulties.index(difficulty)
        except ValueError:
            return len(self.difficulties)


@dataclass(frozen=True)
class Variant:
    """One named implementation approach for an entry in one language.

    Attributes:
        name: Variant heading (e.g. "Lazy Initialization")
        language: Canonical language name
        library_ref: Package or builtin the variant depends on, or "none"
        recommended: Whether this is the recommended variant for the language
        payload: Opaque implementation text
    """
    name: str
    language: str
    library_ref: str = "none"
    recommended: bool = False
    payload: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.payload.strip()


@dataclass(frozen=True)
class RelatedLink:
    """A weak reference from one entry to another by id."""
    from_id: str
    to_id: str
    relation: str


@dataclass(frozen=True)
class Entry:
    """One parsed catalog document.

    Summary entries (kind "index") only declare totals; they carry no
    variants and take no part in queries or category counts.
    """
    id: str
    title: str
    category: str = ""
    difficulty: str = ""
    purpose: str = ""
    when_to_use: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()
    updated: Optional[date] = None
    variants: Dict[str, Tuple[Variant, ...]] = field(default_factory=dict)
    related: Tuple[RelatedLink, ...] = ()
    kind: str = EntryKinds.ENTRY
    declared_totals: Dict[str, int] = field(default_factory=dict)
    warnings: Tuple[str, ...] = ()
    source_id: str = ""
    digest: str = ""

    @property
    def is_summary(self) -> bool:
        return self.kind == EntryKinds.INDEX

    @property
    def languages(self) -> List[str]:
        return sorted(lang for lang, variants in self.variants.items() if variants)

    def variants_for(self, language: str) -> Tuple[Variant, ...]:
        return self.variants.get(language, ())

    def recommended_variants(self, language: str) -> List[Variant]:
        return [v for v in self.variants_for(language) if v.recommended]

    @property
    def variant_count(self) -> int:
        return sum(len(variants) for variants in self.variants.values())


def compute_catalog_version(entries: List[Entry]) -> str:
    """Hash the (id, digest) pairs of a set of entries, independent of order."""
    hasher = hashlib.sha256()
    for entry in sorted(entries, key=lambda e: e.id):
        hasher.update(entry.id.encode("utf-8"))
        hasher.update(b"\0")
        hasher.update(entry.digest.encode("utf-8"))
        hasher.update(b"\n")
    return hasher.hexdigest()


@dataclass(frozen=True)
class Catalog:
    """The full collection of entries from one load cycle.

    Entries are keyed and iterated by id. A catalog is never mutated;
    a refresh builds a new one.
    """
    entries: Dict[str, Entry] = field(default_factory=dict)
    version: str = ""

    @classmethod
    def from_entries(cls, entries: List[Entry]) -> "Catalog":
        ordered = sorted(entries, key=lambda e: e.id)
        return cls(
            entries={entry.id: entry for entry in ordered},
            version=compute_catalog_version(ordered),
        )

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self.entries

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries.values())

    def get(self, entry_id: str) -> Optional[Entry]:
        return self.entries.get(entry_id)

    @property
    def ids(self) -> List[str]:
        return list(self.entries)

    @property
    def pattern_entries(self) -> List[Entry]:
        """Entries that describe a pattern or function (not summaries)."""
        return [entry for entry in self.entries.values() if not entry.is_summary]

    @property
    def summary_entries(self) -> List[Entry]:
        return [entry for entry in self.entries.values() if entry.is_summary]

    @property
    def related_links(self) -> List[RelatedLink]:
        links: List[RelatedLink] = []
        for entry in self.entries.values():
            links.extend(entry.related)
        return links


@dataclass(frozen=True)
class LoadError:
    """A source that did not make it into the catalog.

    Attributes:
        source_id: Id of the failing source
        kind: Stable error code (e.g. "missing-field", "duplicate-id")
        message: Human-readable description
    """
    source_id: str
    kind: str
    message: str


@dataclass(frozen=True)
class LoadResult:
    """Outcome of loading a sequence of sources."""
    catalog: Catalog
    errors: Tuple[LoadError, ...] = ()
    sources_seen: int = 0

    @property
    def usable(self) -> bool:
        return len(self.catalog.pattern_entries) > 0
