"""Data model for aggregate catalog statistics."""
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class CatalogSummary:
    """Counts shown on the human-facing index pages.

    Attributes:
        total_entries: Non-summary entries in the catalog
        total_variants: Variants across all entries and languages
        by_category: category -> entry count
        by_language: language -> entries offering at least one variant
        by_difficulty: difficulty -> entry count
        by_group: totals label (e.g. "patterns") -> entry count
        recommended_coverage: language -> share of its entries with a recommended variant
    """
    catalog_version: str
    total_entries: int = 0
    total_variants: int = 0
    by_category: Dict[str, int] = field(default_factory=dict)
    by_language: Dict[str, int] = field(default_factory=dict)
    by_difficulty: Dict[str, int] = field(default_factory=dict)
    by_group: Dict[str, int] = field(default_factory=dict)
    recommended_coverage: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "catalog_version": self.catalog_version,
            "total_entries": self.total_entries,
            "total_variants": self.total_variants,
            "by_category": dict(self.by_category),
            "by_language": dict(self.by_language),
            "by_difficulty": dict(self.by_difficulty),
            "by_group": dict(self.by_group),
            "recommended_coverage": dict(self.recommended_coverage),
        }
