"""Configuration models for the pattern catalog."""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from pattern_catalog_mcp.constants import (
    DEFAULT_CATEGORIES,
    DEFAULT_COUNT_GROUPS,
    DEFAULT_DIFFICULTIES,
    DEFAULT_LANGUAGES,
    DEFAULT_STOP_WORDS,
    FilePatterns,
)
from pattern_catalog_mcp.models.catalog import Taxonomy


class CatalogConfig(BaseModel):
    """Contents of a catalog.yaml configuration file.

    Every vocabulary is optional and falls back to the built-in defaults,
    so new languages or categories can be added without code changes.
    """

    catalog_dir: Optional[str] = None
    languages: Dict[str, List[str]] = Field(default_factory=lambda: {k: list(v) for k, v in DEFAULT_LANGUAGES.items()})
    categories: List[str] = Field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    difficulties: List[str] = Field(default_factory=lambda: list(DEFAULT_DIFFICULTIES))
    count_groups: Dict[str, List[str]] = Field(default_factory=lambda: {k: list(v) for k, v in DEFAULT_COUNT_GROUPS.items()})
    stop_words: List[str] = Field(default_factory=lambda: list(DEFAULT_STOP_WORDS))
    include: List[str] = Field(default_factory=lambda: list(FilePatterns.DEFAULT_INCLUDE))
    exclude: List[str] = Field(default_factory=lambda: list(FilePatterns.DEFAULT_EXCLUDE))

    @field_validator("languages")
    @classmethod
    def validate_languages(cls, v: Dict[str, List[str]]) -> Dict[str, List[str]]:
        if not v:
            raise ValueError("languages cannot be empty")
        normalized: Dict[str, List[str]] = {}
        for name, aliases in v.items():
            key = name.strip().lower()
            if not key:
                raise ValueError("language names cannot be blank")
            normalized[key] = sorted({alias.strip().lower() for alias in aliases if alias.strip()} | {key})
        return normalized

    @field_validator("categories", "difficulties")
    @classmethod
    def validate_vocabulary(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("list cannot be empty")
        values = [item.strip().lower() for item in v]
        if len(set(values)) != len(values):
            raise ValueError("list contains duplicates")
        return values

    @model_validator(mode="after")
    def validate_count_groups(self) -> "CatalogConfig":
        for label, categories in self.count_groups.items():
            unknown = [c for c in categories if c not in self.categories]
            if unknown:
                raise ValueError(f"count group '{label}' references unknown categories: {', '.join(unknown)}")
        return self

    def to_taxonomy(self) -> Taxonomy:
        return Taxonomy(
            languages={name: tuple(aliases) for name, aliases in self.languages.items()},
            categories=tuple(self.categories),
            difficulties=tuple(self.difficulties),
            count_groups={label.lower(): tuple(cats) for label, cats in self.count_groups.items()},
            stop_words=frozenset(word.lower() for word in self.stop_words),
        )
