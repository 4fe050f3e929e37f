"""Data models for catalog integrity validation."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List


class Severity(Enum):
    """Violation severity."""
    ERROR = "error"
    WARNING = "warning"


class Rules:
    """Stable rule identifiers reported in violations."""

    UNRESOLVED_REFERENCE = "unresolved-reference"
    SELF_REFERENCE = "self-reference"
    DUPLICATE_RECOMMENDED = "duplicate-recommended"
    NO_RECOMMENDED_VARIANT = "no-recommended-variant"
    COVERAGE_COUNT = "coverage-count"
    UNKNOWN_TOTAL_KEY = "unknown-total-key"
    DUPLICATE_TITLE = "duplicate-title"
    MISSING_VARIANTS = "missing-variants"
    EMPTY_VARIANT = "empty-variant"
    UNKNOWN_CATEGORY = "unknown-category"
    UNKNOWN_LANGUAGE = "unknown-language"


@dataclass(frozen=True)
class Violation:
    """A single integrity rule failure.

    Attributes:
        severity: error or warning
        entry_id: Entry the violation is attributed to
        rule: Rule identifier (see Rules)
        message: Human-readable explanation
    """
    severity: Severity
    entry_id: str
    rule: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "severity": self.severity.value,
            "entry_id": self.entry_id,
            "rule": self.rule,
            "message": self.message,
        }


@dataclass
class ValidationReport:
    """All violations found in one catalog, ordered by entry id then rule."""
    catalog_version: str
    violations: List[Violation] = field(default_factory=list)
    entries_checked: int = 0

    @property
    def errors(self) -> List[Violation]:
        return [v for v in self.violations if v.severity is Severity.ERROR]

    @property
    def warnings(self) -> List[Violation]:
        return [v for v in self.violations if v.severity is Severity.WARNING]

    @property
    def has_errors(self) -> bool:
        return any(v.severity is Severity.ERROR for v in self.violations)

    def by_rule(self, rule: str) -> List[Violation]:
        return [v for v in self.violations if v.rule == rule]
