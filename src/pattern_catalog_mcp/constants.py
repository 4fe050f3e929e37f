"""Shared constants across the pattern-catalog-mcp codebase.

This module centralizes magic numbers and default taxonomy values
so hosts can override them through configuration.
"""
import os
from typing import Dict, List


class ParallelProcessing:
    """Parallel processing configuration."""

    DEFAULT_WORKERS = 4
    MAX_WORKERS = 16

    @staticmethod
    def get_optimal_workers(max_threads: int = 0) -> int:
        """Calculate optimal worker count based on CPU cores.

        Args:
            max_threads: Maximum threads to use (0 = auto-detect)

        Returns:
            Optimal number of worker threads (1 to MAX_WORKERS)
        """
        if max_threads > 0:
            return min(max_threads, ParallelProcessing.MAX_WORKERS)

        cpu_count = os.cpu_count() or 4
        # Reserve 1 core for system, cap at MAX_WORKERS
        return max(1, min(cpu_count - 1, ParallelProcessing.MAX_WORKERS))


class CacheDefaults:
    """Query cache configuration defaults."""

    TTL_SECONDS = 300  # 5 minutes
    DEFAULT_CACHE_SIZE = 100  # Number of cached query results
    CACHE_KEY_LENGTH = 16  # Length of truncated SHA256 hash for cache keys


class ScoringWeights:
    """Per-field weights used by the ranking engine."""

    TAG = 3
    WHEN_TO_USE = 2
    TITLE_PURPOSE = 1


class QueryDefaults:
    """Defaults for catalog queries."""

    MAX_RESULTS = 10
    MAX_SUGGESTIONS = 5


class EntryFields:
    """Front-matter field names."""

    ID = "id"
    KIND = "kind"
    TITLE = "title"
    CATEGORY = "category"
    DIFFICULTY = "difficulty"
    PURPOSE = "purpose"
    WHEN_TO_USE = "when_to_use"
    TAGS = "tags"
    UPDATED = "updated"
    TOTALS = "totals"
    RELATED_PATTERNS = "related_patterns"
    RELATED_FUNCTIONS = "related_functions"

    REQUIRED = [TITLE, CATEGORY, DIFFICULTY, PURPOSE, TAGS, UPDATED]
    RELATIONS = [RELATED_PATTERNS, RELATED_FUNCTIONS]


class EntryKinds:
    """Document kinds."""

    ENTRY = "entry"
    INDEX = "index"  # summary page declaring totals


class FilePatterns:
    """Catalog source file patterns."""

    DEFAULT_INCLUDE = ["**/*.md"]

    DEFAULT_EXCLUDE = [
        "**/.git/**",
        "**/node_modules/**",
        "**/templates/**",
    ]


class LoggingDefaults:
    """Logging configuration defaults."""

    DEFAULT_LEVEL = "INFO"
    MAX_BREADCRUMBS = 50  # Maximum Sentry breadcrumbs to keep


class FormattingDefaults:
    """Console formatting defaults."""

    SEPARATOR_LENGTH = 70
    TITLE_COLUMN_WIDTH = 40


# Default supported languages mapped to the heading spellings that name them
DEFAULT_LANGUAGES: Dict[str, List[str]] = {
    "python": ["python", "py"],
    "typescript": ["typescript", "ts"],
    "javascript": ["javascript", "js", "node.js", "nodejs"],
    "java": ["java"],
    "kotlin": ["kotlin"],
    "go": ["go", "golang"],
    "rust": ["rust"],
    "c": ["c"],
    "cpp": ["c++", "cpp"],
    "csharp": ["c#", "csharp", ".net"],
    "ruby": ["ruby"],
    "php": ["php"],
    "swift": ["swift"],
    "dart": ["dart", "flutter"],
}

DEFAULT_CATEGORIES: List[str] = [
    "creational",
    "structural",
    "behavioral",
    "function-pattern",
    "process",
]

# Ordered from easiest to hardest; the position is the tie-break rank
DEFAULT_DIFFICULTIES: List[str] = ["beginner", "intermediate", "advanced"]

DEFAULT_COUNT_GROUPS: Dict[str, List[str]] = {
    "patterns": ["creational", "structural", "behavioral"],
    "functions": ["function-pattern"],
    "processes": ["process"],
}

DEFAULT_STOP_WORDS: List[str] = [
    "a", "an", "and", "are", "as", "at", "be", "by", "for", "from", "how",
    "i", "in", "is", "it", "me", "my", "need", "of", "on", "or", "that", "the",
    "this", "to", "want", "we", "with",
]
