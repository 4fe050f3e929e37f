"""Shared pytest fixtures for the pattern-catalog-mcp test suite.

This module provides common fixtures used across unit and integration tests:
- Document builders for catalog entries and summary pages
- The three-entry catalog (singleton, observer, state) used by ranking tests
- Paths to the on-disk fixture catalogs
- Global state isolation for the catalog store and query cache
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import pytest
import yaml

from pattern_catalog_mcp.features.catalog.loader import load_catalog
from pattern_catalog_mcp.features.index.builder import build_index
from pattern_catalog_mcp.models.catalog import Catalog, Taxonomy

FIXTURES_DIR = Path(__file__).parent / "fixtures"

DEFAULT_BODY = """## Python

### Basic (Recommended)
**Library:** none

```python
pass
```
"""


def make_document(
    title: str,
    category: str = "behavioral",
    difficulty: str = "intermediate",
    purpose: str = "Placeholder purpose.",
    tags: Sequence[str] = ("placeholder",),
    when_to_use: Sequence[str] = (),
    updated: str = "2025-01-15",
    body: Optional[str] = None,
    omit: Sequence[str] = (),
    **extra: Any,
) -> str:
    """Build the text of a catalog entry document.

    Fields named in ``omit`` are left out of the metadata block.
    """
    metadata: Dict[str, Any] = {
        "title": title,
        "category": category,
        "difficulty": difficulty,
        "purpose": purpose,
        "when_to_use": list(when_to_use),
        "tags": tags if isinstance(tags, str) else list(tags),
        "updated": updated,
    }
    metadata.update(extra)
    for name in omit:
        metadata.pop(name, None)
    front = yaml.safe_dump(metadata, sort_keys=False)
    return f"---\n{front}---\n{DEFAULT_BODY if body is None else body}"


def make_summary_document(title: str = "Catalog Index", body: str = "", **metadata: Any) -> str:
    """Build the text of a ``kind: index`` summary page."""
    data: Dict[str, Any] = {"kind": "index", "title": title}
    data.update(metadata)
    return f"---\n{yaml.safe_dump(data, sort_keys=False)}---\n{body}"


def three_entry_sources() -> List[Tuple[str, str]]:
    """Sources for the singleton / observer / state catalog."""
    return [
        (
            "singleton",
            make_document(
                "Singleton",
                category="creational",
                difficulty="beginner",
                purpose="Ensure a class has only one instance.",
                tags=["singleton", "global-state"],
                when_to_use=["Shared configuration object"],
            ),
        ),
        (
            "observer",
            make_document(
                "Observer",
                category="behavioral",
                difficulty="intermediate",
                purpose="Notify dependents automatically when a subject changes.",
                tags=["event", "pub-sub"],
                when_to_use=["Event handling in user interfaces"],
                related_patterns=["state.md"],
            ),
        ),
        (
            "state",
            make_document(
                "State",
                category="behavioral",
                difficulty="intermediate",
                purpose="Let an object alter its behaviour when its mode changes.",
                tags=["workflow", "fsm"],
                when_to_use=["Document approval workflow"],
            ),
        ),
    ]


# ============================================================================
# Builders
# ============================================================================

@pytest.fixture
def document_factory() -> Callable[..., str]:
    """Provide the entry document builder."""
    return make_document


@pytest.fixture
def summary_factory() -> Callable[..., str]:
    """Provide the summary page builder."""
    return make_summary_document


@pytest.fixture
def catalog_factory() -> Callable[[List[Tuple[str, str]]], Catalog]:
    """Load a list of (id, text) sources and return the catalog."""

    def factory(sources: List[Tuple[str, str]]) -> Catalog:
        return load_catalog(sources, max_workers=1).catalog

    return factory


# ============================================================================
# Catalog Fixtures
# ============================================================================

@pytest.fixture
def taxonomy() -> Taxonomy:
    """Provide the built-in taxonomy."""
    return Taxonomy.default()


@pytest.fixture
def three_sources() -> List[Tuple[str, str]]:
    return three_entry_sources()


@pytest.fixture
def three_catalog(three_sources) -> Catalog:
    """Catalog with singleton, observer and state."""
    return load_catalog(three_sources, max_workers=1).catalog


@pytest.fixture
def three_index(three_catalog):
    return build_index(three_catalog)


# ============================================================================
# Fixture Paths
# ============================================================================

@pytest.fixture
def fixture_catalog_dir() -> str:
    """Directory with a consistent five-document catalog."""
    return str(FIXTURES_DIR / "catalog")


@pytest.fixture
def broken_catalog_dir() -> str:
    """Directory with an unresolved reference, a bad document and a wrong total."""
    return str(FIXTURES_DIR / "broken_catalog")


@pytest.fixture
def config_file() -> str:
    return str(FIXTURES_DIR / "catalog.yaml")


# ============================================================================
# Global State Isolation
# ============================================================================

@pytest.fixture
def clean_store(monkeypatch):
    """Reset the global catalog store and source provider for one test."""
    from pattern_catalog_mcp.features.catalog import store

    monkeypatch.setattr(store, "_catalog_store", None)
    monkeypatch.setattr(store, "_source_provider", None)
    yield store


@pytest.fixture
def query_cache(monkeypatch):
    """Install a fresh global query cache for one test."""
    from pattern_catalog_mcp.core import cache as core_cache
    from pattern_catalog_mcp.core import config

    fresh = core_cache.QueryCache(max_size=10, ttl_seconds=300)
    monkeypatch.setattr(core_cache, "_query_cache", fresh)
    monkeypatch.setattr(config, "CACHE_ENABLED", True)
    yield fresh


@pytest.fixture
def clean_env(monkeypatch):
    """Remove environment variables that change configuration."""
    for name in (
        "CATALOG_DIR",
        "PATTERN_CATALOG_CONFIG",
        "LOG_LEVEL",
        "LOG_FILE",
        "CATALOG_WORKERS",
        "CACHE_DISABLED",
        "CACHE_SIZE",
        "CACHE_TTL",
        "SENTRY_DSN",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def isolated_config(monkeypatch, clean_env):
    """Restore the module-level settings that apply_config_args overwrites."""
    from pattern_catalog_mcp.core import cache as core_cache
    from pattern_catalog_mcp.core import config

    for name in ("CONFIG_PATH", "CATALOG_DIR", "CATALOG_CONFIG", "WORKERS", "CACHE_ENABLED", "CACHE_SIZE", "CACHE_TTL"):
        monkeypatch.setattr(config, name, getattr(config, name))
    monkeypatch.setattr(core_cache, "_query_cache", None)
    return monkeypatch
