"""Published catalog snapshots.

A snapshot bundles one catalog with the index built from it. Refreshing
builds a complete new snapshot off to the side and then replaces the
published reference in one assignment, so concurrent readers always see
either the old snapshot or the new one.
"""

import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Tuple

from pattern_catalog_mcp.constants import ParallelProcessing
from pattern_catalog_mcp.core.exceptions import SnapshotUnavailableError
from pattern_catalog_mcp.core.logging import get_logger
from pattern_catalog_mcp.features.catalog.loader import Source, load_catalog
from pattern_catalog_mcp.features.index.builder import build_index
from pattern_catalog_mcp.models.catalog import Catalog, LoadError, Taxonomy
from pattern_catalog_mcp.models.index import CatalogIndex

logger = get_logger(__name__)

SourceProvider = Callable[[], Iterable[Source]]


@dataclass(frozen=True)
class CatalogSnapshot:
    """An immutable (catalog, index) pair plus how it was loaded."""
    catalog: Catalog
    index: CatalogIndex
    taxonomy: Taxonomy
    load_errors: Tuple[LoadError, ...] = ()
    loaded_at: str = ""

    @property
    def version(self) -> str:
        return self.catalog.version


class CatalogStore:
    """Holds the currently published snapshot.

    Readers call ``current()`` without locking. Only refreshes take the
    lock, which serializes concurrent rebuilds.
    """

    def __init__(self, taxonomy: Optional[Taxonomy] = None, max_workers: int = ParallelProcessing.DEFAULT_WORKERS) -> None:
        self.taxonomy = taxonomy or Taxonomy.default()
        self.max_workers = max_workers
        self._snapshot: Optional[CatalogSnapshot] = None
        self._refresh_lock = threading.Lock()

    def current(self) -> CatalogSnapshot:
        """Return the published snapshot.

        Raises:
            SnapshotUnavailableError: If nothing has been loaded yet
        """
        snapshot = self._snapshot
        if snapshot is None:
            raise SnapshotUnavailableError("No catalog has been loaded")
        return snapshot

    @property
    def has_snapshot(self) -> bool:
        return self._snapshot is not None

    def build_snapshot(self, sources: Iterable[Source]) -> CatalogSnapshot:
        """Load sources and index them without publishing the result."""
        result = load_catalog(sources, taxonomy=self.taxonomy, max_workers=self.max_workers)
        index = build_index(result.catalog, self.taxonomy)
        return CatalogSnapshot(
            catalog=result.catalog,
            index=index,
            taxonomy=self.taxonomy,
            load_errors=result.errors,
            loaded_at=datetime.now(timezone.utc).isoformat(),
        )

    def publish(self, snapshot: CatalogSnapshot) -> None:
        self._snapshot = snapshot

    def refresh(self, sources: Iterable[Source]) -> CatalogSnapshot:
        """Rebuild from sources and publish the new snapshot.

        If loading raises, the previously published snapshot stays in place
        and the exception propagates.
        """
        start_time = time.time()
        with self._refresh_lock:
            snapshot = self.build_snapshot(sources)
            previous = self._snapshot
            self.publish(snapshot)

        logger.info(
            "catalog_snapshot_published",
            entries=len(snapshot.catalog),
            load_errors=len(snapshot.load_errors),
            catalog_version=snapshot.version[:12],
            previous_version=previous.version[:12] if previous else None,
            execution_time_seconds=round(time.time() - start_time, 3),
        )
        return snapshot

    def refresh_from(self, provider: SourceProvider) -> CatalogSnapshot:
        """Refresh using a zero-argument callable that returns sources."""
        return self.refresh(provider())


# Global store used by the MCP tools (initialized by the server runner)
_catalog_store: Optional[CatalogStore] = None
_source_provider: Optional[SourceProvider] = None


def init_catalog_store(
    taxonomy: Taxonomy, max_workers: int, provider: Optional[SourceProvider] = None
) -> CatalogStore:
    """Create the global store and remember how to re-read its sources."""
    global _catalog_store, _source_provider
    _catalog_store = CatalogStore(taxonomy=taxonomy, max_workers=max_workers)
    _source_provider = provider
    return _catalog_store


def get_catalog_store() -> CatalogStore:
    """Return the global store.

    Raises:
        SnapshotUnavailableError: If the store has not been initialized
    """
    if _catalog_store is None:
        raise SnapshotUnavailableError("Catalog store has not been initialized")
    return _catalog_store


def get_source_provider() -> Optional[SourceProvider]:
    return _source_provider
