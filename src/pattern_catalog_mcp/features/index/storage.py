"""Optional JSON persistence for built indexes.

A stored index is only a cache: it is reused when its catalog version
matches the catalog being served and rebuilt otherwise.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pattern_catalog_mcp.core.logging import get_logger
from pattern_catalog_mcp.features.index.builder import build_index
from pattern_catalog_mcp.models.catalog import Catalog, Taxonomy
from pattern_catalog_mcp.models.index import CatalogIndex, IndexFields

logger = get_logger(__name__)

INDEX_FORMAT_VERSION = 1


def index_to_dict(index: CatalogIndex) -> Dict[str, Any]:
    """Serialize an index to plain JSON-compatible data."""
    return {
        "format_version": INDEX_FORMAT_VERSION,
        "catalog_version": index.catalog_version,
        "entry_ids": list(index.entry_ids),
        "by_category": {k: list(v) for k, v in index.by_category.items()},
        "by_tag": {k: list(v) for k, v in index.by_tag.items()},
        "by_language": {k: list(v) for k, v in index.by_language.items()},
        "by_difficulty": {k: list(v) for k, v in index.by_difficulty.items()},
        "tokens": {k: list(v) for k, v in index.tokens.items()},
        "field_tokens": {
            name: {k: list(v) for k, v in postings.items()}
            for name, postings in index.field_tokens.items()
        },
    }


def index_from_dict(data: Dict[str, Any]) -> CatalogIndex:
    """Rebuild an index from ``index_to_dict`` output.

    Raises:
        ValueError: If the data has an unsupported format version
    """
    if data.get("format_version") != INDEX_FORMAT_VERSION:
        raise ValueError(f"Unsupported index format version: {data.get('format_version')}")

    def postings(raw: Dict[str, Any]) -> Dict[str, tuple]:
        return {k: tuple(v) for k, v in raw.items()}

    return CatalogIndex(
        catalog_version=data["catalog_version"],
        entry_ids=tuple(data["entry_ids"]),
        by_category=postings(data["by_category"]),
        by_tag=postings(data["by_tag"]),
        by_language=postings(data["by_language"]),
        by_difficulty=postings(data["by_difficulty"]),
        tokens=postings(data["tokens"]),
        field_tokens={name: postings(data["field_tokens"].get(name, {})) for name in IndexFields.ALL},
    )


def save_index(index: CatalogIndex, path: str) -> None:
    """Write an index to disk as sorted, indented JSON."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_suffix(target.suffix + ".tmp")
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(index_to_dict(index), f, indent=2, sort_keys=True)
    os.replace(tmp, target)
    logger.info("index_saved", path=str(target), catalog_version=index.catalog_version[:12])


def load_index_cache(catalog: Catalog, path: str, taxonomy: Optional[Taxonomy] = None) -> CatalogIndex:
    """Return the stored index for a catalog, rebuilding it when stale or unreadable.

    Args:
        catalog: Catalog the index must describe
        path: Location of the stored index
        taxonomy: Passed to build_index on rebuild

    Returns:
        An index whose catalog_version equals catalog.version
    """
    if os.path.isfile(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                index = index_from_dict(json.load(f))
            if index.catalog_version == catalog.version:
                logger.debug("index_cache_hit", path=path)
                return index
            logger.info("index_cache_stale", path=path, stored=index.catalog_version[:12], current=catalog.version[:12])
        except (OSError, ValueError, KeyError) as e:
            logger.warning("index_cache_unreadable", path=path, error=str(e))

    index = build_index(catalog, taxonomy)
    save_index(index, path)
    return index
