"""Filesystem source collaborator for the catalog loader."""

from fnmatch import fnmatch
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

from pattern_catalog_mcp.constants import FilePatterns
from pattern_catalog_mcp.core.exceptions import UnreadableSourceError
from pattern_catalog_mcp.core.logging import get_logger

logger = get_logger(__name__)


def _is_excluded(relative: str, exclude: List[str]) -> bool:
    # "**/x/**" should also match a top-level "x/..." path
    candidates = [relative, f"./{relative}", f"/{relative}"]
    return any(fnmatch(candidate, pattern) for pattern in exclude for candidate in candidates)


def find_source_files(
    root: str,
    include: Optional[List[str]] = None,
    exclude: Optional[List[str]] = None,
) -> List[Path]:
    """Find catalog documents under a directory.

    Args:
        root: Catalog root directory
        include: Glob patterns relative to root (default: all Markdown files)
        exclude: fnmatch patterns to skip

    Returns:
        Matching files sorted by their path relative to root
    """
    root_path = Path(root)
    include = include or FilePatterns.DEFAULT_INCLUDE
    exclude = FilePatterns.DEFAULT_EXCLUDE if exclude is None else exclude

    found = set()
    for pattern in include:
        for path in root_path.glob(pattern):
            if not path.is_file():
                continue
            relative = path.relative_to(root_path).as_posix()
            if _is_excluded(relative, exclude):
                continue
            found.add(path)

    return sorted(found, key=lambda p: p.relative_to(root_path).as_posix())


def iter_directory_sources(
    root: str,
    include: Optional[List[str]] = None,
    exclude: Optional[List[str]] = None,
) -> Iterator[Tuple[str, Union[str, UnreadableSourceError]]]:
    """Yield (source id, text) for every catalog document under root.

    The source id is the file name without its extension, so two files with
    the same stem in different folders collide and the loader keeps the
    first in sorted path order. A file that cannot be read or is not valid
    UTF-8 yields an UnreadableSourceError in place of its text, which the
    loader reports as a load error.
    """
    files = find_source_files(root, include, exclude)
    logger.info("catalog_sources_found", root=root, count=len(files))
    for path in files:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("catalog_source_unreadable", path=str(path), error=str(e))
            yield path.stem, UnreadableSourceError(f"Cannot read {path.name}: {e}", path.stem)
            continue
        yield path.stem, text
