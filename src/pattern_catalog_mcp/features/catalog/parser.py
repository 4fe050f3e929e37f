"""Catalog document parser.

Turns the raw text of one catalog document into an ``Entry``. Parsing is
strict about metadata and structure (required fields, duplicate variant
names) and lenient about payload: a variant with no implementation text is
still recorded and left for the validator to flag.

Document layout::

    ---
    title: Singleton
    category: creational
    ...
    ---
    ## Python
    ### Module-level Instance (Recommended)
    **Library:** none
    <opaque payload>
"""

import hashlib
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

import yaml

from pattern_catalog_mcp.constants import EntryFields, EntryKinds
from pattern_catalog_mcp.core.exceptions import (
    DuplicateVariantNameError,
    InvalidFieldError,
    MalformedDocumentError,
    MissingFieldError,
)
from pattern_catalog_mcp.models.catalog import Entry, RelatedLink, Taxonomy, Variant
from pattern_catalog_mcp.utils.text import normalize_reference

FRONT_MATTER_DELIMITER = "---"
FRONT_MATTER_END_MARKERS = ("---", "...")

_HEADING = re.compile(r"^(#{1,6})\s+(.*?)(?:\s+#+)?\s*$")
_FENCE = re.compile(r"^\s*(```|~~~)")
_RECOMMENDED_MARKER = re.compile(r"(?:\s*\(recommended\)|\s*\[recommended\]|\s*:\s*recommended|\s+-\s*recommended)\s*$", re.IGNORECASE)
_LIBRARY_LINE = re.compile(r"^\s*(?:[-*]\s*)?\*{0,2}(?:library|dependency|package)\*{0,2}\s*:\s*\*{0,2}\s*(.+?)\s*$", re.IGNORECASE)
_RECOMMENDED_LINE = re.compile(r"^\s*(?:[-*]\s*)?\*{0,2}recommended\*{0,2}\s*:\s*\*{0,2}\s*(\w+)\s*$", re.IGNORECASE)
# "**Total Patterns:** 15", "Total patterns: 15", "**Total Patterns**: 15", "| Total Patterns | 15 |"
_TOTAL_LINE = re.compile(r"\btotal\s+([a-z][\w-]*)\s*(?:\*\*|__)?\s*[:|]\s*(?:\*\*|__)?\s*(\d+)\b", re.IGNORECASE)
_LANGUAGE_PREFIX = re.compile(r"^(?:language|lang)\s*:\s*", re.IGNORECASE)
_LANGUAGE_SUFFIX = re.compile(r"\s+(?:implementations?|examples?|version)$", re.IGNORECASE)
_PARENTHETICAL = re.compile(r"\s*\([^)]*\)\s*$")

_TRUTHY = {"yes", "true", "y", "1"}


@dataclass
class _VariantBuilder:
    name: str
    language: str
    recommended: bool = False
    library_ref: str = "none"
    lines: List[str] = field(default_factory=list)

    def build(self) -> Variant:
        return Variant(
            name=self.name,
            language=self.language,
            library_ref=self.library_ref,
            recommended=self.recommended,
            payload="\n".join(self.lines).strip("\n"),
        )


@dataclass
class _ParsedBody:
    variants: Dict[str, List[Variant]] = field(default_factory=dict)
    totals: Dict[str, int] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)


def split_front_matter(text: str, source_id: str = "") -> Tuple[Dict[str, Any], str]:
    """Split a document into its metadata mapping and body text.

    Args:
        text: Raw document text
        source_id: Source id used in error messages

    Returns:
        Tuple of (metadata dict, body text)

    Raises:
        MalformedDocumentError: If the front matter is missing, unterminated,
            not valid YAML, or not a mapping
    """
    lines = text.lstrip("\ufeff").splitlines()
    start = 0
    while start < len(lines) and not lines[start].strip():
        start += 1

    if start >= len(lines) or lines[start].strip() != FRONT_MATTER_DELIMITER:
        raise MalformedDocumentError("Document does not start with a '---' metadata block", source_id)

    end = None
    for i in range(start + 1, len(lines)):
        if lines[i].strip() in FRONT_MATTER_END_MARKERS:
            end = i
            break
    if end is None:
        raise MalformedDocumentError("Metadata block is missing its closing '---'", source_id)

    try:
        metadata = yaml.safe_load("\n".join(lines[start + 1:end]))
    except yaml.YAMLError as e:
        raise MalformedDocumentError(f"Metadata YAML parsing failed: {e}", source_id) from e

    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        raise MalformedDocumentError("Metadata block must be a YAML mapping", source_id)

    return metadata, "\n".join(lines[end + 1:])


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _require(metadata: Dict[str, Any], fields: List[str], source_id: str) -> None:
    for name in fields:
        if name not in metadata or _is_blank(metadata[name]):
            raise MissingFieldError(name, source_id)


def _as_text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _as_string_list(value: Any) -> List[str]:
    """Accept a YAML list or a comma-separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple, set)):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    return [str(value).strip()]


def _parse_tags(value: Any, source_id: str) -> Tuple[str, ...]:
    tags = sorted({tag.lower() for tag in _as_string_list(value)})
    if not tags:
        raise InvalidFieldError(EntryFields.TAGS, "must contain at least one tag", source_id)
    return tuple(tags)


def _parse_when_to_use(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return (value.strip(),) if value.strip() else ()
    return tuple(_as_string_list(value))


def _parse_date(value: Any, source_id: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = _as_text(value)
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y-%m", "%B %d, %Y", "%B %Y"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise InvalidFieldError(EntryFields.UPDATED, f"'{text}' is not a recognizable date", source_id)


def _parse_difficulty(value: Any, taxonomy: Taxonomy, source_id: str) -> str:
    difficulty = _as_text(value).lower()
    if taxonomy.difficulties and difficulty not in taxonomy.difficulties:
        raise InvalidFieldError(
            EntryFields.DIFFICULTY,
            f"'{difficulty}' is not one of {', '.join(taxonomy.difficulties)}",
            source_id,
        )
    return difficulty


def _parse_totals(value: Any, source_id: str) -> Dict[str, int]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidFieldError(EntryFields.TOTALS, "must be a mapping of label to count", source_id)
    totals: Dict[str, int] = {}
    for label, count in value.items():
        try:
            totals[str(label).strip().lower()] = int(count)
        except (TypeError, ValueError) as e:
            raise InvalidFieldError(EntryFields.TOTALS, f"count for '{label}' is not an integer", source_id) from e
    return totals


def _parse_related(entry_id: str, metadata: Dict[str, Any]) -> Tuple[RelatedLink, ...]:
    links: List[RelatedLink] = []
    seen = set()
    for relation in EntryFields.RELATIONS:
        for reference in _as_string_list(metadata.get(relation)):
            target = normalize_reference(reference)
            if not target or (target, relation) in seen:
                continue
            seen.add((target, relation))
            links.append(RelatedLink(from_id=entry_id, to_id=target, relation=relation))
    return tuple(links)


def _language_from_heading(heading: str, taxonomy: Taxonomy) -> Tuple[Optional[str], bool]:
    """Resolve a level-2 heading to a language.

    Returns:
        Tuple of (canonical language or None, whether the heading is
        explicitly marked as a language section)
    """
    text = heading.strip()
    marked = bool(_LANGUAGE_PREFIX.match(text) or _LANGUAGE_SUFFIX.search(text))
    text = _LANGUAGE_PREFIX.sub("", text)
    text = _PARENTHETICAL.sub("", text)
    text = _LANGUAGE_SUFFIX.sub("", text).strip()
    return taxonomy.resolve_language(text), marked


def _split_recommended_marker(heading: str) -> Tuple[str, bool]:
    name, count = _RECOMMENDED_MARKER.subn("", heading)
    return name.strip(), count > 0


def _parse_body(body: str, taxonomy: Taxonomy, source_id: str) -> _ParsedBody:
    """Scan the body for language sections, variant blocks and totals lines."""
    parsed = _ParsedBody()
    language: Optional[str] = None
    current: Optional[_VariantBuilder] = None
    seen_names: Dict[str, set] = {}
    in_fence = False
    # Unrecognised level-2 heading, reported once variant markup shows up under it
    unknown_section: Optional[str] = None

    def finish_variant() -> None:
        nonlocal current
        if current is not None:
            parsed.variants.setdefault(current.language, []).append(current.build())
            current = None

    def report_unknown_section() -> None:
        nonlocal unknown_section
        if unknown_section is not None:
            parsed.warnings.append(f"Unknown language section '{unknown_section}' skipped")
            unknown_section = None

    for line in body.splitlines():
        if _FENCE.match(line):
            in_fence = not in_fence
            if current is not None:
                current.lines.append(line)
            continue

        if current is None and not in_fence:
            for label, count in _TOTAL_LINE.findall(line):
                parsed.totals.setdefault(label.lower(), int(count))

        heading = None if in_fence else _HEADING.match(line)
        if heading:
            level = len(heading.group(1))
            text = heading.group(2)
            if level <= 2:
                finish_variant()
                language = None
                unknown_section = None
                if level == 2:
                    resolved, marked = _language_from_heading(text, taxonomy)
                    if resolved:
                        language = resolved
                    else:
                        unknown_section = text
                        if marked:
                            report_unknown_section()
                continue
            if level == 3 and unknown_section is not None and _RECOMMENDED_MARKER.search(text):
                report_unknown_section()
                continue
            if level == 3 and language is not None:
                finish_variant()
                name, recommended = _split_recommended_marker(text)
                key = name.casefold()
                names = seen_names.setdefault(language, set())
                if key in names:
                    raise DuplicateVariantNameError(language, name, source_id)
                names.add(key)
                current = _VariantBuilder(name=name, language=language, recommended=recommended)
                continue

        if unknown_section is not None and not in_fence:
            if _LIBRARY_LINE.match(line) or _RECOMMENDED_LINE.match(line):
                report_unknown_section()
                continue

        if current is not None and not in_fence:
            library = _LIBRARY_LINE.match(line)
            if library:
                current.library_ref = library.group(1).strip("`*_ ") or "none"
                continue
            flag = _RECOMMENDED_LINE.match(line)
            if flag:
                current.recommended = flag.group(1).lower() in _TRUTHY
                continue

        if current is not None:
            current.lines.append(line)

    finish_variant()
    return parsed


def digest_text(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def parse_entry(text: str, source_id: str = "", taxonomy: Optional[Taxonomy] = None) -> Entry:
    """Parse one catalog document.

    Args:
        text: Raw document text
        source_id: Id of the source; used as the entry id when the
            metadata does not declare one
        taxonomy: Languages, categories and difficulties to validate against

    Returns:
        Parsed Entry

    Raises:
        MalformedDocumentError: Front matter missing or unreadable
        MissingFieldError: A required metadata field is absent
        InvalidFieldError: A metadata field has an unusable value
        DuplicateVariantNameError: Two variants in one language share a name
    """
    taxonomy = taxonomy or Taxonomy.default()
    metadata, body = split_front_matter(text, source_id)

    kind = _as_text(metadata.get(EntryFields.KIND) or EntryKinds.ENTRY).lower()
    if kind not in (EntryKinds.ENTRY, EntryKinds.INDEX):
        raise InvalidFieldError(EntryFields.KIND, f"'{kind}' is not 'entry' or 'index'", source_id)

    entry_id = _as_text(metadata.get(EntryFields.ID)) or source_id
    if not entry_id:
        raise MissingFieldError(EntryFields.ID, source_id)

    if kind == EntryKinds.INDEX:
        _require(metadata, [EntryFields.TITLE], source_id)
    else:
        _require(metadata, EntryFields.REQUIRED, source_id)

    parsed = _parse_body(body, taxonomy, source_id)

    totals = dict(parsed.totals) if kind == EntryKinds.INDEX else {}
    totals.update(_parse_totals(metadata.get(EntryFields.TOTALS), source_id))

    is_entry = kind == EntryKinds.ENTRY
    return Entry(
        id=entry_id,
        title=_as_text(metadata.get(EntryFields.TITLE)),
        category=_as_text(metadata.get(EntryFields.CATEGORY)).lower(),
        difficulty=_parse_difficulty(metadata.get(EntryFields.DIFFICULTY), taxonomy, source_id) if is_entry else "",
        purpose=_as_text(metadata.get(EntryFields.PURPOSE)),
        when_to_use=_parse_when_to_use(metadata.get(EntryFields.WHEN_TO_USE)),
        tags=_parse_tags(metadata.get(EntryFields.TAGS), source_id) if is_entry else tuple(
            sorted({t.lower() for t in _as_string_list(metadata.get(EntryFields.TAGS))})
        ),
        updated=_parse_date(metadata.get(EntryFields.UPDATED), source_id) if is_entry or metadata.get(EntryFields.UPDATED) else None,
        variants={language: tuple(variants) for language, variants in parsed.variants.items()},
        related=_parse_related(entry_id, metadata),
        kind=kind,
        declared_totals=totals,
        warnings=tuple(parsed.warnings),
        source_id=source_id,
        digest=digest_text(text),
    )
