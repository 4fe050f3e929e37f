"""Exception hierarchy for the pattern catalog engine.

Parse errors carry a stable ``kind`` code so loaders and hosts can report
them without matching on message text. Integrity problems are never raised;
they are returned as ``Violation`` records by the validator.
"""
from typing import Optional


class CatalogError(Exception):
    """Base class for all catalog engine errors."""
    pass


class ConfigurationError(CatalogError):
    """Raised when a configuration file is missing or invalid."""

    def __init__(self, config_path: str, message: str) -> None:
        self.config_path = config_path
        self.message = message
        super().__init__(f"Invalid configuration file '{config_path}': {message}")


class ParseError(CatalogError):
    """Raised when a catalog document cannot be parsed into an entry."""

    kind = "parse-error"

    def __init__(self, message: str, source_id: Optional[str] = None) -> None:
        self.message = message
        self.source_id = source_id
        super().__init__(message)


class MalformedDocumentError(ParseError):
    """Front matter is missing, unterminated, or not a mapping."""

    kind = "malformed-document"


class MissingFieldError(ParseError):
    """A required metadata field is absent or blank."""

    kind = "missing-field"

    def __init__(self, field_name: str, source_id: Optional[str] = None) -> None:
        self.field_name = field_name
        super().__init__(f"Missing required field: {field_name}", source_id)


class InvalidFieldError(ParseError):
    """A metadata field is present but has an unusable value."""

    kind = "invalid-field"

    def __init__(self, field_name: str, reason: str, source_id: Optional[str] = None) -> None:
        self.field_name = field_name
        self.reason = reason
        super().__init__(f"Invalid value for '{field_name}': {reason}", source_id)


class DuplicateVariantNameError(ParseError):
    """Two variants in the same language section share a name."""

    kind = "duplicate-variant-name"

    def __init__(self, language: str, variant_name: str, source_id: Optional[str] = None) -> None:
        self.language = language
        self.variant_name = variant_name
        super().__init__(f"Duplicate variant '{variant_name}' in {language} section", source_id)


class UnreadableSourceError(ParseError):
    """A source file could not be read or decoded as UTF-8."""

    kind = "unreadable-source"


class StaleIndexError(CatalogError):
    """Raised when an index is queried against a catalog it was not built from."""

    def __init__(self, index_version: str, catalog_version: str) -> None:
        self.index_version = index_version
        self.catalog_version = catalog_version
        super().__init__(
            f"Index was built from catalog {index_version[:12]} but queried against {catalog_version[:12]}"
        )


class SnapshotUnavailableError(CatalogError):
    """Raised when no catalog snapshot has been published yet."""
    pass
