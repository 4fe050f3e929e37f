"""Unit tests for text utilities."""

import pytest

from pattern_catalog_mcp.utils.text import normalize_reference, tokenize, unique_tokens


class TestTokenize:
    """Tests for tokenize."""

    @pytest.mark.parametrize("text", ["pub-sub", "pub_sub", "Pub/Sub", "  PUB  sub "])
    def test_splits_on_non_alphanumeric_runs(self, text):
        assert tokenize(text) == ["pub", "sub"]

    def test_keeps_duplicates_in_order(self):
        assert tokenize("undo redo undo") == ["undo", "redo", "undo"]

    def test_stop_words(self):
        assert tokenize("I need an undo stack", frozenset({"i", "need", "an"})) == ["undo", "stack"]

    def test_empty_text(self):
        assert tokenize("") == []
        assert tokenize("--- !!") == []

    def test_unicode_case_folding(self):
        assert tokenize("STRASSE Straße") == ["strasse", "strasse"]


class TestUniqueTokens:
    """Tests for unique_tokens."""

    def test_first_occurrence_wins(self):
        assert unique_tokens(["event handling", "Event bus"]) == ["event", "handling", "bus"]


class TestNormalizeReference:
    """Tests for normalize_reference."""

    @pytest.mark.parametrize(
        "reference,expected",
        [
            ("bar", "bar"),
            ("bar.md", "bar"),
            ("../patterns/bar.md", "bar"),
            ("..\\patterns\\bar.MD", "bar"),
            ("bar.md#usage", "bar"),
            ("  bar  ", "bar"),
        ],
    )
    def test_strips_paths_and_extensions(self, reference, expected):
        assert normalize_reference(reference) == expected
