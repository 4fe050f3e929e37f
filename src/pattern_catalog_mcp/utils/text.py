"""Text processing utilities shared by the parser, index and query engine."""

import re
from typing import AbstractSet, Iterable, List

__all__ = [
    "tokenize",
    "unique_tokens",
    "normalize_reference",
]

_TOKEN_SPLIT = re.compile(r"[\W_]+", re.UNICODE)


def tokenize(text: str, stop_words: AbstractSet[str] = frozenset()) -> List[str]:
    """Split text into case-folded alphanumeric tokens.

    Splits on any run of non-word characters or underscores, so
    "pub-sub", "pub_sub" and "Pub/Sub" all yield ["pub", "sub"].

    Args:
        text: Text to tokenize
        stop_words: Tokens to drop

    Returns:
        Tokens in order of appearance, duplicates kept
    """
    return [tok for tok in _TOKEN_SPLIT.split(text.casefold()) if tok and tok not in stop_words]


def unique_tokens(texts: Iterable[str], stop_words: AbstractSet[str] = frozenset()) -> List[str]:
    """Tokenize several texts and keep the first occurrence of each token."""
    seen = set()
    ordered: List[str] = []
    for text in texts:
        for tok in tokenize(text, stop_words):
            if tok not in seen:
                seen.add(tok)
                ordered.append(tok)
    return ordered


def normalize_reference(reference: str) -> str:
    """Turn a related-entry reference into an entry id.

    "../patterns/bar.md", "bar.md#usage" and "bar" all normalize to "bar".
    """
    ref = reference.strip().split("#", 1)[0]
    ref = ref.replace("\\", "/").rsplit("/", 1)[-1]
    if ref.lower().endswith(".md"):
        ref = ref[:-3]
    return ref.strip()

