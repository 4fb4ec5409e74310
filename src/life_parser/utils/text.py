"""Small text helpers shared by the classifier and the entity extractor."""

from __future__ import annotations

import re
import unicodedata

_WS_RE = re.compile(r"\s+")
_EDGE_PUNCT = ".,!?;:'\""


def normalize_input(value: object) -> str:
    """Lower-case, trim and collapse whitespace. Non-text input becomes ""."""
    if not isinstance(value, str):
        return ""
    return _WS_RE.sub(" ", value.strip()).lower()


def fold_accents(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def tokenize(value: str) -> list[str]:
    return value.split() if value else []


def strip_edge_punctuation(value: str) -> str:
    return value.strip().strip(_EDGE_PUNCT).strip()


def strip_leading(tokens: list[str], words: frozenset[str] | set[str]) -> list[str]:
    idx = 0
    while idx < len(tokens) and strip_edge_punctuation(tokens[idx]) in words:
        idx += 1
    return tokens[idx:]
