"""
Similarity math, metadata filters and result highlighting.

Dependencies: numpy
System role: Shared scoring helpers for vector store backends
"""

import re
from collections.abc import Sequence
from typing import Any

import numpy as np

from rag_engine.models.document import DocumentMetadata

TERM = re.compile(r"\b\w+\b")


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """dot(a, b) / (|a| |b|), or 0.0 when either norm is zero."""
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    denom = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if denom == 0.0:
        return 0.0
    return float(np.dot(va, vb) / denom)


def normalize_rows(matrix: np.ndarray) -> np.ndarray:
    """L2-normalize each row; zero rows stay zero."""
    norms = np.linalg.norm(matrix, axis=1, keepdims=True)
    return np.divide(matrix, norms, out=np.zeros_like(matrix), where=norms > 0)


def cosine_scores(matrix: np.ndarray, query: Sequence[float]) -> np.ndarray:
    """Cosine similarity of every row of matrix against the query vector."""
    if matrix.size == 0:
        return np.zeros(0)
    q = normalize_rows(np.asarray(query, dtype=np.float64).reshape(1, -1))[0]
    return normalize_rows(matrix.astype(np.float64)) @ q


def matches_filters(metadata: DocumentMetadata, filters: dict[str, Any] | None) -> bool:
    """
    Exact-match metadata filtering.

    A list-valued field (such as tags) matches a scalar filter by membership
    and a list filter when it contains every listed value.
    """
    if not filters:
        return True
    for key, expected in filters.items():
        actual = metadata.get(key)
        if isinstance(actual, list):
            wanted = expected if isinstance(expected, list) else [expected]
            if not all(value in actual for value in wanted):
                return False
        elif actual != expected:
            return False
    return True


def highlight(query: str, text: str, context_chars: int = 200) -> list[str]:
    """
    Excerpt around the first query term found in text.

    Returns:
        list[str]: One excerpt, or an empty list when no term occurs
    """
    text_lower = text.lower()
    match_pos = -1
    for term in TERM.findall(query.lower()):
        match_pos = text_lower.find(term)
        if match_pos != -1:
            break
    if match_pos == -1:
        return []

    start = max(0, match_pos - context_chars // 2)
    end = min(len(text), match_pos + context_chars // 2)
    while start > 0 and not text[start - 1].isspace():
        start -= 1
    while end < len(text) and not text[end].isspace():
        end += 1

    excerpt = text[start:end].strip()
    if start > 0:
        excerpt = "..." + excerpt
    if end < len(text):
        excerpt = excerpt + "..."
    return [excerpt]
