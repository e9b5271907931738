# Path: core/search/ranker.py
# Purpose: Rank gallery entries against a query embedding.
# Layer: core/search.
# Details: Exact cosine similarity over the index matrix; the interface allows an ANN backend later.

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Tuple

import numpy as np

from core.errors import ModelError
from core.models.domain import GalleryEntry, GalleryIndex


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Cosine of the angle between two vectors; NaN when either has zero magnitude."""

    a = np.asarray(a, dtype=np.float64).reshape(-1)
    b = np.asarray(b, dtype=np.float64).reshape(-1)
    denominator = np.linalg.norm(a) * np.linalg.norm(b)
    if denominator == 0:
        return float("nan")
    return float(np.dot(a, b) / denominator)


class SimilarityRanker(ABC):
    """Interface for nearest-neighbor ranking over a gallery index."""

    @abstractmethod
    def rank(self, query: np.ndarray, index: GalleryIndex, top_k: int = 5) -> List[Tuple[GalleryEntry, float]]:
        """Return at most ``top_k`` (entry, score) pairs, best first."""


class CosineRanker(SimilarityRanker):
    """Brute-force cosine similarity ranker.

    Entries whose stored vector has zero or non-finite magnitude are skipped,
    and a query with zero magnitude (or non-finite values) matches nothing.
    Ties keep index insertion order.
    """

    def rank(self, query: np.ndarray, index: GalleryIndex, top_k: int = 5) -> List[Tuple[GalleryEntry, float]]:
        if top_k <= 0 or len(index) == 0:
            return []

        query = np.asarray(query, dtype=np.float64).reshape(-1)
        if query.shape[0] != index.dim:
            raise ModelError(f"Query dimensionality {query.shape[0]} does not match index dimension {index.dim}.")

        query_norm = np.linalg.norm(query)
        if not np.isfinite(query_norm) or query_norm == 0:
            return []

        matrix = index.matrix.astype(np.float64)
        norms = np.linalg.norm(matrix, axis=1)
        valid = np.flatnonzero(np.isfinite(norms) & (norms > 0))
        if valid.size == 0:
            return []

        scores = (matrix[valid] @ query) / (norms[valid] * query_norm)
        # Stable sort on negated scores keeps insertion order for ties.
        order = np.argsort(-scores, kind="stable")[:top_k]

        entries = index.entries
        return [(entries[int(valid[i])], float(scores[i])) for i in order]
