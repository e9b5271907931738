# Path: core/models/domain.py
# Purpose: Define domain models shared across embedding, indexing, ranking, and enrichment.
# Layer: core/models.
# Details: Lightweight dataclasses simplify serialization between API, scripts, and core services.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class GalleryEntry:
    """One indexed reference image and its embedding."""

    identifier: str
    display_name: str
    embedding: np.ndarray = field(repr=False, compare=False)

    def __post_init__(self) -> None:
        vector = np.array(self.embedding, dtype=np.float32).reshape(-1)
        vector.setflags(write=False)
        # Frozen dataclass: bypass __setattr__ to store the read-only copy.
        object.__setattr__(self, "embedding", vector)


class GalleryIndex:
    """Ordered, immutable collection of gallery entries built once at startup."""

    def __init__(self, entries: Iterable[GalleryEntry] = (), model_name: Optional[str] = None) -> None:
        self._entries: Tuple[GalleryEntry, ...] = tuple(entries)
        self.model_name = model_name

        seen = set()
        for entry in self._entries:
            if entry.identifier in seen:
                raise ValueError(f"Duplicate gallery identifier: {entry.identifier}")
            seen.add(entry.identifier)

        dims = {entry.embedding.shape[0] for entry in self._entries}
        if len(dims) > 1:
            raise ValueError(f"Gallery embeddings have mixed dimensionality: {sorted(dims)}")
        self._dim: Optional[int] = dims.pop() if dims else None

        if self._entries:
            matrix = np.vstack([entry.embedding for entry in self._entries]).astype(np.float32)
        else:
            matrix = np.empty((0, self._dim or 0), dtype=np.float32)
        matrix.setflags(write=False)
        self._matrix = matrix
        self._by_id = {entry.identifier: entry for entry in self._entries}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[GalleryEntry]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"GalleryIndex(entries={len(self)}, dim={self._dim}, model_name={self.model_name!r})"

    @property
    def entries(self) -> Tuple[GalleryEntry, ...]:
        return self._entries

    @property
    def dim(self) -> Optional[int]:
        """Embedding dimensionality, or None for an empty index."""

        return self._dim

    @property
    def matrix(self) -> np.ndarray:
        """Read-only (n, d) matrix of embeddings in insertion order."""

        return self._matrix

    @property
    def identifiers(self) -> List[str]:
        return [entry.identifier for entry in self._entries]

    def get(self, identifier: str) -> Optional[GalleryEntry]:
        return self._by_id.get(identifier)


@dataclass(frozen=True)
class MatchScores:
    """Per-category match percentages shown alongside a result."""

    appearance: int
    expression: int
    character: int

    def to_dict(self) -> Dict[str, int]:
        return {"appearance": self.appearance, "expression": self.expression, "character": self.character}


@dataclass(frozen=True)
class PetProfile:
    """Presentation metadata attached to a gallery entry."""

    breed: str
    age: int
    age_text: str
    sex: str
    location: str
    description: str
    match_scores: MatchScores


@dataclass
class RankedMatch:
    """A ranked gallery entry combined with its presentation metadata."""

    identifier: str
    display_name: str
    score: float
    profile: PetProfile

    def to_dict(self) -> Dict[str, Any]:
        """Render the JSON shape consumed by the browser client."""

        return {
            "id": self.identifier,
            "name": self.display_name,
            "score": self.score,
            "breed": self.profile.breed,
            "age": self.profile.age,
            "ageText": self.profile.age_text,
            "sex": self.profile.sex,
            "location": self.profile.location,
            "description": self.profile.description,
            "matchScores": self.profile.match_scores.to_dict(),
        }
