# Path: core/errors.py
# Purpose: Define the error taxonomy shared by embedding, indexing, and matching.
# Layer: core.
# Details: Request-level errors propagate to callers; indexing errors are recorded and skipped.

from __future__ import annotations

from pathlib import Path
from typing import Optional


class PetMatchError(Exception):
    """Base class for all application errors."""


class ConfigurationError(PetMatchError):
    """Raised when settings reference an unknown or unusable component."""


class DecodeError(PetMatchError):
    """Image bytes could not be decoded into a raster image."""


class ModelError(PetMatchError):
    """The embedding capability failed to produce a vector."""


class NoQueryImageError(PetMatchError):
    """A match was requested without any image bytes."""


class IndexNotReadyError(PetMatchError):
    """A match was requested before the gallery index finished building."""


class EmptyGalleryError(PetMatchError):
    """The gallery index holds zero entries.

    This is a degraded state: it is logged, never raised out of index construction.
    """


class PerFileIndexError(PetMatchError):
    """A single gallery file could not be indexed and was skipped."""

    def __init__(self, path: Path, reason: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"{path.name}: {reason}")
        self.path = path
        self.reason = reason
        self.cause = cause


__all__ = [
    "PetMatchError",
    "ConfigurationError",
    "DecodeError",
    "ModelError",
    "NoQueryImageError",
    "IndexNotReadyError",
    "EmptyGalleryError",
    "PerFileIndexError",
]
