# Path: core/models/__init__.py
# Purpose: Package initializer for domain model definitions.
# Layer: core/models.
# Details: Exposes dataclasses used across embedding, indexing, ranking, and enrichment layers.

from .domain import GalleryEntry, GalleryIndex, MatchScores, PetProfile, RankedMatch

__all__ = ["GalleryEntry", "GalleryIndex", "MatchScores", "PetProfile", "RankedMatch"]
