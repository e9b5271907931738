# Path: core/search/__init__.py
# Purpose: Package initializer for ranking and match orchestration.
# Layer: core/search.
# Details: Exposes the ranker interface, the cosine ranker, and the match service entrypoint.

from .ranker import CosineRanker, SimilarityRanker, cosine_similarity
from .pipeline import MatchService

__all__ = ["MatchService", "SimilarityRanker", "CosineRanker", "cosine_similarity"]
