# Path: core/enrichment/__init__.py
# Purpose: Package initializer for match enrichment.
# Layer: core/enrichment.
# Details: Exposes the enricher interface and the random placeholder implementation.

from .enricher import SCORE_RANGE, MatchEnricher, RandomProfileEnricher, format_age

__all__ = ["MatchEnricher", "RandomProfileEnricher", "SCORE_RANGE", "format_age"]
