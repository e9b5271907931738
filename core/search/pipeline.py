# Path: core/search/pipeline.py
# Purpose: Orchestrate one match request: embed the query, rank the gallery, enrich the hits.
# Layer: core/search.
# Details: Holds the published gallery index behind a readiness barrier; requests never see a partial index.

from __future__ import annotations

import threading
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

from core.embedders.base import Embedder
from core.enrichment.enricher import MatchEnricher, RandomProfileEnricher
from core.errors import IndexNotReadyError, NoQueryImageError
from core.logging_config import get_logger
from core.models.domain import GalleryIndex, RankedMatch

from .ranker import CosineRanker, SimilarityRanker

if TYPE_CHECKING:
    from core.indexing.index_builder import GalleryIndexer

logger = get_logger(__name__)


class MatchService:
    """High-level service bridging the API layer with embedder, ranker, and enricher."""

    def __init__(
        self,
        embedder: Embedder,
        ranker: Optional[SimilarityRanker] = None,
        enricher: Optional[MatchEnricher] = None,
        default_top_k: int = 5,
        ready_timeout: float = 0.0,
    ) -> None:
        self.embedder = embedder
        self.ranker = ranker or CosineRanker()
        self.enricher = enricher or RandomProfileEnricher()
        self.default_top_k = default_top_k
        self.ready_timeout = ready_timeout
        self._index: Optional[GalleryIndex] = None
        self._ready = threading.Event()

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    @property
    def index(self) -> Optional[GalleryIndex]:
        return self._index

    def set_index(self, index: GalleryIndex) -> None:
        """Publish a fully built index and release any waiting requests."""

        self._index = index
        self._ready.set()
        logger.info("Gallery index published with %d entries", len(index))

    def refresh(self, indexer: GalleryIndexer, directory: Path) -> GalleryIndex:
        """Rebuild the index from ``directory`` and swap it in once complete."""

        index = indexer.build_index(directory)
        self.set_index(index)
        return index

    def wait_until_ready(self, timeout: Optional[float] = None) -> GalleryIndex:
        """Return the published index, waiting up to ``timeout`` seconds for it."""

        timeout = self.ready_timeout if timeout is None else timeout
        if not self._ready.wait(timeout):
            raise IndexNotReadyError("Gallery index is still being built.")
        assert self._index is not None
        return self._index

    def match(self, image_bytes: Optional[bytes], top_k: Optional[int] = None) -> List[RankedMatch]:
        """
        Find the gallery entries most similar to the supplied photo.

        External calls:
        - core/embedders/base.py::Embedder.embed - embeds the query photo.
        - core/search/ranker.py::SimilarityRanker.rank - orders gallery entries by similarity.
        - core/enrichment/enricher.py::MatchEnricher.enrich - attaches profile metadata.
        """

        if not image_bytes:
            raise NoQueryImageError("No image uploaded.")

        index = self.wait_until_ready()
        k = self.default_top_k if top_k is None else top_k

        query_vector = self.embedder.embed(image_bytes)

        ranked = self.ranker.rank(query_vector, index, k)
        matches = [
            RankedMatch(
                identifier=entry.identifier,
                display_name=entry.display_name,
                score=score,
                profile=self.enricher.enrich(entry),
            )
            for entry, score in ranked
        ]

        if matches:
            logger.info("Match: %s (score: %.4f)", matches[0].display_name, matches[0].score)
        return matches
