# Path: core/indexing/index_builder.py
# Purpose: Build the in-memory gallery index from a folder of reference images.
# Layer: core/indexing.
# Details: Embeds every candidate file, skipping and recording per-file failures.

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from core.embedders.base import Embedder
from core.errors import DecodeError, EmptyGalleryError, ModelError, PerFileIndexError
from core.logging_config import get_logger
from core.models.domain import GalleryEntry, GalleryIndex
from core.vector_store.gallery_store import GalleryStore

from .scanner import GalleryFile, GalleryScanner

logger = get_logger(__name__)


class GalleryIndexer:
    """Embed gallery images and assemble them into an immutable GalleryIndex."""

    def __init__(self, embedder: Embedder, workers: int = 1, show_progress: bool = True) -> None:
        self.embedder = embedder
        self.workers = max(1, workers)
        self.show_progress = show_progress
        self.failures: List[PerFileIndexError] = []
        self.sources: List[str] = []

    def build_index(self, directory: Path) -> GalleryIndex:
        """
        Scan ``directory`` and embed every candidate image.

        Blocks until each file has been attempted. Unreadable files are logged
        and left out; an unreadable directory produces an empty index. Raises
        ModelError, before any file is embedded, when the embedder cannot load.

        External calls:
        - core/indexing/scanner.py::GalleryScanner.scan - enumerate candidate files.
        - core/embedders/base.py::Embedder.load - load model weights once up front.
        - core/embedders/base.py::Embedder.embed - create embeddings for each image.
        """

        directory = Path(directory)
        self.failures = []
        started = time.perf_counter()
        logger.info("Building gallery index from %s", directory)

        try:
            files = GalleryScanner(directory).scan()
        except OSError as exc:
            logger.error("Error reading gallery directory %s: %s", directory, exc)
            files = []

        self.sources = [gallery_file.identifier for gallery_file in files]
        logger.info("Found %d gallery images to index", len(files))
        if files:
            # Load failures abort the build before any file is embedded.
            self.embedder.load()

        if self.workers > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="gallery-index") as pool:
                # map preserves input order, so the index follows scan order.
                results = list(self._progress(pool.map(self._embed_file, files), len(files)))
        else:
            results = [self._embed_file(gallery_file) for gallery_file in self._progress(files, len(files))]

        entries = [entry for entry in results if entry is not None]
        index = GalleryIndex(entries, model_name=self.embedder.model_name)

        elapsed = time.perf_counter() - started
        logger.info(
            "Indexed %d gallery photos in %.2fs (%d skipped)", len(index), elapsed, len(self.failures)
        )
        if len(index) == 0:
            logger.warning("%s", EmptyGalleryError(f"No gallery images indexed from {directory}"))
        return index

    def load_or_build(self, directory: Path, cache_path: Optional[Path] = None) -> GalleryIndex:
        """
        Reuse a cached index when it matches the embedder and the directory listing, else rebuild.

        A rebuilt index is written back to ``cache_path`` when one is given.
        """

        if cache_path is None:
            return self.build_index(directory)

        try:
            cached = GalleryStore.load(cache_path, expected_model=self.embedder.model_name)
        except (FileNotFoundError, ValueError, KeyError, OSError) as exc:
            logger.info("Gallery index cache unusable (%s); rebuilding", exc)
        else:
            try:
                current = {gallery_file.identifier for gallery_file in GalleryScanner(Path(directory)).scan()}
            except OSError:
                current = set()
            if current == set(GalleryStore.read_sources(cache_path)):
                logger.info("Loaded gallery index (%d entries) from %s", len(cached), cache_path)
                return cached
            logger.info("Gallery directory changed since %s was written; rebuilding", cache_path)

        index = self.build_index(directory)
        try:
            GalleryStore.save(index, cache_path, sources=self.sources)
        except OSError as exc:
            logger.warning("Could not write gallery index cache %s: %s", cache_path, exc)
        return index

    def _embed_file(self, gallery_file: GalleryFile) -> Optional[GalleryEntry]:
        try:
            vector = self.embedder.embed(gallery_file.path.read_bytes())
        except (OSError, DecodeError, ModelError) as exc:
            failure = PerFileIndexError(gallery_file.path, str(exc), cause=exc)
            self.failures.append(failure)
            logger.warning("Skipping %s: %s", gallery_file.identifier, exc)
            return None
        return GalleryEntry(
            identifier=gallery_file.identifier,
            display_name=gallery_file.display_name,
            embedding=vector,
        )

    def _progress(self, iterable, total: int):
        return tqdm(iterable, total=total, desc="Indexing gallery", unit="img", disable=not self.show_progress)
