# Path: scripts/index_images.py
# Purpose: CLI tool to embed the gallery folder and write the index cache.
# Layer: scripts.
# Details: Demonstrates how to wire settings, embedder, indexer, and the gallery store together.

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import AppSettings
from core.embedders import create_embedder
from core.indexing.index_builder import GalleryIndexer
from core.logging_config import setup_logging
from core.vector_store.gallery_store import GalleryStore


def main() -> None:
    """Run indexing over the gallery folder."""

    settings = AppSettings.from_env()

    parser = argparse.ArgumentParser(description="Build the gallery index for the pet match service")
    parser.add_argument("--folder", type=Path, default=settings.gallery.images_dir, help="Folder of gallery images")
    parser.add_argument(
        "--output",
        type=Path,
        default=settings.gallery.index_cache_path or Path("storage/indexes/gallery"),
        help="Index cache path (.npy/.json are written next to it)",
    )
    parser.add_argument("--embedder", default=settings.embedder.name, help="Embedder implementation (clip or pixel)")
    parser.add_argument("--workers", type=int, default=settings.gallery.workers, help="Embedding threads")
    args = parser.parse_args()

    setup_logging(settings.log_level)
    embedder = create_embedder(settings.embedder.model_copy(update={"name": args.embedder}))
    indexer = GalleryIndexer(embedder, workers=args.workers)

    index = indexer.build_index(args.folder)
    GalleryStore.save(index, args.output, sources=indexer.sources)

    print(f"Indexed {len(index)} images into {args.output} ({len(indexer.failures)} skipped)")
    for failure in indexer.failures:
        print(f"  skipped {failure}")


if __name__ == "__main__":
    main()
