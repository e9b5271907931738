# Path: scripts/quick_search_demo.py
# Purpose: Simple CLI to match one local photo against the gallery.
# Layer: scripts.
# Details: Loads the cached index when available, otherwise builds it, then prints ranked matches.

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import AppSettings
from core.errors import PetMatchError
from core.indexing.index_builder import GalleryIndexer
from core.logging_config import setup_logging
from api.app import build_service


def main() -> None:
    """Execute a quick match from the command line."""

    parser = argparse.ArgumentParser(description="Find the gallery pets that look most like a photo")
    parser.add_argument("photo", type=Path, help="Photo to match")
    parser.add_argument("--k", type=int, default=None, help="Number of results to return")
    args = parser.parse_args()

    settings = AppSettings.from_env()
    setup_logging(settings.log_level)

    service = build_service(settings)
    indexer = GalleryIndexer(service.embedder, workers=settings.gallery.workers)
    service.set_index(indexer.load_or_build(settings.gallery.images_dir, settings.gallery.index_cache_path))

    try:
        results = service.match(args.photo.read_bytes(), top_k=args.k)
    except (OSError, PetMatchError) as exc:
        print(f"Failed to compute match: {exc}", file=sys.stderr)
        sys.exit(1)

    if not results:
        print("No matches (gallery is empty).")
    for result in results:
        scores = result.profile.match_scores
        print(
            f"{result.display_name:<20} score={result.score:.4f} id={result.identifier} "
            f"breed={result.profile.breed} appearance={scores.appearance}"
        )


if __name__ == "__main__":
    main()
