# Path: core/vector_store/gallery_store.py
# Purpose: Persist and restore a built gallery index between restarts.
# Layer: core/vector_store.
# Details: Stores the embedding matrix as .npy and entry metadata as .json next to it.

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List, Optional

import numpy as np

from core.logging_config import get_logger
from core.models.domain import GalleryEntry, GalleryIndex

logger = get_logger(__name__)

FORMAT_VERSION = 1


class GalleryStore:
    """Serialize GalleryIndex objects as lightweight JSON + numpy arrays."""

    @staticmethod
    def save(index: GalleryIndex, path: Path | str, sources: Optional[Iterable[str]] = None) -> None:
        """Write the index matrix and metadata to ``path`` (.npy / .json).

        ``sources`` lists every file the build attempted, including skipped ones.
        """

        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        np.save(target.with_suffix(".npy"), index.matrix)
        metadata = {
            "version": FORMAT_VERSION,
            "model_name": index.model_name,
            "dim": index.dim,
            "sources": sorted(sources) if sources is not None else index.identifiers,
            "entries": [
                {"identifier": entry.identifier, "display_name": entry.display_name} for entry in index
            ],
        }
        target.with_suffix(".json").write_text(json.dumps(metadata, indent=2), encoding="utf-8")
        logger.info("Saved gallery index (%d entries) to %s", len(index), target)

    @staticmethod
    def load(path: Path | str, expected_model: Optional[str] = None) -> GalleryIndex:
        """
        Load an index previously written by :meth:`save`.

        Raises FileNotFoundError when either file is missing and ValueError when
        the payload is inconsistent or was produced by a different model.
        """

        target = Path(path)
        vector_path = target.with_suffix(".npy")
        metadata_path = target.with_suffix(".json")
        if not vector_path.exists() or not metadata_path.exists():
            raise FileNotFoundError(f"Missing gallery index files for {path}.")

        metadata = json.loads(metadata_path.read_text(encoding="utf-8"))
        if metadata.get("version") != FORMAT_VERSION:
            raise ValueError(f"Unsupported gallery index format: {metadata.get('version')}")

        model_name = metadata.get("model_name")
        if expected_model is not None and model_name != expected_model:
            raise ValueError(f"Gallery index was built with {model_name}, expected {expected_model}.")

        matrix = np.load(vector_path).astype(np.float32)
        records = metadata.get("entries", [])
        if matrix.shape[0] != len(records):
            raise ValueError(f"Gallery index has {matrix.shape[0]} vectors but {len(records)} entries.")

        entries = [
            GalleryEntry(identifier=record["identifier"], display_name=record["display_name"], embedding=vector)
            for record, vector in zip(records, matrix)
        ]
        return GalleryIndex(entries, model_name=model_name)

    @staticmethod
    def read_sources(path: Path | str) -> List[str]:
        """Return the source filenames recorded when the index at ``path`` was built."""

        metadata = json.loads(Path(path).with_suffix(".json").read_text(encoding="utf-8"))
        sources = metadata.get("sources")
        if sources is None:
            sources = [record["identifier"] for record in metadata.get("entries", [])]
        return list(sources)
