# Path: core/indexing/scanner.py
# Purpose: Scan the gallery folder and derive identifiers and display names for each image.
# Layer: core/indexing.
# Details: Non-recursive listing, dotfiles skipped, sorted by filename for a stable index order.

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

SUPPORTED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".webp"}

NAME_MARKER = re.compile(r"photo_of_(.+)")


def extract_display_name(filename: str) -> str:
    """
    Derive a human readable name from a gallery filename.

    ``page1_10_photo_of_blondie.jpg`` becomes ``Blondie``; names without the
    ``photo_of_`` marker fall back to the filename stem unchanged.
    """

    stem = Path(filename).stem
    match = NAME_MARKER.search(stem)
    if not match:
        return stem

    name = match.group(1).rstrip("_").replace("_", " ")
    if not name:
        return stem
    return name[0].upper() + name[1:]


@dataclass(frozen=True)
class GalleryFile:
    """A candidate gallery image discovered on disk."""

    identifier: str
    display_name: str
    path: Path


class GalleryScanner:
    """Scan a directory for supported image files."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def scan(self) -> List[GalleryFile]:
        """
        Return discovered images with their derived names.

        Raises OSError when the directory cannot be listed.
        """

        return [
            GalleryFile(identifier=path.name, display_name=extract_display_name(path.name), path=path)
            for path in self._iter_image_files()
        ]

    def _iter_image_files(self) -> Iterable[Path]:
        """Yield image files directly under the root directory."""

        for path in sorted(self.root.iterdir(), key=lambda p: p.name):
            if path.name.startswith("."):
                continue
            if path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS:
                yield path
