# Path: core/indexing/__init__.py
# Purpose: Package initializer for indexing utilities.
# Layer: core/indexing.
# Details: Exposes gallery scanning, display-name extraction, and index building.

from .scanner import GalleryFile, GalleryScanner, SUPPORTED_EXTENSIONS, extract_display_name
from .index_builder import GalleryIndexer

__all__ = ["GalleryFile", "GalleryScanner", "GalleryIndexer", "SUPPORTED_EXTENSIONS", "extract_display_name"]
