# Path: core/vector_store/__init__.py
# Purpose: Package initializer for gallery index persistence.
# Layer: core/vector_store.
# Details: Exposes the on-disk store used to cache built gallery indexes.

from .gallery_store import GalleryStore

__all__ = ["GalleryStore"]
