# Path: core/embedders/__init__.py
# Purpose: Package initializer for embedder implementations and interfaces.
# Layer: core/embedders.
# Details: Exposes base interface, reference implementations, and a settings-driven factory.

from __future__ import annotations

from config.settings import EmbedderSettings
from core.errors import ConfigurationError

from .base import Embedder, decode_image, fit_cover
from .clip_embedder import ClipEmbedder
from .pixel_embedder import PixelStatsEmbedder


def create_embedder(settings: EmbedderSettings) -> Embedder:
    """Instantiate the embedder named in settings."""

    if settings.name == "clip":
        return ClipEmbedder(model_name=settings.model_name, device=settings.device, image_size=settings.image_size)
    if settings.name == "pixel":
        return PixelStatsEmbedder(image_size=settings.image_size)
    raise ConfigurationError(f"Unknown embedder: {settings.name}")


__all__ = [
    "Embedder",
    "ClipEmbedder",
    "PixelStatsEmbedder",
    "create_embedder",
    "decode_image",
    "fit_cover",
]
