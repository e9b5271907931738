# Path: core/embedders/pixel_embedder.py
# Purpose: Provide a deterministic, model-free image embedder.
# Layer: core/embedders.
# Details: Pools a color thumbnail and pixel statistics; useful offline and for demos without a model download.

from __future__ import annotations

import numpy as np
from PIL import Image

from .base import Embedder


class PixelStatsEmbedder(Embedder):
    """Embed images from a small color thumbnail plus global pixel statistics."""

    def __init__(self, dim: int = 512, image_size: int = 224, grid: int = 8) -> None:
        self.dim = dim
        self.image_size = image_size
        self.grid = grid
        self.name = "pixel"
        self.model_name = f"pixel-stats-{grid}x{grid}"

    def embed_image(self, image: Image.Image) -> np.ndarray:
        """Generate a deterministic embedding based on pixel statistics."""

        thumb = image.convert("RGB").resize((self.grid, self.grid), Image.Resampling.BOX)
        pixels = np.asarray(thumb, dtype=np.float32).flatten() / 255.0
        pooled = np.concatenate([
            # Constant term keeps all-black images away from the zero vector.
            [1.0, pixels.mean(), pixels.std()],
            np.percentile(pixels, [25, 50, 75]).astype(np.float32),
            pixels,
        ])
        wrapped = np.resize(pooled, self.dim)
        return self._normalize(wrapped)
