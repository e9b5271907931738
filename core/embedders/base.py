# Path: core/embedders/base.py
# Purpose: Define the Embedder interface and the shared image preprocessing it relies on.
# Layer: core/embedders.
# Details: Gallery and query images go through the same decode -> RGB -> cover-fit path.

from __future__ import annotations

import io
from abc import ABC, abstractmethod

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from core.errors import DecodeError, ModelError


def decode_image(image_bytes: bytes) -> Image.Image:
    """Decode raw bytes into a fully loaded Pillow image.

    Animated formats (GIF, WEBP) contribute their first frame. Headers that
    exceed Pillow's decompression-bomb pixel limit are rejected as undecodable.
    """

    if not image_bytes:
        raise DecodeError("Image payload is empty.")
    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            image.seek(0)
            image.load()
            return image.copy()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, EOFError, ValueError, SyntaxError) as exc:
        raise DecodeError(f"Unreadable image data: {exc}") from exc


def fit_cover(image: Image.Image, size: int) -> Image.Image:
    """Drop alpha, then scale to fill a size x size square and center-crop the excess."""

    rgb = image.convert("RGB")
    return ImageOps.fit(rgb, (size, size), method=Image.Resampling.BICUBIC, centering=(0.5, 0.5))


class Embedder(ABC):
    """Abstract base class for image embedders used by indexing and matching."""

    name: str
    dim: int
    model_name: str
    image_size: int = 224

    def load(self) -> None:
        """Prepare model weights ahead of the first embed; a no-op for model-free embedders."""

    def embed(self, image_bytes: bytes) -> np.ndarray:
        """
        Decode, preprocess, and embed raw image bytes.

        Raises DecodeError for unreadable bytes and ModelError when the model fails.
        """

        image = decode_image(image_bytes)
        try:
            prepared = fit_cover(image, self.image_size)
        finally:
            image.close()

        try:
            vector = self.embed_image(prepared)
        except ModelError:
            raise
        except Exception as exc:  # noqa: BLE001 - any backend failure is a model failure
            raise ModelError(f"{self.name} embedder failed: {exc}") from exc
        finally:
            prepared.close()

        vector = np.asarray(vector, dtype=np.float32).reshape(-1)
        if vector.shape[0] != self.dim:
            raise ModelError(f"{self.name} embedder returned {vector.shape[0]} values, expected {self.dim}.")
        return vector

    @abstractmethod
    def embed_image(self, image: Image.Image) -> np.ndarray:
        """Return an embedding for an already preprocessed RGB image."""

    @staticmethod
    def _normalize(vector: np.ndarray) -> np.ndarray:
        """Normalize embedding vectors to unit length to simplify similarity comparisons."""

        norm = np.linalg.norm(vector)
        if norm == 0:
            return vector.astype(np.float32)
        return (vector / norm).astype(np.float32)
