# tests/conftest.py

import io
import random
import struct
import zlib
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from core.embedders.base import Embedder
from core.enrichment.enricher import RandomProfileEnricher
from core.embedders.pixel_embedder import PixelStatsEmbedder
from core.search.pipeline import MatchService


def image_bytes(color=(255, 0, 0), size=(64, 64), mode="RGB", fmt="PNG") -> bytes:
    """Encode a solid-color image in the requested format."""
    image = Image.new(mode, size, color)
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


def png_header(width, height) -> bytes:
    """A pixel-less PNG whose IHDR declares the given size."""

    def chunk(tag, data):
        return struct.pack(">I", len(data)) + tag + data + struct.pack(">I", zlib.crc32(tag + data))

    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", ihdr) + chunk(b"IEND", b"")


class KeyedEmbedder(Embedder):
    """Fake embedder returning fixed vectors keyed by the image's center color."""

    def __init__(self, vectors, dim=3):
        self.vectors = vectors
        self.dim = dim
        self.name = "keyed"
        self.model_name = "keyed-test"
        self.image_size = 16
        self.calls = 0

    def embed_image(self, image):
        self.calls += 1
        pixel = np.asarray(image.getpixel((8, 8)), dtype=np.float32)
        # Nearest known color absorbs resampling/JPEG rounding.
        key = min(self.vectors, key=lambda color: float(np.sum((np.asarray(color) - pixel) ** 2)))
        return np.asarray(self.vectors[key], dtype=np.float32)


@pytest.fixture
def gallery_dir(tmp_path) -> Path:
    """Gallery with three distinct solid-color photos."""
    root = tmp_path / "dog-images"
    root.mkdir()
    (root / "page1_10_photo_of_blondie.jpg").write_bytes(image_bytes((250, 220, 120), fmt="JPEG"))
    (root / "page2_3_photo_of_rex_the_dog_.png").write_bytes(image_bytes((20, 20, 200)))
    (root / "random.png").write_bytes(image_bytes((30, 160, 40)))
    return root


@pytest.fixture
def pixel_embedder():
    return PixelStatsEmbedder(dim=64, image_size=32)


@pytest.fixture
def seeded_enricher():
    return RandomProfileEnricher(rng=random.Random(1234))


@pytest.fixture
def service(pixel_embedder, seeded_enricher):
    return MatchService(embedder=pixel_embedder, enricher=seeded_enricher)
