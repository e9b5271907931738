# Path: core/embedders/clip_embedder.py
# Purpose: Provide a CLIP vision embedder backed by Hugging Face transformers.
# Layer: core/embedders.
# Details: Loads CLIPVisionModelWithProjection once (failures are cached) and serializes model calls with a lock.

from __future__ import annotations

import threading
from typing import Any, Optional

import numpy as np
from PIL import Image

from core.errors import ModelError
from core.logging_config import get_logger

from .base import Embedder

logger = get_logger(__name__)


class ClipEmbedder(Embedder):
    """Image embedder returning CLIP ``image_embeds`` projections."""

    def __init__(
        self,
        model_name: str = "openai/clip-vit-base-patch32",
        device: str = "cpu",
        dim: int = 512,
        image_size: int = 224,
    ) -> None:
        self.model_name = model_name
        self.device = device
        self.dim = dim
        self.image_size = image_size
        self.name = "clip"
        self._model: Optional[Any] = None
        self._processor: Optional[Any] = None
        self._load_error: Optional[ModelError] = None
        self._load_lock = threading.Lock()
        self._call_lock = threading.Lock()

    def load(self) -> None:
        """
        Download (if needed) and load the model and its image processor.

        A failed load is remembered: later calls raise the same ModelError
        without attempting another download.
        """

        with self._load_lock:
            if self._model is not None:
                return
            if self._load_error is not None:
                raise self._load_error
            try:
                self._load_model()
            except ModelError as exc:
                self._load_error = exc
                logger.error("CLIP model %s could not be loaded: %s", self.model_name, exc)
                raise

    def _load_model(self) -> None:
        try:
            from transformers import CLIPImageProcessor, CLIPVisionModelWithProjection
        except ImportError as exc:
            raise ModelError("transformers and torch are required for the clip embedder.") from exc

        logger.info("Loading CLIP model %s on %s", self.model_name, self.device)
        try:
            processor = CLIPImageProcessor.from_pretrained(self.model_name)
            model = CLIPVisionModelWithProjection.from_pretrained(self.model_name)
            model.to(self.device)
            model.eval()
        except Exception as exc:  # noqa: BLE001 - surface any loader failure as a model error
            raise ModelError(f"Failed to load {self.model_name}: {exc}") from exc

        projection_dim = getattr(model.config, "projection_dim", None)
        if projection_dim:
            self.dim = int(projection_dim)
        self._processor = processor
        self._model = model
        logger.info("CLIP model loaded (dim=%d)", self.dim)

    def embed_image(self, image: Image.Image) -> np.ndarray:
        """Run the vision tower on a 3-channel image and return its projected embedding."""

        self.load()
        import torch

        assert self._model is not None and self._processor is not None

        with self._call_lock, torch.no_grad():
            inputs = self._processor(images=image, return_tensors="pt")
            inputs = {key: value.to(self.device) for key, value in inputs.items()}
            output = self._model(**inputs)
            embeds = output.image_embeds

        return embeds[0].cpu().numpy().astype(np.float32)
