# Path: config/settings.py
# Purpose: Provide typed application configuration models.
# Layer: config.
# Details: Centralizes settings for the embedder, gallery indexing, and the HTTP server.

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class EmbedderSettings(BaseModel):
    """Settings describing which embedder implementation to use and how to load it."""

    name: str = Field(default="clip", description="Identifier of the embedder implementation.")
    model_name: str = Field(
        default="openai/clip-vit-base-patch32",
        description="Pretrained model identifier passed to the embedder.",
    )
    device: str = Field(default="cpu", description="Target device for model execution.")
    image_size: int = Field(default=224, description="Square input resolution used for cover-fit resizing.")


class GallerySettings(BaseModel):
    """Settings controlling where gallery images live and how they are indexed."""

    images_dir: Path = Field(default=Path("dog-images"), description="Folder containing the reference pet images.")
    workers: int = Field(default=1, ge=1, description="Number of threads used to embed gallery images.")
    index_cache_path: Optional[Path] = Field(
        default=None,
        description="Optional path of a serialized index reused across restarts.",
    )
    top_k: int = Field(default=5, description="Default number of matches returned per request.")


class ServerSettings(BaseModel):
    """Settings for the HTTP layer."""

    host: str = Field(default="0.0.0.0", description="Interface the HTTP server binds to.")
    port: int = Field(default=3000, description="Port the HTTP server listens on.")
    cors_origins: str = Field(default="*", description="Allowed CORS origins, '*' or a comma separated list.")
    request_timeout: float = Field(default=30.0, gt=0, description="Seconds a match request may take.")
    ready_timeout: float = Field(
        default=0.0,
        ge=0,
        description="Seconds a match request waits for the gallery index before failing.",
    )

    def allowed_origins(self) -> List[str]:
        """Return CORS origins as a list suitable for the middleware."""

        if self.cors_origins.strip() == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


class AppSettings(BaseModel):
    """Top-level application settings shared across services and interfaces."""

    embedder: EmbedderSettings = Field(default_factory=EmbedderSettings)
    gallery: GallerySettings = Field(default_factory=GallerySettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    log_level: str = Field(default="INFO", description="Verbosity level for application logs.")

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "AppSettings":
        """Instantiate settings, overlaying values found in environment variables."""

        env = os.environ if environ is None else environ

        embedder: Dict[str, Any] = {}
        gallery: Dict[str, Any] = {}
        server: Dict[str, Any] = {}
        top: Dict[str, Any] = {}

        _copy(env, "EMBEDDER", embedder, "name")
        _copy(env, "MODEL_NAME", embedder, "model_name")
        _copy(env, "DEVICE", embedder, "device")
        _copy(env, "DOG_IMAGES_DIR", gallery, "images_dir")
        _copy(env, "INDEX_CACHE_PATH", gallery, "index_cache_path")
        _copy(env, "INDEX_WORKERS", gallery, "workers")
        _copy(env, "TOP_K", gallery, "top_k")
        _copy(env, "PORT", server, "port")
        _copy(env, "CORS_ORIGINS", server, "cors_origins")
        _copy(env, "REQUEST_TIMEOUT", server, "request_timeout")
        _copy(env, "LOG_LEVEL", top, "log_level")

        # pydantic coerces the raw strings into the declared field types.
        return cls(
            embedder=EmbedderSettings(**embedder),
            gallery=GallerySettings(**gallery),
            server=ServerSettings(**server),
            **top,
        )


def _copy(env: Any, key: str, target: Dict[str, Any], field: str) -> None:
    value = env.get(key)
    if value not in (None, ""):
        target[field] = value


__all__ = ["AppSettings", "EmbedderSettings", "GallerySettings", "ServerSettings"]
