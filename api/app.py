# Path: api/app.py
# Purpose: Expose a FastAPI application for photo-to-pet matching.
# Layer: api.
# Details: Builds the gallery index before serving, then delegates match requests to the core MatchService.

from __future__ import annotations

from contextlib import asynccontextmanager
from functools import partial
from typing import Any, Dict, Optional

import anyio
import anyio.to_thread
from fastapi import FastAPI, File, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool

from config import AppSettings
from core.embedders import create_embedder
from core.errors import DecodeError, IndexNotReadyError, ModelError, NoQueryImageError
from core.indexing.index_builder import GalleryIndexer
from core.logging_config import get_logger, setup_logging
from core.search.pipeline import MatchService

logger = get_logger(__name__)

SERVICE_NAME = "Pet-a-Likey API"
SERVICE_VERSION = "1.0.0"
MAX_LIMIT = 50


def build_service(settings: AppSettings) -> MatchService:
    """Wire a MatchService from settings without building the index."""

    embedder = create_embedder(settings.embedder)
    return MatchService(
        embedder=embedder,
        default_top_k=settings.gallery.top_k,
        ready_timeout=settings.server.ready_timeout,
    )


def parse_limit(raw: Optional[str]) -> Optional[int]:
    """Parse the optional ``limit`` query value, raising ValueError outside 1..MAX_LIMIT."""

    if raw is None:
        return None
    message = f"limit must be an integer between 1 and {MAX_LIMIT}"
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(message) from None
    if not 1 <= value <= MAX_LIMIT:
        raise ValueError(message)
    return value


def create_app(
    settings: Optional[AppSettings] = None,
    service: Optional[MatchService] = None,
    indexer: Optional[GalleryIndexer] = None,
) -> FastAPI:
    """Create a FastAPI app instance configured with the provided match service."""

    settings = settings or AppSettings.from_env()
    service = service or build_service(settings)
    indexer = indexer or GalleryIndexer(service.embedder, workers=settings.gallery.workers)
    images_dir = settings.gallery.images_dir

    def bootstrap() -> None:
        logger.info("Starting server initialization...")
        logger.info("Dog images directory: %s", images_dir)
        # A model that fails to load aborts startup.
        service.embedder.load()
        index = indexer.load_or_build(images_dir, settings.gallery.index_cache_path)
        service.set_index(index)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        setup_logging(settings.log_level)
        if not service.is_ready:
            # Startup completes only after the index is published.
            await run_in_threadpool(bootstrap)
        logger.info("%s ready with %d indexed photos", SERVICE_NAME, len(service.index or ()))
        yield

    app = FastAPI(title=SERVICE_NAME, version=SERVICE_VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.allowed_origins(),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    app.mount("/dog-images", StaticFiles(directory=str(images_dir), check_dir=False), name="dog-images")

    def error(status_code: int, message: str) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"error": message})

    @app.get("/")
    def info() -> Dict[str, Any]:
        """Return basic service information."""

        return {
            "name": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "endpoints": {
                "POST /api/match": "Upload a photo to find matching dogs",
                "GET /dog-images/:id": "Get a dog image by ID",
                "GET /health": "Health check",
            },
        }

    @app.get("/health")
    def health() -> Dict[str, Any]:
        """Return a simple health status payload."""

        index = service.index
        return {
            "status": "ok" if service.is_ready else "starting",
            "indexed": len(index) if index is not None else 0,
            "model": service.embedder.model_name,
        }

    @app.post("/api/match")
    async def match(
        photo: Optional[UploadFile] = File(default=None),
        limit: Optional[str] = Query(default=None),
    ):
        """Upload a photo to find the most similar gallery pets."""

        try:
            top_k = parse_limit(limit)
        except ValueError as exc:
            return error(400, str(exc))

        if photo is None:
            return error(400, "No image uploaded")
        try:
            data = await photo.read()
        finally:
            await photo.close()
        if not data:
            return error(400, "No image uploaded")

        try:
            with anyio.fail_after(settings.server.request_timeout):
                # The worker thread is abandoned on timeout; its result is discarded.
                results = await anyio.to_thread.run_sync(partial(service.match, data, top_k), abandon_on_cancel=True)
        except NoQueryImageError:
            return error(400, "No image uploaded")
        except DecodeError as exc:
            logger.warning("Rejected unreadable upload %s: %s", photo.filename, exc)
            return error(422, "Uploaded file is not a readable image")
        except IndexNotReadyError:
            return error(503, "Gallery index is not ready yet")
        except TimeoutError:
            logger.error("Match timed out after %.1fs", settings.server.request_timeout)
            return error(504, "Timed out computing match")
        except ModelError as exc:
            logger.error("Match error: %s", exc)
            return error(500, "Failed to compute match")

        return {"matches": [result.to_dict() for result in results]}

    return app
