# Path: api/__init__.py
# Purpose: Package initializer for HTTP API layer.
# Layer: api.
# Details: Exposes the FastAPI application factory and service wiring helper.

from .app import build_service, create_app

__all__ = ["build_service", "create_app"]
