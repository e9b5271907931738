# Path: scripts/serve_api.py
# Purpose: Run the HTTP API with uvicorn.
# Layer: scripts.
# Details: Settings come from environment variables; host and port may be overridden on the command line.

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import uvicorn

# Ensure project root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import AppSettings
from api.app import create_app


def main() -> None:
    """Start the pet match API server."""

    settings = AppSettings.from_env()

    parser = argparse.ArgumentParser(description="Serve the pet match API")
    parser.add_argument("--host", default=settings.server.host, help="Interface to bind")
    parser.add_argument("--port", type=int, default=settings.server.port, help="Port to listen on")
    args = parser.parse_args()

    app = create_app(settings)
    uvicorn.run(app, host=args.host, port=args.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
