#!/usr/bin/env python3
"""Serve the API with uvicorn.

Usage:
    python scripts/start_app.py [--workers N]
"""

import argparse
import sys

import logfire
import uvicorn

from huddle.config import Settings
from huddle.util.observability import configure_logfire


def main(argv: list[str] | None = None) -> int:
    """Start uvicorn; startup failures are logged to Logfire and re-raised."""
    parser = argparse.ArgumentParser(description="Run the huddle API")
    parser.add_argument("--workers", type=int, default=1)
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    settings = Settings()
    configure_logfire(settings)

    if args.workers > 1 and settings.cache.backend == "memory":
        # Each worker keeps its own store; busts in one worker miss the others
        logfire.warn(
            "In-memory microcache with several workers; set CACHE__BACKEND=redis",
            workers=args.workers,
        )

    logfire.info(
        "Starting API",
        cache_backend=settings.cache.backend,
        port=settings.port,
        workers=args.workers,
    )
    try:
        uvicorn.run(
            "huddle.interface.api.app:create_app",
            factory=True,
            host="0.0.0.0",
            port=settings.port,
            workers=args.workers,
            log_level="debug" if settings.debug else "info",
        )
    except Exception:
        logfire.exception("Application startup failed")
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
