"""FastAPI application."""

import time
from contextlib import asynccontextmanager

import logfire
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from huddle.config import Settings
from huddle.domain.model.perf import PerfSample
from huddle.domain.service import PerfRecorder
from huddle.interface.api.routes import (
    admin,
    comments,
    feed,
    health,
    polls,
    posts,
    reactions,
)
from huddle.util.di.container import create_container, setup_di
from huddle.util.observability import instrument_fastapi


def add_timing_middleware(app: FastAPI) -> None:
    """Record a perf sample for every request and expose it as Server-Timing.

    Args:
        app: FastAPI application with a DI container attached
    """

    @app.middleware("http")
    async def record_timing(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        # Route template, so samples aggregate across tenants and IDs
        route = request.scope.get("route")
        route_path = getattr(route, "path", request.url.path)

        recorder = await request.app.state.dishka_container.get(PerfRecorder)
        recorder.record(
            PerfSample(
                route=f"{request.method} {route_path}",
                duration_ms=round(duration_ms, 2),
            )
        )
        response.headers["Server-Timing"] = f"app;dur={duration_ms:.1f}"
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Close the DI container (engine, Redis pool) on shutdown."""
    yield
    await app.state.dishka_container.close()
    logfire.info("Container closed")


def create_app() -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.
    """
    settings = Settings()

    app_instance = FastAPI(
        title="Huddle API",
        description="Multi-tenant feed, microcache and points ledger for company social spaces",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "Accept",
            "Origin",
            "X-User-Id",
            "X-Requested-With",
        ],
        expose_headers=["Content-Length", "Content-Type", "X-Cache", "Server-Timing"],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    # Setup dependency injection
    # Settings are loaded from environment automatically
    container = create_container()
    setup_di(app_instance, container)

    add_timing_middleware(app_instance)

    # Register routes
    app_instance.include_router(health.router)
    app_instance.include_router(feed.router)
    app_instance.include_router(posts.router)
    app_instance.include_router(comments.router)
    app_instance.include_router(reactions.router)
    app_instance.include_router(polls.router)
    app_instance.include_router(admin.router)

    return app_instance
