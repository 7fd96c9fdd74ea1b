"""Logfire setup and library instrumentation.

Services log through ``logfire`` directly; this module only wires it up:

    logfire.info("Feed query served", total=total, count=len(items))

    with logfire.span("points_service.award", action=action.value):
        ...

Every request span carries the tenant slug taken from the ``{org}`` path
parameter, so traces can be filtered per tenant.
"""

from typing import Any

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from huddle.config import Settings

SERVICE_NAME = "huddle-api"


def _should_send(settings: Settings) -> bool:
    """Explicit setting wins, otherwise send only when a token is present."""
    if settings.observability.send_to_logfire is not None:
        return settings.observability.send_to_logfire
    return bool(settings.observability.logfire_token)


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire once per process.

    Console output is always on; cloud export follows ``OBSERVABILITY__*``.
    The deployed git SHA is reported as the service version.

    Args:
        settings: Application settings
    """
    send_to_logfire = _should_send(settings)

    logfire.configure(
        service_name=SERVICE_NAME,
        service_version=settings.git_sha,
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        token=settings.observability.logfire_token,
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        cache_backend=settings.cache.backend,
        send_to_logfire=send_to_logfire,
    )


def request_attributes(request: Any, attributes: dict[str, Any]) -> dict[str, Any]:
    """Add method, tenant and acting user to a request span.

    Args:
        request: Starlette request (or websocket)
        attributes: Attributes FastAPI instrumentation already collected

    Returns:
        Attributes to attach to the span
    """
    result = {**attributes}

    method = getattr(request, "method", None)
    if method:
        result["method"] = method

    path_params = getattr(request, "path_params", None) or {}
    if "org" in path_params:
        result["tenant"] = path_params["org"]

    headers = getattr(request, "headers", None)
    if headers is not None and headers.get("x-user-id"):
        result["user_id"] = headers["x-user-id"]

    return result


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every HTTP request, tagged with the tenant slug.

    Args:
        app: FastAPI application instance
    """
    logfire.instrument_fastapi(
        app,
        request_attributes_mapper=request_attributes,
        excluded_urls="/health",
    )
    logfire.info("FastAPI instrumented")


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace SQL statements issued through ``engine``.

    Args:
        engine: SQLAlchemy async engine
    """
    logfire.instrument_sqlalchemy(engine=engine.sync_engine, enable_commenter=True)
    logfire.info("SQLAlchemy instrumented")


def instrument_redis() -> None:
    """Trace cache commands (GET, SET, SCAN, DEL) sent to Redis."""
    logfire.instrument_redis(capture_statement=True)
    logfire.info("Redis instrumented")
