"""Health check routes."""

from datetime import datetime, timezone
from typing import Literal

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from huddle.config import Settings
from huddle.domain.service import CacheStore

router = APIRouter(tags=["health"], route_class=DishkaRoute)


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "degraded"]
    timestamp: datetime
    git_sha: str
    cache_backend: str
    cache_reachable: bool


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: FromDishka[Settings],
    cache_store: FromDishka[CacheStore],
) -> HealthResponse:
    """Report liveness and whether the microcache backend answers.

    An unreachable cache is reported as ``degraded`` with status 200, so a
    liveness check does not restart workers over a cache outage.
    """
    reachable = await cache_store.ping()
    return HealthResponse(
        status="healthy" if reachable else "degraded",
        timestamp=datetime.now(timezone.utc),
        git_sha=settings.git_sha,
        cache_backend=settings.cache.backend,
        cache_reachable=reachable,
    )
