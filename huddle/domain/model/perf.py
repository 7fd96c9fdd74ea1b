"""Perf recorder samples and aggregates."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from huddle.domain.model.common import utcnow
from huddle.domain.value import CompanyId
from huddle.domain.value.common import ValueObject


class CacheEventType(str, Enum):
    """Microcache outcome."""

    HIT = "hit"
    MISS = "miss"
    BUST = "bust"


class PerfSample(ValueObject):
    """Timing of one feed query or HTTP request."""

    route: str = "unknown"
    duration_ms: float = Field(default=0.0, ge=0)
    count: int = 0
    page: Optional[int] = None
    limit: Optional[int] = None
    company_id: Optional[CompanyId] = None
    at: datetime = Field(default_factory=utcnow)


class CacheEvent(ValueObject):
    """A hit, miss or bust observed by the microcache."""

    type: CacheEventType
    key: str
    count: int = 1
    at: datetime = Field(default_factory=utcnow)


class CacheCounts(ValueObject):
    """Hit, miss and bust totals with the resulting hit rate (percent)."""

    hit: int = 0
    miss: int = 0
    bust: int = 0
    hit_rate: int = 0


class CacheSummary(ValueObject):
    """Totals over the most recent cache events, newest event first."""

    counts: CacheCounts
    recent: list[CacheEvent]


class PerfAggregate(ValueObject):
    """Latency, throughput and cache figures over a trailing window."""

    window_minutes: int
    now: datetime
    avg_ms: int
    p95_ms: int
    rpm: int
    cache: CacheCounts


class SeriesPoint(ValueObject):
    """One minute bucket of the perf series."""

    at: datetime
    avg_ms: int = 0
    p95_ms: int = 0
    rpm: int = 0
    hit: int = 0
    miss: int = 0
    bust: int = 0
