"""Perf recorder.

Keeps the most recent route timings and cache events in bounded ring
buffers and aggregates them on demand for the admin perf view. State lives
on the recorder instance, which the container provides once per
application.
"""

import math
from collections import deque
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional

from huddle.domain.model.common import utcnow
from huddle.domain.model.perf import (
    CacheCounts,
    CacheEvent,
    CacheEventType,
    CacheSummary,
    PerfAggregate,
    PerfSample,
    SeriesPoint,
)
from huddle.domain.value import CompanyId

from .base import Service

SUMMARY_WINDOW = 200


def p95(values: list[float]) -> float:
    """95th percentile by nearest rank (rounded down), 0 for no values."""
    if not values:
        return 0.0
    ordered = sorted(values)
    index = max(0, min(len(ordered) - 1, math.floor(len(ordered) * 0.95) - 1))
    return ordered[index]


def _floor_to_minute(moment: datetime) -> datetime:
    return moment.replace(second=0, microsecond=0)


def _count_events(events: Iterable[CacheEvent]) -> CacheCounts:
    totals = {CacheEventType.HIT: 0, CacheEventType.MISS: 0, CacheEventType.BUST: 0}
    for event in events:
        totals[event.type] += event.count or 1
    lookups = totals[CacheEventType.HIT] + totals[CacheEventType.MISS]
    hit_rate = round(totals[CacheEventType.HIT] / lookups * 100) if lookups else 0
    return CacheCounts(
        hit=totals[CacheEventType.HIT],
        miss=totals[CacheEventType.MISS],
        bust=totals[CacheEventType.BUST],
        hit_rate=hit_rate,
    )


class PerfRecorder(Service):
    """Ring-buffer sink for route timings and cache events."""

    def __init__(
        self,
        max_samples: int = 3000,
        max_cache_events: int = 4000,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize the recorder.

        Args:
            max_samples: Capacity of the timing ring buffer
            max_cache_events: Capacity of the cache event ring buffer
            clock: Source of the current time
        """
        self._samples: deque[PerfSample] = deque(maxlen=max_samples)
        self._cache_events: deque[CacheEvent] = deque(maxlen=max_cache_events)
        self._clock = clock

    def record(self, sample: PerfSample) -> None:
        """Append a timing sample, dropping the oldest when full."""
        self._samples.append(sample)

    def cache_event(
        self, type: CacheEventType, key: str, count: int = 1
    ) -> None:
        """Append a cache event, dropping the oldest when full."""
        self._cache_events.append(
            CacheEvent(type=type, key=key, count=count, at=self._clock())
        )

    def recent(self, limit: int = 100) -> list[PerfSample]:
        """Most recent samples, oldest first."""
        if limit <= 0:
            return []
        return list(self._samples)[-limit:]

    def cache_summary(self) -> CacheSummary:
        """Totals over the last cache events, newest event first."""
        last = list(self._cache_events)[-SUMMARY_WINDOW:]
        return CacheSummary(counts=_count_events(last), recent=list(reversed(last)))

    def aggregate(
        self,
        minutes: int = 60,
        company_id: Optional[CompanyId] = None,
        slug: Optional[str] = None,
    ) -> PerfAggregate:
        """Latency, throughput and cache hit rate over a trailing window.

        Args:
            minutes: Window length
            company_id: Restrict timings to one tenant (unscoped samples
                are always included)
            slug: Restrict cache events to keys of one tenant

        Returns:
            Aggregated figures
        """
        minutes = max(1, minutes)
        now = self._clock()
        samples = self._scoped_samples(now - timedelta(minutes=minutes), company_id)
        durations = [s.duration_ms for s in samples]
        avg = sum(durations) / len(durations) if durations else 0.0

        events = self._scoped_events(now - timedelta(minutes=minutes), slug)
        return PerfAggregate(
            window_minutes=minutes,
            now=now,
            avg_ms=round(avg),
            p95_ms=round(p95(durations)),
            rpm=round(len(samples) / minutes),
            cache=_count_events(events),
        )

    def series(
        self,
        minutes: int = 15,
        company_id: Optional[CompanyId] = None,
        slug: Optional[str] = None,
    ) -> list[SeriesPoint]:
        """Per-minute buckets for the last ``minutes`` minutes, oldest first."""
        minutes = max(1, minutes)
        now = self._clock()
        since = now - timedelta(minutes=minutes)

        durations: dict[datetime, list[float]] = {}
        for sample in self._scoped_samples(since, company_id):
            durations.setdefault(_floor_to_minute(sample.at), []).append(
                sample.duration_ms
            )

        cache: dict[datetime, list[CacheEvent]] = {}
        for event in self._scoped_events(since, slug):
            cache.setdefault(_floor_to_minute(event.at), []).append(event)

        points = []
        current = _floor_to_minute(now)
        for offset in range(minutes - 1, -1, -1):
            bucket = current - timedelta(minutes=offset)
            values = durations.get(bucket, [])
            counts = _count_events(cache.get(bucket, []))
            points.append(
                SeriesPoint(
                    at=bucket,
                    avg_ms=round(sum(values) / len(values)) if values else 0,
                    p95_ms=round(p95(values)),
                    rpm=len(values),
                    hit=counts.hit,
                    miss=counts.miss,
                    bust=counts.bust,
                )
            )
        return points

    def recent_slow(
        self,
        threshold_ms: float = 400,
        limit: int = 20,
        company_id: Optional[CompanyId] = None,
    ) -> list[PerfSample]:
        """Slowest recent requests, newest first."""
        slow = [
            s
            for s in self._samples
            if s.duration_ms >= threshold_ms
            and (company_id is None or s.company_id in (None, company_id))
        ]
        return list(reversed(slow[-SUMMARY_WINDOW:]))[:limit]

    def _scoped_samples(
        self, since: datetime, company_id: Optional[CompanyId]
    ) -> list[PerfSample]:
        return [
            s
            for s in self._samples
            if s.at >= since
            and (company_id is None or s.company_id in (None, company_id))
        ]

    def _scoped_events(self, since: datetime, slug: Optional[str]) -> list[CacheEvent]:
        needle = f":{slug}:" if slug else None
        return [
            e
            for e in self._cache_events
            if e.at >= since and (needle is None or needle in e.key)
        ]
