"""Unit tests for PerfRecorder."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from huddle.domain.model.perf import CacheEventType, PerfSample
from huddle.domain.service import PerfRecorder
from huddle.domain.service.perf_service import p95
from huddle.domain.value import CompanyId

NOW = datetime(2024, 4, 1, 10, 30, 30, tzinfo=timezone.utc)


def sample(ms: float, minutes_ago: float = 0, company_id=None) -> PerfSample:
    return PerfSample(
        route="GET /{org}/feed",
        duration_ms=ms,
        company_id=company_id,
        at=NOW - timedelta(minutes=minutes_ago),
    )


class TestP95:
    """Tests for the nearest-rank percentile."""

    @pytest.mark.parametrize(
        "values,expected",
        [
            ([], 0.0),
            ([7.0], 7.0),
            ([3.0, 1.0, 2.0], 2.0),
            ([float(i) for i in range(1, 101)], 95.0),
            ([float(i) for i in range(1, 21)], 19.0),
        ],
    )
    def test_nearest_rank(self, values, expected):
        """Index is floor(n * 0.95) - 1 clamped into range."""
        assert p95(values) == expected


class TestRingBuffers:
    """Tests for bounded storage."""

    def test_oldest_samples_are_dropped(self):
        """The timing buffer keeps only the newest samples."""
        recorder = PerfRecorder(max_samples=3, clock=lambda: NOW)

        for ms in (1, 2, 3, 4, 5):
            recorder.record(sample(ms))

        assert [s.duration_ms for s in recorder.recent(10)] == [3, 4, 5]

    def test_recent_with_non_positive_limit_is_empty(self):
        recorder = PerfRecorder(clock=lambda: NOW)
        recorder.record(sample(1))

        assert recorder.recent(0) == []

    def test_cache_summary_is_newest_first(self):
        """Recent cache events are listed newest first with totals."""
        # Arrange
        recorder = PerfRecorder(max_cache_events=10, clock=lambda: NOW)

        # Act
        recorder.cache_event(CacheEventType.MISS, "feed:v1:acme:a")
        recorder.cache_event(CacheEventType.HIT, "feed:v1:acme:a")
        recorder.cache_event(CacheEventType.HIT, "feed:v1:acme:a")
        recorder.cache_event(CacheEventType.BUST, "feed:v1:acme:*", count=4)
        summary = recorder.cache_summary()

        # Assert
        assert summary.recent[0].type == CacheEventType.BUST
        assert summary.counts.hit == 2
        assert summary.counts.miss == 1
        assert summary.counts.bust == 4
        assert summary.counts.hit_rate == 67


class TestAggregate:
    """Tests for windowed aggregation."""

    def test_window_and_tenant_scoping(self):
        """Only samples in the window and of the tenant (or unscoped) count."""
        # Arrange
        acme, globex = CompanyId(uuid4()), CompanyId(uuid4())
        recorder = PerfRecorder(clock=lambda: NOW)
        recorder.record(sample(100, minutes_ago=1, company_id=acme))
        recorder.record(sample(300, minutes_ago=2, company_id=acme))
        recorder.record(sample(200, minutes_ago=3))
        recorder.record(sample(900, minutes_ago=2, company_id=globex))
        recorder.record(sample(5000, minutes_ago=90, company_id=acme))

        # Act
        aggregate = recorder.aggregate(minutes=60, company_id=acme)

        # Assert
        assert aggregate.window_minutes == 60
        assert aggregate.avg_ms == 200
        assert aggregate.p95_ms == 200
        assert aggregate.rpm == 0
        assert aggregate.now == NOW

    def test_cache_counts_scoped_by_slug(self):
        """Cache events of other tenants are ignored."""
        recorder = PerfRecorder(clock=lambda: NOW)
        recorder.cache_event(CacheEventType.HIT, "feed:v1:acme:a")
        recorder.cache_event(CacheEventType.MISS, "feed:v1:globex:a")

        aggregate = recorder.aggregate(minutes=5, slug="acme")

        assert aggregate.cache.hit == 1
        assert aggregate.cache.miss == 0
        assert aggregate.cache.hit_rate == 100

    def test_empty_window(self):
        recorder = PerfRecorder(clock=lambda: NOW)

        aggregate = recorder.aggregate(minutes=0)

        assert aggregate.window_minutes == 1
        assert (aggregate.avg_ms, aggregate.p95_ms, aggregate.rpm) == (0, 0, 0)
        assert aggregate.cache.hit_rate == 0


class TestSeries:
    """Tests for per-minute buckets."""

    def test_buckets_are_oldest_first(self):
        """One bucket per minute, including empty ones."""
        # Arrange
        recorder = PerfRecorder(clock=lambda: NOW)
        recorder.record(sample(10, minutes_ago=0))
        recorder.record(sample(30, minutes_ago=0))
        recorder.record(sample(50, minutes_ago=2))

        # Act
        points = recorder.series(minutes=3)

        # Assert
        assert [p.at.minute for p in points] == [28, 29, 30]
        assert points[0].rpm == 1
        assert points[0].avg_ms == 50
        assert points[1].rpm == 0
        assert points[2].rpm == 2
        assert points[2].avg_ms == 20


class TestRecentSlow:
    """Tests for the slow request list."""

    def test_threshold_and_order(self):
        """Requests at or above the threshold, newest first."""
        recorder = PerfRecorder(clock=lambda: NOW)
        for ms in (100, 400, 800, 50, 1200):
            recorder.record(sample(ms))

        slow = recorder.recent_slow(threshold_ms=400, limit=2)

        assert [s.duration_ms for s in slow] == [1200, 800]
