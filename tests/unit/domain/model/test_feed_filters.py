"""Unit tests for FeedFilters normalization."""

from datetime import date
from uuid import uuid4

import pytest

from huddle.domain.model import FeedFilters
from huddle.domain.model.feed import MAX_QUERY_LENGTH, clamp_limit
from huddle.domain.value import FeedTab, PostType


class TestFeedFilters:
    """Malformed input degrades to "not set" instead of failing."""

    def test_defaults(self):
        filters = FeedFilters()

        assert filters.q is None
        assert filters.page == 1
        assert filters.limit is None
        assert filters.my_groups is False

    def test_raw_query_strings_are_parsed(self):
        """String query parameters are coerced to their types."""
        # Arrange
        author_id = uuid4()

        # Act
        filters = FeedFilters.model_validate(
            {
                "q": "  budget  ",
                "type": "POLL",
                "tab": "announcements",
                "author_id": str(author_id),
                "from_date": "2024-06-10",
                "to_date": "2024-06-12T08:00:00Z",
                "my_groups": "true",
                "page": "3",
                "limit": "20",
            }
        )

        # Assert
        assert filters.q == "budget"
        assert filters.type == PostType.POLL
        assert filters.tab == FeedTab.ANNOUNCEMENTS
        assert filters.author_id == author_id
        assert filters.from_date == date(2024, 6, 10)
        assert filters.to_date == date(2024, 6, 12)
        assert filters.my_groups is True
        assert filters.page == 3
        assert filters.limit == 20

    def test_garbage_becomes_unset(self):
        """Unknown enums, bad UUIDs, bad dates and bad numbers are dropped."""
        filters = FeedFilters.model_validate(
            {
                "q": "   ",
                "type": "video",
                "tab": "trending",
                "author_id": "not-a-uuid",
                "from_date": "yesterday",
                "my_groups": "nope",
                "page": "-2",
                "limit": "lots",
            }
        )

        assert filters.q is None
        assert filters.type is None
        assert filters.tab is None
        assert filters.author_id is None
        assert filters.from_date is None
        assert filters.my_groups is False
        assert filters.page == 1
        assert filters.limit is None

    def test_long_query_is_truncated(self):
        filters = FeedFilters(q="x" * (MAX_QUERY_LENGTH + 50))

        assert len(filters.q) == MAX_QUERY_LENGTH


class TestClampLimit:
    """Tests for page size clamping."""

    @pytest.mark.parametrize(
        "raw,expected",
        [(None, 15), (0, 15), (-1, 15), (1, 5), (5, 5), (33, 33), (50, 50), (51, 50)],
    )
    def test_clamp(self, raw, expected):
        assert clamp_limit(raw, default=15, low=5, high=50) == expected
