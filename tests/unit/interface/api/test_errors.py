"""Unit tests for the HTTP error mapping."""

from uuid import uuid4

import pytest
from fastapi import HTTPException

from huddle.domain.error import (
    BusinessRuleViolationError,
    NotAuthorizedError,
    NotFoundError,
    TenantNotFoundError,
    ValidationError,
)
from huddle.interface.api.errors import (
    cache_header,
    http_error,
    invalid_request,
    require_user,
)


class TestHttpError:
    """Tests for http_error."""

    @pytest.mark.parametrize(
        "error,expected",
        [
            (NotFoundError("Post", "123"), 404),
            (TenantNotFoundError("nowhere"), 404),
            (NotAuthorizedError("delete", "post 123", "u1"), 403),
            (BusinessRuleViolationError("Poll is closed"), 400),
            (ValidationError("Comment cannot be empty"), 400),
        ],
    )
    def test_status_codes(self, error, expected):
        """Domain errors map onto 404, 403 and 400."""
        exc = http_error(error, "test")

        assert isinstance(exc, HTTPException)
        assert exc.status_code == expected
        assert exc.detail == str(error)

    def test_invalid_request_is_400(self):
        exc = invalid_request(ValueError("bad poll"), "create_post")

        assert exc.status_code == 400
        assert exc.detail == "bad poll"


class TestRequireUser:
    """Tests for require_user."""

    def test_missing_header_is_401(self):
        with pytest.raises(HTTPException) as exc_info:
            require_user(None)

        assert exc_info.value.status_code == 401

    def test_present_header_passes_through(self):
        user_id = uuid4()

        assert require_user(user_id) == user_id


class TestCacheHeader:
    """Tests for cache_header."""

    def test_hit_and_miss(self):
        assert cache_header(True) == {"X-Cache": "HIT"}
        assert cache_header(False) == {"X-Cache": "MISS"}
