"""Feed routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header, Query, Request, Response

from huddle.application.usecase.feed import (
    ListFeedRequest,
    ListFeedResponse,
    ListFeedUseCase,
)
from huddle.domain.error import DomainError
from huddle.domain.model.feed import FeedFilters
from huddle.interface.api.errors import cache_header, http_error

router = APIRouter(prefix="/{org}", tags=["feed"], route_class=DishkaRoute)


def parse_filters(
    q: str | None,
    type: str | None,
    tab: str | None,
    author_id: str | None,
    people: str | None,
    from_date: str | None,
    to_date: str | None,
    my_groups: str | None,
    page: str | None,
    limit: str | None,
) -> FeedFilters:
    """Build feed filters from raw query parameters.

    Every parameter is taken as a string so malformed values are normalized
    by ``FeedFilters`` instead of being rejected.
    """
    return FeedFilters.model_validate(
        {
            "q": q,
            "type": type,
            "tab": tab,
            "author_id": author_id,
            "people": people,
            "from_date": from_date,
            "to_date": to_date,
            "my_groups": my_groups,
            "page": page,
            "limit": limit,
        }
    )


async def _list_feed(
    use_case: ListFeedUseCase,
    request: ListFeedRequest,
    response: Response,
) -> ListFeedResponse:
    try:
        result = await use_case.execute(request)
    except DomainError as e:
        raise http_error(e, "list_feed")
    response.headers.update(cache_header(result.cache_hit))
    return result


@router.get("/feed", response_model=ListFeedResponse)
async def company_feed(
    org: str,
    request: Request,
    response: Response,
    list_feed_use_case: FromDishka[ListFeedUseCase],
    x_user_id: UUID | None = Header(default=None),
    q: str | None = None,
    type: str | None = None,
    tab: str | None = None,
    author_id: str | None = None,
    people: str | None = None,
    from_date: str | None = Query(default=None, alias="from"),
    to_date: str | None = Query(default=None, alias="to"),
    my_groups: str | None = None,
    page: str | None = None,
    limit: str | None = None,
) -> ListFeedResponse:
    """Company-wide feed.

    Pinned posts first, then active polls, then newest. With ``q`` the feed
    switches to search ranking.

    Raises:
        HTTPException: 404 for an unknown tenant
    """
    filters = parse_filters(
        q, type, tab, author_id, people, from_date, to_date, my_groups, page, limit
    )
    return await _list_feed(
        list_feed_use_case,
        ListFeedRequest(
            org=org, filters=filters, user_id=x_user_id, path=request.url.path
        ),
        response,
    )


@router.get("/groups/{group_id}/feed", response_model=ListFeedResponse)
async def group_feed(
    org: str,
    group_id: UUID,
    request: Request,
    response: Response,
    list_feed_use_case: FromDishka[ListFeedUseCase],
    x_user_id: UUID | None = Header(default=None),
    q: str | None = None,
    type: str | None = None,
    tab: str | None = None,
    author_id: str | None = None,
    people: str | None = None,
    from_date: str | None = Query(default=None, alias="from"),
    to_date: str | None = Query(default=None, alias="to"),
    page: str | None = None,
    limit: str | None = None,
) -> ListFeedResponse:
    """Feed of a single group.

    Raises:
        HTTPException: 404 for an unknown tenant or group
    """
    filters = parse_filters(
        q, type, tab, author_id, people, from_date, to_date, None, page, limit
    )
    return await _list_feed(
        list_feed_use_case,
        ListFeedRequest(
            org=org,
            filters=filters,
            group_id=group_id,
            user_id=x_user_id,
            path=request.url.path,
        ),
        response,
    )
