"""Post routes."""

from uuid import UUID

import logfire
from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header, Request, Response, status
from pydantic import BaseModel, Field

from huddle.application.usecase.post import (
    CreatePostRequest,
    CreatePostResponse,
    CreatePostUseCase,
    DeletePostRequest,
    DeletePostResponse,
    DeletePostUseCase,
    GetPostRequest,
    GetPostResponse,
    GetPostUseCase,
    ModeratePostRequest,
    ModeratePostResponse,
    ModeratePostUseCase,
    ModerationDecision,
    PollInput,
)
from huddle.domain.error import DomainError
from huddle.domain.value import PostType
from huddle.interface.api.errors import (
    cache_header,
    http_error,
    invalid_request,
    require_user,
)

router = APIRouter(prefix="/{org}/posts", tags=["posts"], route_class=DishkaRoute)


class CreatePostAPIRequest(BaseModel):
    """API request for creating a post."""

    type: PostType = PostType.TEXT
    title: str | None = Field(default=None, max_length=300)
    rich_text: str = Field(default="", max_length=20000)
    group_id: UUID | None = None
    poll: PollInput | None = None
    pin: bool = False


@router.post("", response_model=CreatePostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    org: str,
    request: CreatePostAPIRequest,
    create_post_use_case: FromDishka[CreatePostUseCase],
    x_user_id: UUID | None = Header(default=None),
) -> CreatePostResponse:
    """Create a new post.

    Depending on the tenant's posting policy the post is published at once
    or queued for moderation.

    Raises:
        HTTPException: 401 without a member, 403 when the policy forbids
            posting, 400 on invalid content
    """
    user_id = require_user(x_user_id)
    try:
        use_case_request = CreatePostRequest(
            org=org,
            user_id=user_id,
            type=request.type,
            title=request.title,
            rich_text=request.rich_text,
            group_id=request.group_id,
            poll=request.poll,
            pin=request.pin,
        )
        return await create_post_use_case.execute(use_case_request)
    except DomainError as e:
        raise http_error(e, "create_post")
    except ValueError as e:
        raise invalid_request(e, "create_post")


@router.get("/{post_id}", response_model=GetPostResponse)
async def get_post(
    org: str,
    post_id: UUID,
    request: Request,
    response: Response,
    get_post_use_case: FromDishka[GetPostUseCase],
) -> GetPostResponse:
    """Get a single published post.

    Raises:
        HTTPException: 404 if the post does not exist or is not visible
    """
    try:
        result = await get_post_use_case.execute(
            GetPostRequest(org=org, post_id=post_id, path=request.url.path)
        )
    except DomainError as e:
        raise http_error(e, "get_post")
    response.headers.update(cache_header(result.cache_hit))
    return result


@router.delete("/{post_id}", response_model=DeletePostResponse)
async def delete_post(
    org: str,
    post_id: UUID,
    delete_post_use_case: FromDishka[DeletePostUseCase],
    x_user_id: UUID | None = Header(default=None),
) -> DeletePostResponse:
    """Soft-delete a post (author or moderator)."""
    user_id = require_user(x_user_id)
    try:
        return await delete_post_use_case.execute(
            DeletePostRequest(org=org, user_id=user_id, post_id=post_id)
        )
    except DomainError as e:
        raise http_error(e, "delete_post")


async def _moderate(
    org: str,
    post_id: UUID,
    decision: ModerationDecision,
    use_case: ModeratePostUseCase,
    x_user_id: UUID | None,
) -> ModeratePostResponse:
    user_id = require_user(x_user_id)
    logfire.info(
        "Moderation decision", org=org, post_id=str(post_id), decision=decision.value
    )
    try:
        return await use_case.execute(
            ModeratePostRequest(
                org=org, user_id=user_id, post_id=post_id, decision=decision
            )
        )
    except DomainError as e:
        raise http_error(e, "moderate_post")


@router.post("/{post_id}/approve", response_model=ModeratePostResponse)
async def approve_post(
    org: str,
    post_id: UUID,
    moderate_post_use_case: FromDishka[ModeratePostUseCase],
    x_user_id: UUID | None = Header(default=None),
) -> ModeratePostResponse:
    """Publish a post waiting for moderation."""
    return await _moderate(
        org, post_id, ModerationDecision.APPROVE, moderate_post_use_case, x_user_id
    )


@router.post("/{post_id}/reject", response_model=ModeratePostResponse)
async def reject_post(
    org: str,
    post_id: UUID,
    moderate_post_use_case: FromDishka[ModeratePostUseCase],
    x_user_id: UUID | None = Header(default=None),
) -> ModeratePostResponse:
    """Reject a post waiting for moderation."""
    return await _moderate(
        org, post_id, ModerationDecision.REJECT, moderate_post_use_case, x_user_id
    )
