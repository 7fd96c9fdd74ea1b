"""Comment routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header, status
from pydantic import BaseModel, Field

from huddle.application.usecase.comment import (
    CreateCommentRequest,
    CreateCommentResponse,
    CreateCommentUseCase,
    DeleteCommentRequest,
    DeleteCommentResponse,
    DeleteCommentUseCase,
)
from huddle.domain.error import DomainError
from huddle.interface.api.errors import http_error, invalid_request, require_user

router = APIRouter(prefix="/{org}", tags=["comments"], route_class=DishkaRoute)


class CreateCommentAPIRequest(BaseModel):
    """API request for creating a comment or a reply."""

    content: str = Field(min_length=1, max_length=10000)
    parent_comment_id: UUID | None = None


@router.post(
    "/posts/{post_id}/comments",
    response_model=CreateCommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    org: str,
    post_id: UUID,
    request: CreateCommentAPIRequest,
    create_comment_use_case: FromDishka[CreateCommentUseCase],
    x_user_id: UUID | None = Header(default=None),
) -> CreateCommentResponse:
    """Comment on a post, or reply to a top-level comment.

    Raises:
        HTTPException: 404 for an unknown post or parent, 400 for a reply to
            a reply
    """
    user_id = require_user(x_user_id)
    try:
        return await create_comment_use_case.execute(
            CreateCommentRequest(
                org=org,
                user_id=user_id,
                post_id=post_id,
                content=request.content,
                parent_comment_id=request.parent_comment_id,
            )
        )
    except DomainError as e:
        raise http_error(e, "create_comment")
    except ValueError as e:
        raise invalid_request(e, "create_comment")


@router.delete("/comments/{comment_id}", response_model=DeleteCommentResponse)
async def delete_comment(
    org: str,
    comment_id: UUID,
    delete_comment_use_case: FromDishka[DeleteCommentUseCase],
    x_user_id: UUID | None = Header(default=None),
) -> DeleteCommentResponse:
    """Soft-delete a comment (author or moderator)."""
    user_id = require_user(x_user_id)
    try:
        return await delete_comment_use_case.execute(
            DeleteCommentRequest(org=org, user_id=user_id, comment_id=comment_id)
        )
    except DomainError as e:
        raise http_error(e, "delete_comment")
