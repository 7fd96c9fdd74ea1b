"""Poll routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header
from pydantic import BaseModel, Field

from huddle.application.usecase.poll import (
    ClosePollRequest,
    ClosePollUseCase,
    PollResponse,
    VotePollRequest,
    VotePollUseCase,
)
from huddle.domain.error import DomainError
from huddle.interface.api.errors import http_error, invalid_request, require_user

router = APIRouter(
    prefix="/{org}/posts/{post_id}/poll", tags=["polls"], route_class=DishkaRoute
)


class VoteAPIRequest(BaseModel):
    """API request for voting: question ID to chosen option IDs."""

    selections: dict[UUID, list[UUID]] = Field(min_length=1)


@router.post("/votes", response_model=PollResponse)
async def vote(
    org: str,
    post_id: UUID,
    request: VoteAPIRequest,
    vote_poll_use_case: FromDishka[VotePollUseCase],
    x_user_id: UUID | None = Header(default=None),
) -> PollResponse:
    """Cast the member's single vote on a poll.

    Raises:
        HTTPException: 400 when the poll is closed, the member already voted
            or the selections are invalid
    """
    user_id = require_user(x_user_id)
    try:
        return await vote_poll_use_case.execute(
            VotePollRequest(
                org=org,
                user_id=user_id,
                post_id=post_id,
                selections=request.selections,
            )
        )
    except DomainError as e:
        raise http_error(e, "vote_poll")
    except ValueError as e:
        raise invalid_request(e, "vote_poll")


@router.post("/close", response_model=PollResponse)
async def close_poll(
    org: str,
    post_id: UUID,
    close_poll_use_case: FromDishka[ClosePollUseCase],
    x_user_id: UUID | None = Header(default=None),
) -> PollResponse:
    """Close a poll (author or moderator)."""
    user_id = require_user(x_user_id)
    try:
        return await close_poll_use_case.execute(
            ClosePollRequest(org=org, user_id=user_id, post_id=post_id)
        )
    except DomainError as e:
        raise http_error(e, "close_poll")
