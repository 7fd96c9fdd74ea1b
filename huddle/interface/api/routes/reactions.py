"""Reaction routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header
from pydantic import BaseModel

from huddle.application.usecase.reaction import (
    ToggleReactionRequest,
    ToggleReactionResponse,
    ToggleReactionUseCase,
)
from huddle.domain.error import DomainError
from huddle.domain.value import ReactionType, TargetType
from huddle.interface.api.errors import http_error, require_user

router = APIRouter(
    prefix="/{org}/reactions", tags=["reactions"], route_class=DishkaRoute
)


class ToggleReactionAPIRequest(BaseModel):
    """API request for toggling a reaction."""

    target_type: TargetType
    target_id: UUID
    type: ReactionType


@router.post("", response_model=ToggleReactionResponse)
async def toggle_reaction(
    org: str,
    request: ToggleReactionAPIRequest,
    toggle_reaction_use_case: FromDishka[ToggleReactionUseCase],
    x_user_id: UUID | None = Header(default=None),
) -> ToggleReactionResponse:
    """Add, remove or switch the member's reaction on a post or comment.

    Sending the reaction the member already has removes it; sending another
    type switches to it.
    """
    user_id = require_user(x_user_id)
    try:
        return await toggle_reaction_use_case.execute(
            ToggleReactionRequest(
                org=org,
                user_id=user_id,
                target_type=request.target_type,
                target_id=request.target_id,
                type=request.type,
            )
        )
    except DomainError as e:
        raise http_error(e, "toggle_reaction")
