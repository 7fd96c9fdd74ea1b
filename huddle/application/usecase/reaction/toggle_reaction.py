"""Toggle reaction use case."""

from typing import Optional
from uuid import UUID

import logfire
from pydantic import BaseModel

from huddle.application.usecase.base import BaseUseCase, best_effort, invalidate_post
from huddle.domain.service import (
    CompanyService,
    MicrocacheService,
    PointsService,
    ReactionService,
)
from huddle.domain.value import ReactionType, TargetType, UserId


class ToggleReactionRequest(BaseModel):
    """Toggle reaction request."""

    org: str
    user_id: UUID
    target_type: TargetType
    target_id: UUID
    type: ReactionType


class ToggleReactionResponse(BaseModel):
    """Toggle reaction response."""

    target_type: TargetType
    target_id: str
    previous: Optional[ReactionType]
    current: Optional[ReactionType]
    reactions_count_by_type: Optional[dict[str, int]] = None  # Post targets only


class ToggleReactionUseCase(BaseUseCase):
    """Use case for adding, removing or switching a reaction."""

    def __init__(
        self,
        company_service: CompanyService,
        reaction_service: ReactionService,
        points_service: PointsService,
        microcache: MicrocacheService,
    ) -> None:
        """Initialize toggle reaction use case.

        Args:
            company_service: Tenant and member resolution
            reaction_service: Reaction domain service
            points_service: Points ledger
            microcache: Cache to invalidate
        """
        self.company_service = company_service
        self.reaction_service = reaction_service
        self.points_service = points_service
        self.microcache = microcache

    async def execute(self, request: ToggleReactionRequest) -> ToggleReactionResponse:
        """Execute toggle reaction flow.

        Point events mirror the toggle: the previous reaction is reversed
        before the new one is granted.

        Args:
            request: Toggle reaction request

        Returns:
            Reaction state before and after the toggle
        """
        with logfire.span(
            "toggle_reaction.execute",
            target_type=request.target_type.value,
            target_id=str(request.target_id),
        ):
            company = await self.company_service.resolve_tenant(request.org)
            user = await self.company_service.resolve_member(
                company, UserId(request.user_id)
            )

            toggle = await self.reaction_service.toggle(
                company, user, request.target_type, request.target_id, request.type
            )

            await best_effort(
                self.points_service.award_reaction_change(
                    company,
                    reactor_id=user.id,
                    owner_id=toggle.owner_id,
                    target_type=toggle.target_type,
                    target_id=toggle.target_id,
                    previous=toggle.previous,
                    current=toggle.current,
                    post_id=toggle.post.id,
                    comment_id=toggle.comment_id,
                ),
                "award_reaction_change",
                target_id=str(toggle.target_id),
            )
            await invalidate_post(
                self.microcache,
                company.slug.root,
                toggle.post,
                feeds=toggle.target_type == TargetType.POST,
            )

            counts = None
            if toggle.target_type == TargetType.POST:
                counts = dict(toggle.post.reactions_count_by_type)
                if toggle.previous is not None:
                    counts[toggle.previous] = max(0, counts.get(toggle.previous, 0) - 1)
                if toggle.current is not None:
                    counts[toggle.current] = counts.get(toggle.current, 0) + 1

            return ToggleReactionResponse(
                target_type=toggle.target_type,
                target_id=str(toggle.target_id),
                previous=toggle.previous,
                current=toggle.current,
                reactions_count_by_type={k.value: v for k, v in counts.items()}
                if counts is not None
                else None,
            )
