"""Points ledger domain service.

Awards are idempotent: each logical event maps to one ``EventKey`` and the
ledger's unique constraints keep a single row per key. Zero-point awards
never write a row.
"""

from datetime import date
from typing import List, Optional
from uuid import UUID, uuid4

import logfire
from sqlalchemy.exc import IntegrityError

from huddle.domain.model.company import Company
from huddle.domain.model.point_event import (
    EventKey,
    LeaderboardRow,
    PointEvent,
    PointMeta,
)
from huddle.domain.repository import PointEventRepository, UserRepository
from huddle.domain.value import (
    CommentId,
    CompanyId,
    PointAction,
    PointDirection,
    PointEventId,
    Polarity,
    PostId,
    ReactionType,
    TargetType,
    UserId,
)

from .base import Service
from .feed_service import end_of_day, start_of_day

LEADERBOARD_LIMIT = 200


def points_for_action(
    company: Company, action: PointAction, meta: Optional[PointMeta] = None
) -> int:
    """Unsigned rule value of an action for a tenant.

    Args:
        company: Tenant whose rules apply
        action: Scorable action
        meta: Event context (reaction type for reaction actions)

    Returns:
        Rule value, 0 when gamification is off or the action is unconfigured
    """
    rules = company.gamification.active_rules
    if rules is None:
        return 0
    reaction_type = meta.reaction_type if meta else None
    return rules.points_for(action, reaction_type)


class PointsService(Service):
    """Domain service for the gamification points ledger."""

    def __init__(
        self,
        point_event_repository: PointEventRepository,
        user_repository: UserRepository,
    ) -> None:
        """Initialize points service.

        Args:
            point_event_repository: Ledger repository
            user_repository: User repository (leaderboard names)
        """
        self.point_event_repository = point_event_repository
        self.user_repository = user_repository

    async def award(
        self,
        company: Company,
        user_id: UserId,
        action: PointAction,
        target_type: TargetType,
        target_id: UUID,
        actor_user_id: Optional[UserId] = None,
        meta: Optional[PointMeta] = None,
        polarity: Polarity = Polarity.ADD,
    ) -> Optional[PointEvent]:
        """Record a point award or reversal.

        A repeated call with the same arguments is a no-op.

        Args:
            company: Tenant (supplies the rules)
            user_id: User credited or debited
            action: Scorable action
            target_type: Post or comment the action concerns
            target_id: Target ID
            actor_user_id: User who performed the action
            meta: Event context
            polarity: ADD for grants, REMOVE for reversals

        Returns:
            The new ledger row, or None when nothing was written (rules off,
            zero points, or already recorded)

        Raises:
            Exception: Database errors other than duplicate keys propagate
        """
        if company.gamification.active_rules is None:
            return None

        meta = meta or PointMeta()
        points = points_for_action(company, action, meta) * int(polarity)
        if points == 0:
            return None

        key = EventKey(
            action=action,
            company_id=company.id,
            user_id=user_id,
            target_type=target_type,
            target_id=target_id,
            reaction_type=meta.reaction_type,
            direction=meta.direction,
            post_id=meta.post_id,
            comment_id=meta.comment_id,
            parent_comment_id=meta.parent_comment_id,
            polarity=polarity,
        )
        event = PointEvent(
            id=PointEventId(uuid4()),
            company_id=company.id,
            user_id=user_id,
            actor_user_id=actor_user_id,
            action=action,
            points=points,
            event_key=key.serialize(),
            target_type=target_type,
            target_id=target_id,
            meta=meta,
        )

        with logfire.span(
            "points.award",
            company_id=str(company.id),
            user_id=str(user_id),
            action=action.value,
            points=points,
        ):
            try:
                saved = await self.point_event_repository.add(event)
            except IntegrityError:
                logfire.info(
                    "Point event already recorded",
                    user_id=str(user_id),
                    action=action.value,
                )
                return None
            return saved

    async def award_reaction_change(
        self,
        company: Company,
        reactor_id: UserId,
        owner_id: Optional[UserId],
        target_type: TargetType,
        target_id: UUID,
        previous: Optional[ReactionType],
        current: Optional[ReactionType],
        post_id: Optional[PostId] = None,
        comment_id: Optional[CommentId] = None,
    ) -> List[PointEvent]:
        """Emit the matched point events of a reaction toggle.

        The previous reaction is reversed before the new one is granted, for
        the reactor (GIVEN) and, when distinct, the target owner (RECEIVED).

        Args:
            company: Tenant
            reactor_id: User who reacted
            owner_id: Author of the target
            target_type: Post or comment
            target_id: Target ID
            previous: Reaction type before the toggle
            current: Reaction type after the toggle
            post_id: Post the target belongs to
            comment_id: Comment target, if any

        Returns:
            Ledger rows written
        """
        steps: list[tuple[ReactionType, Polarity]] = []
        if previous is not None:
            steps.append((previous, Polarity.REMOVE))
        if current is not None:
            steps.append((current, Polarity.ADD))

        written: List[PointEvent] = []
        for reaction_type, polarity in steps:
            given = (
                PointAction.REACTION_GIVEN_ADD
                if polarity is Polarity.ADD
                else PointAction.REACTION_GIVEN_REMOVE
            )
            received = (
                PointAction.REACTION_RECEIVED_ADD
                if polarity is Polarity.ADD
                else PointAction.REACTION_RECEIVED_REMOVE
            )

            event = await self.award(
                company,
                user_id=reactor_id,
                action=given,
                target_type=target_type,
                target_id=target_id,
                actor_user_id=reactor_id,
                meta=PointMeta(
                    reaction_type=reaction_type,
                    direction=PointDirection.GIVEN,
                    post_id=post_id,
                    comment_id=comment_id,
                ),
                polarity=polarity,
            )
            if event:
                written.append(event)

            if owner_id is not None and owner_id != reactor_id:
                event = await self.award(
                    company,
                    user_id=owner_id,
                    action=received,
                    target_type=target_type,
                    target_id=target_id,
                    actor_user_id=reactor_id,
                    meta=PointMeta(
                        reaction_type=reaction_type,
                        direction=PointDirection.RECEIVED,
                        post_id=post_id,
                        comment_id=comment_id,
                    ),
                    polarity=polarity,
                )
                if event:
                    written.append(event)

        return written

    async def total_for_user(self, company_id: CompanyId, user_id: UserId) -> int:
        """Net points of a user."""
        return await self.point_event_repository.total_for_user(company_id, user_id)

    async def leaderboard(
        self,
        company_id: CompanyId,
        from_date: date,
        to_date: date,
        user_id: Optional[UserId] = None,
    ) -> List[LeaderboardRow]:
        """Per-user totals over an inclusive range of days.

        Args:
            company_id: Tenant
            from_date: First day (from 00:00:00.000 UTC)
            to_date: Last day (through 23:59:59.999999 UTC)
            user_id: Restrict to one user

        Returns:
            Rows sorted by points, highest first, with member names
        """
        with logfire.span(
            "points.leaderboard",
            company_id=str(company_id),
            from_date=from_date.isoformat(),
            to_date=to_date.isoformat(),
        ):
            rows = await self.point_event_repository.summarize(
                company_id,
                created_from=start_of_day(from_date),
                created_to=end_of_day(to_date),
                user_id=user_id,
                limit=LEADERBOARD_LIMIT,
            )
            users = await self.user_repository.find_by_ids([r.user_id for r in rows])
            names = {u.id: u.full_name for u in users}
            return [
                row.model_copy(update={"name": names.get(row.user_id, "Unknown")})
                for row in rows
            ]
