"""In-memory reaction repository for testing."""

from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from huddle.domain.model.reaction import Reaction
from huddle.domain.repository.reaction import ReactionRepository
from huddle.domain.value import ReactionId, TargetType, UserId


class InMemoryReactionRepository(ReactionRepository):
    """In-memory implementation of ReactionRepository for testing."""

    def __init__(self) -> None:
        self._reactions: dict[ReactionId, Reaction] = {}

    async def find_by_user_and_target(
        self, user_id: UserId, target_type: TargetType, target_id: UUID
    ) -> Optional[Reaction]:
        """Find a user's reaction on a target."""
        for reaction in self._reactions.values():
            if (
                reaction.user_id == user_id
                and reaction.target_type == target_type
                and reaction.target_id == target_id
            ):
                return reaction
        return None

    async def save(self, reaction: Reaction) -> Reaction:
        """Save a reaction (enforces one per user and target)."""
        if reaction.id not in self._reactions:
            existing = await self.find_by_user_and_target(
                reaction.user_id, reaction.target_type, reaction.target_id
            )
            if existing is not None:
                raise IntegrityError("Duplicate reaction", None, Exception())
        self._reactions[reaction.id] = reaction
        return reaction

    async def delete(self, reaction_id: ReactionId) -> None:
        """Delete a reaction."""
        self._reactions.pop(reaction_id, None)

    async def delete_for_targets(
        self, target_type: TargetType, target_ids: Sequence[UUID]
    ) -> int:
        """Delete every reaction on the given targets."""
        doomed = [
            r.id
            for r in self._reactions.values()
            if r.target_type == target_type and r.target_id in target_ids
        ]
        for reaction_id in doomed:
            del self._reactions[reaction_id]
        return len(doomed)
