"""Reaction repository interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from uuid import UUID

from huddle.domain.model.reaction import Reaction
from huddle.domain.value import ReactionId, TargetType, UserId


class ReactionRepository(ABC):
    """Repository for reactions."""

    @abstractmethod
    async def find_by_user_and_target(
        self, user_id: UserId, target_type: TargetType, target_id: UUID
    ) -> Optional[Reaction]:
        """Find a user's reaction on a target.

        Args:
            user_id: The reacting user
            target_type: Post or comment
            target_id: Target ID

        Returns:
            The reaction if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, reaction: Reaction) -> Reaction:
        """Save a reaction (create or change type).

        Args:
            reaction: The reaction to save

        Returns:
            The saved reaction

        Raises:
            IntegrityError: If a second reaction is created for the same
                user and target
        """
        pass

    @abstractmethod
    async def delete(self, reaction_id: ReactionId) -> None:
        """Delete a reaction.

        Args:
            reaction_id: The reaction ID
        """
        pass

    @abstractmethod
    async def delete_for_targets(
        self, target_type: TargetType, target_ids: Sequence[UUID]
    ) -> int:
        """Delete every reaction on the given targets.

        Args:
            target_type: Post or comment
            target_ids: Targets being purged

        Returns:
            Number of deleted reactions
        """
        pass
