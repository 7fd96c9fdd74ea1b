"""Point event repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from huddle.domain.model.point_event import LeaderboardRow, PointEvent
from huddle.domain.value import CompanyId, UserId


class PointEventRepository(ABC):
    """Append-only repository for the points ledger."""

    @abstractmethod
    async def add(self, event: PointEvent) -> PointEvent:
        """Append a ledger row.

        Args:
            event: The event to append

        Returns:
            The stored event

        Raises:
            IntegrityError: If an event with the same key already exists for
                the company (or for the company and user)
        """
        pass

    @abstractmethod
    async def find_by_user(
        self, company_id: CompanyId, user_id: UserId
    ) -> List[PointEvent]:
        """List a user's ledger rows, oldest first.

        Args:
            company_id: Tenant
            user_id: The user

        Returns:
            Ledger rows
        """
        pass

    @abstractmethod
    async def total_for_user(self, company_id: CompanyId, user_id: UserId) -> int:
        """Sum a user's points.

        Args:
            company_id: Tenant
            user_id: The user

        Returns:
            Net points (0 when the user has no rows)
        """
        pass

    @abstractmethod
    async def summarize(
        self,
        company_id: CompanyId,
        created_from: datetime,
        created_to: datetime,
        user_id: Optional[UserId] = None,
        limit: int = 200,
    ) -> List[LeaderboardRow]:
        """Aggregate ledger rows per user over an inclusive time range.

        Names are left at their default; callers resolve them.

        Args:
            company_id: Tenant
            created_from: Inclusive lower bound
            created_to: Inclusive upper bound
            user_id: Restrict to one user
            limit: Maximum rows

        Returns:
            Rows sorted by points, highest first
        """
        pass
