"""In-memory user repository for testing."""

from typing import List, Optional, Sequence

from huddle.domain.model.user import User
from huddle.domain.repository.user import UserRepository
from huddle.domain.value import CompanyId, UserId


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing."""

    def __init__(self) -> None:
        self._users: dict[UserId, User] = {}

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        return self._users.get(user_id)

    async def find_by_ids(self, user_ids: Sequence[UserId]) -> List[User]:
        """Find several users at once."""
        return [self._users[u] for u in user_ids if u in self._users]

    async def find_ids_matching(self, company_id: CompanyId, text: str) -> List[UserId]:
        """Find users whose full name or title contains the text."""
        needle = text.lower()
        return [
            user.id
            for user in self._users.values()
            if user.company_id == company_id
            and (
                needle in user.full_name.lower()
                or (user.title is not None and needle in user.title.lower())
            )
        ]

    async def save(self, user: User) -> User:
        """Save or update a user."""
        self._users[user.id] = user
        return user
