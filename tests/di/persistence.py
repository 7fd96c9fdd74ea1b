"""Mock persistence providers for testing."""

from dishka import Scope, provide

from huddle.domain.repository import (
    AttachmentRepository,
    CommentRepository,
    CompanyRepository,
    GroupRepository,
    PointEventRepository,
    PostRepository,
    ReactionRepository,
    UserRepository,
)
from huddle.persistence.repository.inmemory import (
    InMemoryAttachmentRepository,
    InMemoryCommentRepository,
    InMemoryCompanyRepository,
    InMemoryGroupRepository,
    InMemoryPointEventRepository,
    InMemoryPostRepository,
    InMemoryReactionRepository,
    InMemoryUserRepository,
)
from huddle.util.di.infrastructure.persistence import PersistenceProvider


class MockPersistenceProvider(PersistenceProvider):
    """Mock persistence provider using in-memory repositories.

    Uses REQUEST scope to ensure test isolation - each test gets fresh repositories.
    """

    __is_mock__ = True

    @provide(scope=Scope.REQUEST)
    def get_company_repository(self) -> CompanyRepository:
        """Provide in-memory company repository."""
        return InMemoryCompanyRepository()

    @provide(scope=Scope.REQUEST)
    def get_user_repository(self) -> UserRepository:
        """Provide in-memory user repository."""
        return InMemoryUserRepository()

    @provide(scope=Scope.REQUEST)
    def get_group_repository(self) -> GroupRepository:
        """Provide in-memory group repository."""
        return InMemoryGroupRepository()

    @provide(scope=Scope.REQUEST)
    def get_post_repository(self) -> PostRepository:
        """Provide in-memory post repository."""
        return InMemoryPostRepository()

    @provide(scope=Scope.REQUEST)
    def get_comment_repository(self) -> CommentRepository:
        """Provide in-memory comment repository."""
        return InMemoryCommentRepository()

    @provide(scope=Scope.REQUEST)
    def get_reaction_repository(self) -> ReactionRepository:
        """Provide in-memory reaction repository."""
        return InMemoryReactionRepository()

    @provide(scope=Scope.REQUEST)
    def get_attachment_repository(self) -> AttachmentRepository:
        """Provide in-memory attachment repository."""
        return InMemoryAttachmentRepository()

    @provide(scope=Scope.REQUEST)
    def get_point_event_repository(self) -> PointEventRepository:
        """Provide in-memory points ledger."""
        return InMemoryPointEventRepository()
