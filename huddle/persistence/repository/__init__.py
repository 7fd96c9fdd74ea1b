"""PostgreSQL repository implementations."""

from huddle.persistence.repository.attachment import PostgresAttachmentRepository
from huddle.persistence.repository.comment import PostgresCommentRepository
from huddle.persistence.repository.company import PostgresCompanyRepository
from huddle.persistence.repository.group import PostgresGroupRepository
from huddle.persistence.repository.point_event import PostgresPointEventRepository
from huddle.persistence.repository.post import PostgresPostRepository
from huddle.persistence.repository.reaction import PostgresReactionRepository
from huddle.persistence.repository.user import PostgresUserRepository

__all__ = [
    "PostgresAttachmentRepository",
    "PostgresCommentRepository",
    "PostgresCompanyRepository",
    "PostgresGroupRepository",
    "PostgresPointEventRepository",
    "PostgresPostRepository",
    "PostgresReactionRepository",
    "PostgresUserRepository",
]
