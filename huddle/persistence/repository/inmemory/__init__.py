"""In-memory repository implementations for testing."""

from .attachment import InMemoryAttachmentRepository
from .comment import InMemoryCommentRepository
from .company import InMemoryCompanyRepository
from .group import InMemoryGroupRepository
from .point_event import InMemoryPointEventRepository
from .post import InMemoryPostRepository
from .reaction import InMemoryReactionRepository
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryAttachmentRepository",
    "InMemoryCommentRepository",
    "InMemoryCompanyRepository",
    "InMemoryGroupRepository",
    "InMemoryPointEventRepository",
    "InMemoryPostRepository",
    "InMemoryReactionRepository",
    "InMemoryUserRepository",
]
