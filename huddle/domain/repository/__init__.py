"""Repository interfaces for domain aggregates."""

from huddle.domain.repository.attachment import AttachmentRepository
from huddle.domain.repository.comment import CommentRepository
from huddle.domain.repository.company import CompanyRepository
from huddle.domain.repository.group import GroupRepository
from huddle.domain.repository.point_event import PointEventRepository
from huddle.domain.repository.post import FeedSearchMode, FeedSpec, PostRepository
from huddle.domain.repository.reaction import ReactionRepository
from huddle.domain.repository.user import UserRepository

__all__ = [
    "AttachmentRepository",
    "CommentRepository",
    "CompanyRepository",
    "GroupRepository",
    "PointEventRepository",
    "PostRepository",
    "FeedSpec",
    "FeedSearchMode",
    "ReactionRepository",
    "UserRepository",
]
