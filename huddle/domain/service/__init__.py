"""Domain services."""

from .base import Service
from .cache_service import CacheLookup, CacheStore, MicrocacheService, content_hash
from .comment_service import CommentService
from .company_service import CompanyService
from .feed_service import FeedService
from .perf_service import PerfRecorder
from .points_service import PointsService, points_for_action
from .poll_service import PollService
from .post_service import PostService
from .reaction_service import ReactionService, ReactionToggle
from .retention_service import RetentionReport, RetentionService

__all__ = [
    "CacheLookup",
    "CacheStore",
    "CommentService",
    "CompanyService",
    "FeedService",
    "MicrocacheService",
    "PerfRecorder",
    "PointsService",
    "PollService",
    "PostService",
    "ReactionService",
    "ReactionToggle",
    "RetentionReport",
    "RetentionService",
    "Service",
    "content_hash",
    "points_for_action",
]
