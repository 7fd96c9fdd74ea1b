"""Domain model entities for Huddle."""

from huddle.domain.model.attachment import Attachment
from huddle.domain.model.comment import Comment
from huddle.domain.model.company import (
    Company,
    CompanyPolicies,
    GamificationRules,
    GamificationSettings,
)
from huddle.domain.model.feed import FeedFilters, FeedItem, FeedResult, GroupStub
from huddle.domain.model.group import Group
from huddle.domain.model.point_event import (
    EventKey,
    LeaderboardRow,
    PointEvent,
    PointMeta,
)
from huddle.domain.model.post import Poll, PollOption, PollQuestion, Post
from huddle.domain.model.reaction import Reaction
from huddle.domain.model.user import User

__all__ = [
    "Company",
    "CompanyPolicies",
    "GamificationRules",
    "GamificationSettings",
    "User",
    "Group",
    "Post",
    "Poll",
    "PollQuestion",
    "PollOption",
    "Comment",
    "Reaction",
    "Attachment",
    "PointEvent",
    "PointMeta",
    "EventKey",
    "LeaderboardRow",
    "FeedFilters",
    "FeedItem",
    "FeedResult",
    "GroupStub",
]
