"""Strongly typed identifiers for Huddle domain entities.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting.
"""

from typing import NewType
from uuid import UUID

# Tenant
CompanyId = NewType("CompanyId", UUID)

# Members and groups
UserId = NewType("UserId", UUID)
GroupId = NewType("GroupId", UUID)

# Content
PostId = NewType("PostId", UUID)
CommentId = NewType("CommentId", UUID)
ReactionId = NewType("ReactionId", UUID)
AttachmentId = NewType("AttachmentId", UUID)

# Ledger
PointEventId = NewType("PointEventId", UUID)
