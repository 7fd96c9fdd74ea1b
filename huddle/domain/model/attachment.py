"""Attachment entity."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from huddle.domain.model.common import DomainModel, utcnow
from huddle.domain.value import AttachmentId, CompanyId, TargetType


class Attachment(DomainModel):
    """Stored file linked to a post or comment; the feed shows them as thumbnails."""

    id: AttachmentId
    company_id: CompanyId
    target_type: TargetType
    target_id: UUID
    storage_url: str = Field(min_length=1)
    created_at: datetime = Field(default_factory=utcnow)
