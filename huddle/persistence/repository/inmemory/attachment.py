"""In-memory attachment repository for testing."""

from typing import Dict, List, Sequence

from huddle.domain.model.attachment import Attachment
from huddle.domain.repository.attachment import AttachmentRepository
from huddle.domain.value import AttachmentId, CompanyId, PostId, TargetType


class InMemoryAttachmentRepository(AttachmentRepository):
    """In-memory implementation of AttachmentRepository for testing."""

    def __init__(self) -> None:
        self._attachments: dict[AttachmentId, Attachment] = {}

    async def save(self, attachment: Attachment) -> Attachment:
        """Save an attachment."""
        self._attachments[attachment.id] = attachment
        return attachment

    async def find_thumbnails(
        self, company_id: CompanyId, post_ids: Sequence[PostId], per_post: int
    ) -> Dict[PostId, List[str]]:
        """Fetch thumbnail URLs for several posts, oldest first."""
        thumbnails: Dict[PostId, List[str]] = {}
        ordered = sorted(self._attachments.values(), key=lambda a: (a.created_at, a.id))
        for attachment in ordered:
            if (
                attachment.company_id != company_id
                or attachment.target_type != TargetType.POST
                or attachment.target_id not in post_ids
            ):
                continue
            urls = thumbnails.setdefault(PostId(attachment.target_id), [])
            if len(urls) < per_post:
                urls.append(attachment.storage_url)
        return thumbnails

    async def delete_for_posts(self, post_ids: Sequence[PostId]) -> int:
        """Delete every attachment linked to the given posts."""
        doomed = [
            a.id
            for a in self._attachments.values()
            if a.target_type == TargetType.POST and a.target_id in post_ids
        ]
        for attachment_id in doomed:
            del self._attachments[attachment_id]
        return len(doomed)
