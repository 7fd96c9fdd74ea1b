"""Attachment repository interface."""

from abc import ABC, abstractmethod
from typing import Dict, List, Sequence

from huddle.domain.model.attachment import Attachment
from huddle.domain.value import CompanyId, PostId


class AttachmentRepository(ABC):
    """Repository for attachments."""

    @abstractmethod
    async def save(self, attachment: Attachment) -> Attachment:
        """Save an attachment.

        Args:
            attachment: The attachment to save

        Returns:
            The saved attachment
        """
        pass

    @abstractmethod
    async def find_thumbnails(
        self, company_id: CompanyId, post_ids: Sequence[PostId], per_post: int
    ) -> Dict[PostId, List[str]]:
        """Fetch thumbnail URLs for several posts in one query.

        Args:
            company_id: Tenant the posts belong to
            post_ids: Posts on the current feed page
            per_post: Maximum URLs per post

        Returns:
            Mapping of post ID to storage URLs, oldest attachment first
        """
        pass

    @abstractmethod
    async def delete_for_posts(self, post_ids: Sequence[PostId]) -> int:
        """Delete every attachment linked to the given posts.

        Args:
            post_ids: Posts being purged

        Returns:
            Number of deleted attachments
        """
        pass
