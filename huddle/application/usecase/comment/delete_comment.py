"""Delete comment use case."""

from uuid import UUID

from pydantic import BaseModel

from huddle.application.usecase.base import BaseUseCase, invalidate_post
from huddle.application.usecase.comment.create_comment import CommentView
from huddle.domain.service import (
    CommentService,
    CompanyService,
    MicrocacheService,
    PostService,
)
from huddle.domain.value import CommentId, UserId


class DeleteCommentRequest(BaseModel):
    """Delete comment request."""

    org: str
    user_id: UUID
    comment_id: UUID


class DeleteCommentResponse(BaseModel):
    """Delete comment response."""

    comment: CommentView


class DeleteCommentUseCase(BaseUseCase):
    """Use case for soft-deleting a comment."""

    def __init__(
        self,
        company_service: CompanyService,
        comment_service: CommentService,
        post_service: PostService,
        microcache: MicrocacheService,
    ) -> None:
        """Initialize delete comment use case.

        Args:
            company_service: Tenant and member resolution
            comment_service: Comment domain service
            post_service: Post domain service (cache scopes)
            microcache: Cache to invalidate
        """
        self.company_service = company_service
        self.comment_service = comment_service
        self.post_service = post_service
        self.microcache = microcache

    async def execute(self, request: DeleteCommentRequest) -> DeleteCommentResponse:
        """Execute delete comment flow."""
        company = await self.company_service.resolve_tenant(request.org)
        user = await self.company_service.resolve_member(company, UserId(request.user_id))

        comment = await self.comment_service.delete_comment(
            company, user, CommentId(request.comment_id)
        )
        post = await self.post_service.get_post(
            company, comment.post_id, include_hidden=True
        )
        await invalidate_post(self.microcache, company.slug.root, post)

        return DeleteCommentResponse(comment=CommentView.from_comment(comment))
