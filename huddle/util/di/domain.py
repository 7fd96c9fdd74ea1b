"""Domain layer DI providers."""

from dishka import Scope, provide

from huddle.config import CacheSettings, FeedSettings, PerfSettings
from huddle.domain.repository import (
    AttachmentRepository,
    CommentRepository,
    CompanyRepository,
    GroupRepository,
    PointEventRepository,
    PostRepository,
    ReactionRepository,
    UserRepository,
)
from huddle.domain.service import (
    CacheStore,
    CommentService,
    CompanyService,
    FeedService,
    MicrocacheService,
    PerfRecorder,
    PointsService,
    PollService,
    PostService,
    ReactionService,
    RetentionService,
)
from huddle.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    The perf recorder and microcache are the exception: they live for the whole
    process.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_perf_recorder(self, perf_settings: PerfSettings) -> PerfRecorder:
        """Provide the process-wide perf recorder."""
        return PerfRecorder(
            max_samples=perf_settings.max_samples,
            max_cache_events=perf_settings.max_cache_events,
        )

    @provide(scope=Scope.APP)
    def get_microcache(
        self,
        store: CacheStore,
        perf_recorder: PerfRecorder,
        cache_settings: CacheSettings,
    ) -> MicrocacheService:
        """Provide the process-wide microcache."""
        return MicrocacheService(
            store=store, perf_recorder=perf_recorder, cache_settings=cache_settings
        )

    @provide
    def get_company_service(
        self, company_repository: CompanyRepository, user_repository: UserRepository
    ) -> CompanyService:
        """Provide tenant resolution service."""
        return CompanyService(
            company_repository=company_repository, user_repository=user_repository
        )

    @provide
    def get_post_service(
        self, post_repository: PostRepository, group_repository: GroupRepository
    ) -> PostService:
        """Provide post domain service."""
        return PostService(
            post_repository=post_repository, group_repository=group_repository
        )

    @provide
    def get_feed_service(
        self,
        post_repository: PostRepository,
        user_repository: UserRepository,
        group_repository: GroupRepository,
        attachment_repository: AttachmentRepository,
        perf_recorder: PerfRecorder,
        feed_settings: FeedSettings,
    ) -> FeedService:
        """Provide feed query service.

        Args:
            post_repository: Feed reads and counts
            user_repository: People filter resolution
            group_repository: my_groups resolution and group stubs
            attachment_repository: Thumbnail lookups
            perf_recorder: Receives the per-phase timings
            feed_settings: Pagination bounds

        Returns:
            FeedService wired to the request's repositories
        """
        return FeedService(
            post_repository=post_repository,
            user_repository=user_repository,
            group_repository=group_repository,
            attachment_repository=attachment_repository,
            perf_recorder=perf_recorder,
            feed_settings=feed_settings,
        )

    @provide
    def get_comment_service(
        self, comment_repository: CommentRepository, post_repository: PostRepository
    ) -> CommentService:
        """Provide comment domain service."""
        return CommentService(
            comment_repository=comment_repository, post_repository=post_repository
        )

    @provide
    def get_reaction_service(
        self,
        reaction_repository: ReactionRepository,
        post_repository: PostRepository,
        comment_repository: CommentRepository,
    ) -> ReactionService:
        """Provide reaction toggle service."""
        return ReactionService(
            reaction_repository=reaction_repository,
            post_repository=post_repository,
            comment_repository=comment_repository,
        )

    @provide
    def get_poll_service(self, post_repository: PostRepository) -> PollService:
        """Provide poll service."""
        return PollService(post_repository=post_repository)

    @provide
    def get_points_service(
        self,
        point_event_repository: PointEventRepository,
        user_repository: UserRepository,
    ) -> PointsService:
        """Provide points ledger service."""
        return PointsService(
            point_event_repository=point_event_repository,
            user_repository=user_repository,
        )

    @provide
    def get_retention_service(
        self,
        company_repository: CompanyRepository,
        post_repository: PostRepository,
        comment_repository: CommentRepository,
        reaction_repository: ReactionRepository,
        attachment_repository: AttachmentRepository,
    ) -> RetentionService:
        """Provide retention purge service."""
        return RetentionService(
            company_repository=company_repository,
            post_repository=post_repository,
            comment_repository=comment_repository,
            reaction_repository=reaction_repository,
            attachment_repository=attachment_repository,
        )
