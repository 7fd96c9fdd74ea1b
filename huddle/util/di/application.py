"""Application layer DI providers."""

from dishka import Scope, provide

from huddle.application.usecase.comment import (
    CreateCommentUseCase,
    DeleteCommentUseCase,
)
from huddle.application.usecase.feed import ListFeedUseCase
from huddle.application.usecase.perf import GetPerfSummaryUseCase
from huddle.application.usecase.points import GetLeaderboardUseCase
from huddle.application.usecase.poll import ClosePollUseCase, VotePollUseCase
from huddle.application.usecase.post import (
    CreatePostUseCase,
    DeletePostUseCase,
    GetPostUseCase,
    ModeratePostUseCase,
)
from huddle.application.usecase.reaction import ToggleReactionUseCase
from huddle.application.usecase.retention import RunRetentionUseCase
from huddle.config import PerfSettings
from huddle.domain.repository import GroupRepository
from huddle.domain.service import (
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


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Feed use cases
    @provide(scope=Scope.REQUEST)
    def get_list_feed_use_case(
        self,
        company_service: CompanyService,
        feed_service: FeedService,
        group_repository: GroupRepository,
        microcache: MicrocacheService,
    ) -> ListFeedUseCase:
        """Provide list feed use case."""
        return ListFeedUseCase(
            company_service=company_service,
            feed_service=feed_service,
            group_repository=group_repository,
            microcache=microcache,
        )

    # Post use cases
    @provide(scope=Scope.REQUEST)
    def get_get_post_use_case(
        self,
        company_service: CompanyService,
        post_service: PostService,
        microcache: MicrocacheService,
    ) -> GetPostUseCase:
        """Provide get post use case."""
        return GetPostUseCase(
            company_service=company_service,
            post_service=post_service,
            microcache=microcache,
        )

    @provide(scope=Scope.REQUEST)
    def get_create_post_use_case(
        self,
        company_service: CompanyService,
        post_service: PostService,
        points_service: PointsService,
        microcache: MicrocacheService,
    ) -> CreatePostUseCase:
        """Provide create post use case."""
        return CreatePostUseCase(
            company_service=company_service,
            post_service=post_service,
            points_service=points_service,
            microcache=microcache,
        )

    @provide(scope=Scope.REQUEST)
    def get_delete_post_use_case(
        self,
        company_service: CompanyService,
        post_service: PostService,
        microcache: MicrocacheService,
    ) -> DeletePostUseCase:
        """Provide delete post use case."""
        return DeletePostUseCase(
            company_service=company_service,
            post_service=post_service,
            microcache=microcache,
        )

    @provide(scope=Scope.REQUEST)
    def get_moderate_post_use_case(
        self,
        company_service: CompanyService,
        post_service: PostService,
        points_service: PointsService,
        microcache: MicrocacheService,
    ) -> ModeratePostUseCase:
        """Provide moderation decision use case."""
        return ModeratePostUseCase(
            company_service=company_service,
            post_service=post_service,
            points_service=points_service,
            microcache=microcache,
        )

    # Reaction use cases
    @provide(scope=Scope.REQUEST)
    def get_toggle_reaction_use_case(
        self,
        company_service: CompanyService,
        reaction_service: ReactionService,
        points_service: PointsService,
        microcache: MicrocacheService,
    ) -> ToggleReactionUseCase:
        """Provide toggle reaction use case."""
        return ToggleReactionUseCase(
            company_service=company_service,
            reaction_service=reaction_service,
            points_service=points_service,
            microcache=microcache,
        )

    # Comment use cases
    @provide(scope=Scope.REQUEST)
    def get_create_comment_use_case(
        self,
        company_service: CompanyService,
        comment_service: CommentService,
        points_service: PointsService,
        microcache: MicrocacheService,
    ) -> CreateCommentUseCase:
        """Provide create comment use case."""
        return CreateCommentUseCase(
            company_service=company_service,
            comment_service=comment_service,
            points_service=points_service,
            microcache=microcache,
        )

    @provide(scope=Scope.REQUEST)
    def get_delete_comment_use_case(
        self,
        company_service: CompanyService,
        comment_service: CommentService,
        post_service: PostService,
        microcache: MicrocacheService,
    ) -> DeleteCommentUseCase:
        """Provide delete comment use case."""
        return DeleteCommentUseCase(
            company_service=company_service,
            comment_service=comment_service,
            post_service=post_service,
            microcache=microcache,
        )

    # Poll use cases
    @provide(scope=Scope.REQUEST)
    def get_vote_poll_use_case(
        self,
        company_service: CompanyService,
        poll_service: PollService,
        microcache: MicrocacheService,
    ) -> VotePollUseCase:
        """Provide poll vote use case."""
        return VotePollUseCase(
            company_service=company_service,
            poll_service=poll_service,
            microcache=microcache,
        )

    @provide(scope=Scope.REQUEST)
    def get_close_poll_use_case(
        self,
        company_service: CompanyService,
        poll_service: PollService,
        microcache: MicrocacheService,
    ) -> ClosePollUseCase:
        """Provide close poll use case."""
        return ClosePollUseCase(
            company_service=company_service,
            poll_service=poll_service,
            microcache=microcache,
        )

    # Admin use cases
    @provide(scope=Scope.REQUEST)
    def get_leaderboard_use_case(
        self, company_service: CompanyService, points_service: PointsService
    ) -> GetLeaderboardUseCase:
        """Provide points leaderboard use case."""
        return GetLeaderboardUseCase(
            company_service=company_service, points_service=points_service
        )

    @provide(scope=Scope.REQUEST)
    def get_perf_summary_use_case(
        self,
        company_service: CompanyService,
        perf_recorder: PerfRecorder,
        perf_settings: PerfSettings,
    ) -> GetPerfSummaryUseCase:
        """Provide perf summary use case."""
        return GetPerfSummaryUseCase(
            company_service=company_service,
            perf_recorder=perf_recorder,
            perf_settings=perf_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_run_retention_use_case(
        self,
        company_service: CompanyService,
        retention_service: RetentionService,
        microcache: MicrocacheService,
    ) -> RunRetentionUseCase:
        """Provide retention sweep use case."""
        return RunRetentionUseCase(
            company_service=company_service,
            retention_service=retention_service,
            microcache=microcache,
        )
