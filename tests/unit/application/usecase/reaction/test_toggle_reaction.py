"""Unit tests for ToggleReactionUseCase."""

import pytest

from huddle.application.usecase.reaction.toggle_reaction import (
    ToggleReactionRequest,
    ToggleReactionUseCase,
)
from huddle.domain.repository import CompanyRepository, PostRepository, UserRepository
from huddle.domain.service import (
    CompanyService,
    MicrocacheService,
    PointsService,
    ReactionService,
)
from huddle.domain.value import ReactionType, TargetType
from tests.conftest import make_company, make_post, make_user
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestToggleReactionUseCase:
    """Tests for ToggleReactionUseCase."""

    @pytest.mark.asyncio
    async def test_toggle_round_trip_nets_zero_points(self, unit_env):
        """Adding then removing a reaction leaves both users at zero."""
        # Arrange
        points_service = await unit_env.get(PointsService)
        use_case = ToggleReactionUseCase(
            company_service=await unit_env.get(CompanyService),
            reaction_service=await unit_env.get(ReactionService),
            points_service=points_service,
            microcache=await unit_env.get(MicrocacheService),
        )
        company_repo = await unit_env.get(CompanyRepository)
        user_repo = await unit_env.get(UserRepository)
        post_repo = await unit_env.get(PostRepository)
        company = await company_repo.save(make_company())
        author = await user_repo.save(make_user(company))
        reader = await user_repo.save(make_user(company, "Grace Hopper"))
        post = await post_repo.save(make_post(company, author))
        request = ToggleReactionRequest(
            org="acme",
            user_id=reader.id,
            target_type=TargetType.POST,
            target_id=post.id,
            type=ReactionType.HEART,
        )

        # Act
        added = await use_case.execute(request)
        reader_after_add = await points_service.total_for_user(company.id, reader.id)
        removed = await use_case.execute(request)

        # Assert
        assert added.current == ReactionType.HEART
        assert added.reactions_count_by_type["heart"] == 1
        assert reader_after_add == 1
        assert removed.previous == ReactionType.HEART
        assert removed.current is None
        assert removed.reactions_count_by_type["heart"] == 0
        assert await points_service.total_for_user(company.id, reader.id) == 0
        assert await points_service.total_for_user(company.id, author.id) == 0

    @pytest.mark.asyncio
    async def test_string_reaction_type_is_accepted(self, unit_env):
        """Reaction types parse case-insensitively."""
        request = ToggleReactionRequest.model_validate(
            {
                "org": "acme",
                "user_id": "3f2b8f0e-8a53-4b0e-9d47-0f3f1f7c2a11",
                "target_type": "POST",
                "target_id": "6a1f4c2d-1b2e-4e9b-8a7a-5c3d2e1f0a99",
                "type": "Celebrate",
            }
        )

        assert request.type == ReactionType.CELEBRATE
        assert request.target_type == TargetType.POST
