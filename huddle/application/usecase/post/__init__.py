"""Post use cases."""

from .create_post import (
    CreatePostRequest,
    CreatePostResponse,
    CreatePostUseCase,
    PollInput,
    PollQuestionInput,
)
from .delete_post import DeletePostRequest, DeletePostResponse, DeletePostUseCase
from .get_post import GetPostRequest, GetPostResponse, GetPostUseCase
from .moderate_post import (
    ModeratePostRequest,
    ModeratePostResponse,
    ModeratePostUseCase,
    ModerationDecision,
)
from .view import PostView

__all__ = [
    "CreatePostRequest",
    "CreatePostResponse",
    "CreatePostUseCase",
    "DeletePostRequest",
    "DeletePostResponse",
    "DeletePostUseCase",
    "GetPostRequest",
    "GetPostResponse",
    "GetPostUseCase",
    "ModeratePostRequest",
    "ModeratePostResponse",
    "ModeratePostUseCase",
    "ModerationDecision",
    "PollInput",
    "PollQuestionInput",
    "PostView",
]
