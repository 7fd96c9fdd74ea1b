"""Poll use cases."""

from .close_poll import ClosePollRequest, ClosePollUseCase
from .vote_poll import PollResponse, VotePollRequest, VotePollUseCase

__all__ = [
    "ClosePollRequest",
    "ClosePollUseCase",
    "PollResponse",
    "VotePollRequest",
    "VotePollUseCase",
]
