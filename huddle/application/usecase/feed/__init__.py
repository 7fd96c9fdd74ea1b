"""Feed use cases."""

from .list_feed import ListFeedRequest, ListFeedResponse, ListFeedUseCase

__all__ = [
    "ListFeedRequest",
    "ListFeedResponse",
    "ListFeedUseCase",
]
