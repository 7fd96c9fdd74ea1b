"""Retention use cases."""

from .run_retention import RunRetentionRequest, RunRetentionUseCase

__all__ = [
    "RunRetentionRequest",
    "RunRetentionUseCase",
]
