"""Perf use cases."""

from .get_perf_summary import (
    GetPerfSummaryRequest,
    GetPerfSummaryResponse,
    GetPerfSummaryUseCase,
)

__all__ = [
    "GetPerfSummaryRequest",
    "GetPerfSummaryResponse",
    "GetPerfSummaryUseCase",
]
