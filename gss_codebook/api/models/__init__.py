"""API models (response/summary schemas)."""

from .responses import (
    VariableSummary,
    VariableDetail,
    CodebookSummary,
    FailuresResponse,
    SearchResponse,
    SourceInfo,
    VariableWavesResponse,
)

__all__ = [
    "VariableSummary",
    "VariableDetail",
    "CodebookSummary",
    "FailuresResponse",
    "SearchResponse",
    "SourceInfo",
    "VariableWavesResponse",
]
