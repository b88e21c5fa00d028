"""Codebook data models."""

from .codebook import (
    CodebookTable,
    FailureKind,
    Marginals,
    MarginalsKind,
    PageFailure,
    PageResult,
    VariableProperty,
    VariableRecord,
    construct_panel_id,
    split_wave_suffix,
)

__all__ = [
    "CodebookTable",
    "FailureKind",
    "Marginals",
    "MarginalsKind",
    "PageFailure",
    "PageResult",
    "VariableProperty",
    "VariableRecord",
    "construct_panel_id",
    "split_wave_suffix",
]
