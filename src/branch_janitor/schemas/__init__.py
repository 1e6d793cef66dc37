"""Pydantic models for reaper inputs and run reports."""

from .schemas import (
    BranchCandidate,
    BranchDeletionOptions,
    DeletionAction,
    DeletionResult,
    ReapSummary,
)

__all__ = [
    "BranchCandidate",
    "BranchDeletionOptions",
    "DeletionAction",
    "DeletionResult",
    "ReapSummary",
]
