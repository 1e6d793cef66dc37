"""Pydantic models for reaper inputs and run reports."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class BranchDeletionOptions(BaseModel):
    """Options controlling one reaping run.

    ``hours`` takes priority over ``minutes``; when neither is set the
    default threshold applies.
    """

    dry_run: bool = Field(default=False, description="Report deletions without issuing them")
    hours: Optional[float] = Field(default=None, allow_inf_nan=False, description="Age threshold in hours")
    minutes: Optional[float] = Field(
        default=None, allow_inf_nan=False, description="Age threshold in minutes, ignored if hours is set"
    )


class DeletionAction(str, Enum):
    """Outcome of handling one stale branch."""

    DELETED = "deleted"
    WOULD_DELETE = "would-delete"
    FAILED = "failed"


class BranchCandidate(BaseModel):
    """A test branch whose last commit is older than the cutoff."""

    name: str = Field(description="Branch name, without refs/heads/")
    last_updated: datetime = Field(description="Date of the branch's last commit")
    pull_requests: list[int] = Field(
        default_factory=list, description="Open pull requests GitHub closes when the branch goes away"
    )


class DeletionResult(BaseModel):
    branch: str = Field(description="Branch name")
    action: DeletionAction = Field(description="What happened to the branch")
    error: Optional[str] = Field(default=None, description="Error message if the deletion failed")


class ReapSummary(BaseModel):
    """Report of one reaping run."""

    owner: str
    repo: str
    cutoff: datetime = Field(description="Branches last updated before this instant are stale")
    dry_run: bool = False
    branches_scanned: int = Field(default=0, ge=0, description="Branches listed in the repository")
    candidates: list[BranchCandidate] = Field(default_factory=list)
    results: list[DeletionResult] = Field(default_factory=list)

    @property
    def deleted(self) -> list[str]:
        return [r.branch for r in self.results if r.action == DeletionAction.DELETED]

    @property
    def would_delete(self) -> list[str]:
        return [r.branch for r in self.results if r.action == DeletionAction.WOULD_DELETE]

    @property
    def failed(self) -> list[DeletionResult]:
        return [r for r in self.results if r.action == DeletionAction.FAILED]
