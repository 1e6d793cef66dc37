"""Tests for the reaper's Pydantic models."""

from datetime import timedelta

import pytest
from conftest import NOW
from pydantic import ValidationError

from branch_janitor.schemas import (
    BranchCandidate,
    BranchDeletionOptions,
    DeletionAction,
    DeletionResult,
    ReapSummary,
)


class TestBranchDeletionOptions:
    def test_defaults(self):
        options = BranchDeletionOptions()
        assert options.dry_run is False
        assert options.hours is None
        assert options.minutes is None

    def test_numbers_from_strings(self):
        options = BranchDeletionOptions(hours="1.5")
        assert options.hours == 1.5

    @pytest.mark.parametrize("field", ["hours", "minutes"])
    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_thresholds_rejected(self, field, value):
        with pytest.raises(ValidationError):
            BranchDeletionOptions(**{field: value})


class TestDeletionAction:
    def test_values(self):
        assert [a.value for a in DeletionAction] == ["deleted", "would-delete", "failed"]


class TestReapSummary:
    def _summary(self) -> ReapSummary:
        return ReapSummary(
            owner="gitgitgadget",
            repo="ci-sandbox",
            cutoff=NOW - timedelta(days=2),
            candidates=[BranchCandidate(name="test-1", last_updated=NOW - timedelta(days=3))],
            results=[
                DeletionResult(branch="test-1", action=DeletionAction.DELETED),
                DeletionResult(branch="test-2", action=DeletionAction.FAILED, error="boom"),
                DeletionResult(branch="test-3", action=DeletionAction.WOULD_DELETE),
            ],
        )

    def test_partitions(self):
        summary = self._summary()
        assert summary.deleted == ["test-1"]
        assert summary.would_delete == ["test-3"]
        assert [r.error for r in summary.failed] == ["boom"]

    def test_empty(self):
        summary = ReapSummary(owner="o", repo="r", cutoff=NOW)
        assert summary.branches_scanned == 0
        assert summary.deleted == []
        assert summary.failed == []

    def test_candidate_pull_requests_default_empty(self):
        candidate = BranchCandidate(name="test-1", last_updated=NOW)
        assert candidate.pull_requests == []
