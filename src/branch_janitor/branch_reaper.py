"""
Deletion of stale test branches.

A branch is reaped when its name follows the test-branch convention and its
last commit is older than the cutoff. Deleting the branch makes GitHub close
any pull request opened from it, so pull requests are only reported here.

Individual deletion failures are recorded in the run summary; they never stop
the remaining deletions.
"""

import asyncio
import logging
import re
from datetime import UTC, datetime, timedelta

import requests
from github import Github, GithubException, UnknownObjectException
from github.Branch import Branch
from github.Repository import Repository

from .config import ReaperSettings
from .errors import DeletionError
from .schemas import (
    BranchCandidate,
    BranchDeletionOptions,
    DeletionAction,
    DeletionResult,
    ReapSummary,
)

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = timedelta(days=2)
EARLIEST = datetime.min.replace(tzinfo=UTC)
LATEST = datetime.max.replace(tzinfo=UTC)


def compute_cutoff(
    options: BranchDeletionOptions,
    now: datetime,
    default: timedelta = DEFAULT_THRESHOLD,
) -> datetime:
    """Return the instant before which a branch counts as stale.

    The window is a rolling duration ending at ``now`` whichever option sets
    it. ``hours`` wins over ``minutes``; with neither, ``default`` applies.
    A window reaching past the representable range clamps to the earliest
    (or, when negative, the latest) datetime.
    """
    if options.hours is not None:
        window = options.hours * 3600
    elif options.minutes is not None:
        window = options.minutes * 60
    else:
        window = default.total_seconds()

    try:
        return now - timedelta(seconds=window)
    except OverflowError:
        logger.debug("Threshold of %s seconds is out of range, clamping the cutoff", window)
        return EARLIEST if window > 0 else LATEST


def is_test_branch(name: str, pattern: str | re.Pattern[str]) -> bool:
    return re.search(pattern, name) is not None


def is_stale(last_updated: datetime, cutoff: datetime) -> bool:
    """A branch updated exactly at the cutoff is not yet stale."""
    return last_updated < cutoff


def _last_updated(branch: Branch) -> datetime:
    commit = branch.commit.commit
    date = commit.committer.date if commit.committer is not None else commit.author.date
    if date.tzinfo is None:
        date = date.replace(tzinfo=UTC)
    return date


class BranchReaper:
    """Finds and deletes stale test branches of one repository."""

    def __init__(
        self,
        client: Github,
        owner: str,
        repo: str,
        options: BranchDeletionOptions | None = None,
        settings: ReaperSettings | None = None,
    ):
        self._client = client
        self.owner = owner
        self.repo = repo
        self.options = options or BranchDeletionOptions()
        self._settings = settings or ReaperSettings()
        self._pattern = re.compile(self._settings.test_branch_pattern)
        self._semaphore = asyncio.Semaphore(self._settings.max_concurrency)
        self._repository: Repository | None = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def cutoff(self, now: datetime) -> datetime:
        options = self.options
        if options.hours is None and options.minutes is None:
            options = options.model_copy(update={"hours": self._settings.default_threshold_hours})
        return compute_cutoff(options, now)

    async def find_candidates(self, now: datetime | None = None) -> list[BranchCandidate]:
        """Return the test branches last updated before the cutoff."""
        now = now or datetime.now(UTC)
        _, candidates = await self._scan(now, self.cutoff(now))
        return candidates

    async def run(self, now: datetime | None = None) -> ReapSummary:
        """
        Delete (or, in dry-run mode, report) every stale test branch.

        Args:
            now: Reference instant for the cutoff. Defaults to the current time.

        Returns:
            ReapSummary with one DeletionResult per candidate
        """
        now = now or datetime.now(UTC)
        cutoff = self.cutoff(now)
        logger.info(
            "Reaping test branches of %s last updated before %s%s",
            self.full_name,
            cutoff.isoformat(),
            " (dry run)" if self.options.dry_run else "",
        )

        scanned, candidates = await self._scan(now, cutoff)
        summary = ReapSummary(
            owner=self.owner,
            repo=self.repo,
            cutoff=cutoff,
            dry_run=self.options.dry_run,
            branches_scanned=scanned,
            candidates=candidates,
        )
        if not candidates:
            logger.info("No stale test branches in %s", self.full_name)
            return summary

        summary.results = list(await asyncio.gather(*(self._handle(c) for c in candidates)))
        logger.info(
            "Finished %s: %d deleted, %d would be deleted, %d failed",
            self.full_name,
            len(summary.deleted),
            len(summary.would_delete),
            len(summary.failed),
        )
        return summary

    async def _get_repository(self) -> Repository:
        if self._repository is None:
            self._repository = await asyncio.to_thread(self._client.get_repo, self.full_name)
        return self._repository

    async def _scan(self, now: datetime, cutoff: datetime) -> tuple[int, list[BranchCandidate]]:
        repository = await self._get_repository()
        branches: list[Branch] = await asyncio.to_thread(lambda: list(repository.get_branches()))
        test_branches = [b for b in branches if is_test_branch(b.name, self._pattern)]
        logger.debug("%s: %d branches, %d test branches", self.full_name, len(branches), len(test_branches))

        if cutoff >= now:
            # Zero or negative window: nothing can be older than "now or later".
            logger.info("Cutoff %s is not in the past, nothing to reap", cutoff.isoformat())
            return len(branches), []

        dates = await asyncio.gather(*(self._bounded(_last_updated, b) for b in test_branches))
        stale = [
            BranchCandidate(name=branch.name, last_updated=date)
            for branch, date in zip(test_branches, dates)
            if is_stale(date, cutoff)
        ]
        if stale:
            pulls = await asyncio.to_thread(self._open_pulls_by_head, repository)
            for candidate in stale:
                candidate.pull_requests = pulls.get(candidate.name, [])
        return len(branches), stale

    def _open_pulls_by_head(self, repository: Repository) -> dict[str, list[int]]:
        pulls: dict[str, list[int]] = {}
        for pr in repository.get_pulls(state="open"):
            head_repo = pr.head.repo
            if head_repo is None or head_repo.full_name != repository.full_name:
                continue
            pulls.setdefault(pr.head.ref, []).append(pr.number)
        return pulls

    async def _handle(self, candidate: BranchCandidate) -> DeletionResult:
        prs = ", ".join(f"#{n}" for n in candidate.pull_requests)
        closes = f" (closes {prs})" if prs else ""

        if self.options.dry_run:
            logger.info("Would delete %s, last updated %s%s", candidate.name, candidate.last_updated.isoformat(), closes)
            return DeletionResult(branch=candidate.name, action=DeletionAction.WOULD_DELETE)

        try:
            await self._bounded(self._delete_branch, candidate.name)
        except DeletionError as e:
            logger.warning("%s", e)
            return DeletionResult(branch=candidate.name, action=DeletionAction.FAILED, error=str(e))

        logger.info("Deleted %s%s", candidate.name, closes)
        return DeletionResult(branch=candidate.name, action=DeletionAction.DELETED)

    def _delete_branch(self, name: str) -> None:
        assert self._repository is not None
        try:
            self._repository.get_git_ref(f"heads/{name}").delete()
        except UnknownObjectException as e:
            raise DeletionError(name, "branch no longer exists") from e
        except GithubException as e:
            raise DeletionError(name, f"{e.status} {e.data}") from e
        except requests.RequestException as e:
            raise DeletionError(name, str(e)) from e

    async def _bounded(self, fn, *args):
        async with self._semaphore:
            return await asyncio.to_thread(fn, *args)


async def delete_branches(
    client: Github,
    owner: str,
    repo: str,
    options: BranchDeletionOptions | None = None,
    settings: ReaperSettings | None = None,
) -> ReapSummary:
    """Reap the stale test branches of ``owner/repo`` with an authenticated client."""
    reaper = BranchReaper(client, owner, repo, options, settings)
    return await reaper.run()
