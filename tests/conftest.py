"""Shared fixtures for the branch-janitor test suite."""

from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

import pytest
from github import GithubException, UnknownObjectException

from branch_janitor.project_config import ProjectConfig, default_store

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=UTC)

# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def make_project_config_data(**overrides) -> dict:
    """Return a configuration document using the on-disk (camelCase) keys."""
    defaults = {
        "repo": {
            "name": "git",
            "owner": "gitgitgadget",
            "baseOwner": "git",
            "owners": ["gitgitgadget", "git", "dscho"],
            "branches": ["maint", "seen"],
            "closingBranches": ["maint", "master"],
            "trackingBranches": ["maint", "seen", "next", "master"],
            "maintainerBranch": "gitster",
            "host": "github.com",
        },
        "mailrepo": {
            "name": "git",
            "owner": "gitgitgadget",
            "branch": "master",
            "host": "lore.kernel.org",
            "url": "https://lore.kernel.org/git/",
            "descriptiveName": "lore.kernel/git",
        },
        "mail": {
            "author": "GitGitGadget",
            "sender": "GitGitGadget",
        },
        "project": {
            "to": "git@vger.kernel.org",
            "branch": "master",
            "cc": ["maintainer@example.com"],
            "urlPrefix": "https://lore.kernel.org/git/",
        },
        "app": {
            "appID": 12836,
            "installationID": 195971,
            "name": "gitgitgadget",
            "displayName": "GitGitGadget",
            "altname": "gitgitgadget-git",
        },
        "lint": {
            "maxCommitsIgnore": ["https://github.com/gitgitgadget/git/pull/923"],
            "maxCommits": 30,
        },
        "user": {
            "allowUserAsLogin": False,
        },
    }
    defaults.update(overrides)
    return defaults


def make_project_config(**overrides) -> ProjectConfig:
    return ProjectConfig.model_validate(make_project_config_data(**overrides))


def make_branch(name: str, last_updated: datetime) -> SimpleNamespace:
    """Return an object shaped like github.Branch.Branch."""
    person = SimpleNamespace(date=last_updated)
    return SimpleNamespace(name=name, commit=SimpleNamespace(commit=SimpleNamespace(committer=person, author=person)))


def make_pull(number: int, head_ref: str, head_repo: str | None) -> SimpleNamespace:
    repo = SimpleNamespace(full_name=head_repo) if head_repo else None
    return SimpleNamespace(number=number, head=SimpleNamespace(ref=head_ref, repo=repo))


# ---------------------------------------------------------------------------
# Fake GitHub client
# ---------------------------------------------------------------------------


class FakeRef:
    def __init__(self, repository: "FakeRepository", name: str):
        self._repository = repository
        self._name = name

    def delete(self) -> None:
        self._repository.delete_calls.append(self._name)
        if self._name in self._repository.failing:
            raise GithubException(422, {"message": "Reference update failed"}, None)
        if self._name not in self._repository.branches:
            raise UnknownObjectException(404, {"message": "Not Found"}, None)
        del self._repository.branches[self._name]


class FakeRepository:
    """In-memory stand-in for github.Repository.Repository."""

    def __init__(
        self,
        full_name: str = "gitgitgadget/ci-sandbox",
        branches: dict[str, datetime] | None = None,
        pulls: list | None = None,
        failing: set[str] | None = None,
    ):
        self.full_name = full_name
        self.branches = dict(branches or {})
        self.pulls = list(pulls or [])
        self.failing = set(failing or ())
        self.delete_calls: list[str] = []

    def get_branches(self):
        return [make_branch(name, date) for name, date in self.branches.items()]

    def get_pulls(self, state: str = "open"):
        return list(self.pulls)

    def get_git_ref(self, ref: str) -> FakeRef:
        return FakeRef(self, ref.removeprefix("heads/"))


class FakeGithub:
    """In-memory stand-in for github.Github serving a single repository."""

    def __init__(self, repository: FakeRepository):
        self.repository = repository
        self.requested: list[str] = []

    def get_repo(self, full_name: str) -> FakeRepository:
        self.requested.append(full_name)
        if full_name != self.repository.full_name:
            raise UnknownObjectException(404, {"message": "Not Found"}, None)
        return self.repository


@pytest.fixture()
def sandbox_repo() -> FakeRepository:
    """The example sandbox: one stale test branch, one fresh, one stale human branch."""
    return FakeRepository(
        branches={
            "main": NOW - timedelta(days=30),
            "test-123": NOW - timedelta(days=3),
            "test-456": NOW - timedelta(hours=1),
            "feature/manual": NOW - timedelta(days=10),
        },
    )


@pytest.fixture()
def fake_client(sandbox_repo: FakeRepository) -> FakeGithub:
    return FakeGithub(sandbox_repo)


# ---------------------------------------------------------------------------
# Project config store
# ---------------------------------------------------------------------------


@pytest.fixture()
def clean_store():
    """Empty the process-wide config store before and after the test."""
    default_store.clear()
    yield default_store
    default_store.clear()


@pytest.fixture(autouse=True)
def _no_github_env(monkeypatch):
    """Keep credentials from the developer's environment out of the tests."""
    for var in (
        "GITHUB_APP_ID",
        "GITHUB_APP_PRIVATE_KEY",
        "GITHUB_APP_PRIVATE_KEY_PATH",
        "GITHUB_TOKEN",
        "GITHUB_BASE_URL",
        "BRANCH_REAPER_TEST_BRANCH_PATTERN",
        "BRANCH_REAPER_DEFAULT_THRESHOLD_HOURS",
        "BRANCH_REAPER_MAX_CONCURRENCY",
    ):
        monkeypatch.delenv(var, raising=False)
