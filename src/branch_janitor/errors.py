"""Error kinds raised across branch-janitor.

``StateError``, ``LoadError`` and ``AuthError`` are fatal and propagate to the
caller. ``DeletionError`` is raised for a single branch and is recovered by the
reaper, which records it and moves on to the next branch.
"""


class BranchJanitorError(Exception):
    """Base class for all branch-janitor errors."""


class StateError(BranchJanitorError):
    """The project configuration was queried before one was installed."""


class LoadError(BranchJanitorError):
    """A project configuration could not be resolved from its source."""


class AuthError(BranchJanitorError):
    """Credential resolution against GitHub failed."""


class DeletionError(BranchJanitorError):
    """One branch could not be deleted."""

    def __init__(self, branch: str, message: str):
        super().__init__(f"failed to delete branch '{branch}': {message}")
        self.branch = branch
