from .github import GitHubSettings
from .reaper import ReaperSettings

__all__ = [
    "GitHubSettings",
    "ReaperSettings",
]
