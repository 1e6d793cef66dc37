from .github_session import GitHubSession

__all__ = ["GitHubSession"]
