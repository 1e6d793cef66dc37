"""
Authenticated access to one GitHub repository.

The session resolves credentials (a GitHub App installation token, or a plain
token) and hands out the resulting PyGithub client. Callers use the client
directly rather than going through wrappers here.

PyGithub is blocking, so every network call is run with ``asyncio.to_thread``.
"""

import asyncio
import logging

import jwt
import requests
from github import Auth, Github, GithubException, GithubIntegration, UnknownObjectException
from github.Repository import Repository

from ..config import GitHubSettings
from ..errors import AuthError

logger = logging.getLogger(__name__)


class GitHubSession:
    """An authenticated handle on ``owner/repo``."""

    def __init__(self, owner: str, repo: str, settings: GitHubSettings | None = None):
        self.owner = owner
        self.repo = repo
        self._settings = settings or GitHubSettings()
        self._client: Github | None = None
        self._authenticated_owner: str | None = None
        self._repository: Repository | None = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def client(self) -> Github:
        """The authenticated client. Fails if ``authenticate`` has not completed."""
        if self._client is None:
            raise RuntimeError(f"GitHubSession for {self.full_name} used before authenticate()")
        return self._client

    async def authenticate(self, owner: str | None = None) -> Github:
        """
        Resolve credentials for ``owner`` and return a ready client.

        Args:
            owner: Account the credentials are resolved for. Defaults to the session owner.

        Returns:
            The authenticated PyGithub client

        Raises:
            AuthError: No credentials are configured, or GitHub rejected them
            RuntimeError: The session is already authenticated for a different owner
        """
        owner = owner or self.owner
        if self._client is not None:
            if owner != self._authenticated_owner:
                raise RuntimeError(
                    f"GitHubSession for {self.full_name} is authenticated for {self._authenticated_owner}, not {owner}"
                )
            return self._client

        client = await asyncio.to_thread(self._authenticate, owner)
        self._client = client
        self._authenticated_owner = owner
        return client

    async def repository(self) -> Repository:
        """Return the bound repository, fetching it on first use."""
        if self._repository is None:
            client = self.client
            self._repository = await asyncio.to_thread(client.get_repo, self.full_name)
        return self._repository

    def _authenticate(self, owner: str) -> Github:
        settings = self._settings
        try:
            if settings.has_app_credentials:
                client = self._app_client(owner)
            elif settings.token:
                logger.info("Authenticating to GitHub with a token")
                client = Github(auth=Auth.Token(settings.token), base_url=settings.base_url)
            else:
                raise AuthError("no GitHub credentials configured (set GITHUB_APP_ID and a private key, or GITHUB_TOKEN)")

            # Fails on bad credentials and on a repository the credentials cannot see.
            self._repository = client.get_repo(self.full_name)
        except GithubException as e:
            raise AuthError(f"GitHub rejected credentials for {owner}: {e}") from e
        except requests.RequestException as e:
            raise AuthError(f"could not reach GitHub: {e}") from e
        except (jwt.PyJWTError, ValueError) as e:
            raise AuthError(f"cannot sign GitHub App token with the configured private key: {e}") from e

        logger.info("Authenticated for %s", self.full_name)
        return client

    def _app_client(self, owner: str) -> Github:
        settings = self._settings
        assert settings.app_id is not None
        app_auth = Auth.AppAuth(settings.app_id, self._private_key())
        integration = GithubIntegration(auth=app_auth, base_url=settings.base_url)

        try:
            installation = integration.get_repo_installation(owner, self.repo)
        except UnknownObjectException:
            logger.debug("App %s not installed on %s/%s, trying the account installation", settings.app_id, owner, self.repo)
            try:
                installation = integration.get_org_installation(owner)
            except UnknownObjectException:
                installation = integration.get_user_installation(owner)

        logger.info("Authenticating as GitHub App %s (installation %s)", settings.app_id, installation.id)
        token = integration.get_access_token(installation.id).token
        return Github(auth=Auth.Token(token), base_url=settings.base_url)

    def _private_key(self) -> str:
        settings = self._settings
        if settings.app_private_key:
            return settings.app_private_key
        assert settings.app_private_key_path is not None
        try:
            return settings.app_private_key_path.read_text(encoding="utf-8")
        except OSError as e:
            raise AuthError(f"cannot read GitHub App private key {settings.app_private_key_path}: {e}") from e
