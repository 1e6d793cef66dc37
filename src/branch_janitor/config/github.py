from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GitHubSettings(BaseSettings):
    """Credentials used to authenticate against GitHub.

    Environment variables use the prefix GITHUB_.
    Example: GITHUB_APP_ID=12345 GITHUB_APP_PRIVATE_KEY_PATH=/secrets/app.pem

    A GitHub App is preferred when configured; GITHUB_TOKEN is the fallback.
    """

    model_config = SettingsConfigDict(env_prefix="GITHUB_", case_sensitive=False, extra="ignore")

    app_id: int | None = Field(
        default=None,
        description="Numeric ID of the GitHub App installed on the test repository",
    )
    app_private_key: str | None = Field(
        default=None,
        description="PEM-encoded private key of the GitHub App",
    )
    app_private_key_path: Path | None = Field(
        default=None,
        description="Path to a PEM file holding the GitHub App private key (used when APP_PRIVATE_KEY is unset)",
    )
    token: str | None = Field(
        default=None,
        description="Personal or automation token used when no GitHub App is configured",
    )
    base_url: str = Field(
        default="https://api.github.com",
        description="GitHub REST API root, override for GitHub Enterprise",
    )

    @property
    def has_app_credentials(self) -> bool:
        return self.app_id is not None and bool(self.app_private_key or self.app_private_key_path)
