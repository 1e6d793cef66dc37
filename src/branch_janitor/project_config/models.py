"""Pydantic models describing the project configuration shared by the suite.

Attributes are snake_case; the on-disk documents use the historical camelCase
keys, which are declared as aliases. Either spelling is accepted on input.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ConfigModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RepoConfig(_ConfigModel):
    """Repository being tracked and the clones being monitored."""

    name: str = Field(description="Name of the repository")
    owner: str = Field(description="Owner of the repository holding the tracking data")
    base_owner: str = Field(description="Owner of the base repository")
    owners: list[str] = Field(description="Owners of clones being monitored for pull requests")
    branches: list[str] = Field(description="Remote branches to fetch")
    closing_branches: list[str] = Field(description="A pull request is closed once merged into one of these")
    tracking_branches: list[str] = Field(description="A pull request is commented on once merged into one of these")
    maintainer_branch: Optional[str] = Field(
        default=None, description="Branch/owner used by the maintainer to apply changes manually"
    )
    host: str = Field(description="Host serving the repository")


class MailRepoConfig(_ConfigModel):
    """Repository mirroring the mailing list archive."""

    name: str
    owner: str
    branch: str
    host: str
    url: str
    descriptive_name: str = Field(description="Human-readable label for the mailing list")


class MailConfig(_ConfigModel):
    author: str = Field(description="Address patches are attributed to")
    sender: str = Field(description="Address mails are sent from")


class ProjectInfo(_ConfigModel):
    """Mail routing for a project that accepts patches by email."""

    to: str = Field(description="Address patches are sent to")
    branch: str = Field(description="Upstream branch a pull request must be based on")
    cc: list[str] = Field(default_factory=list, description="Addresses always copied on patches")
    url_prefix: str = Field(description="URL prefix of the list archive")


class AppConfig(_ConfigModel):
    """Identity of the GitHub App acting on behalf of the project."""

    app_id: int = Field(alias="appID")
    installation_id: int = Field(alias="installationID")
    name: str
    display_name: str = Field(description="Name used in comments to identify the app")
    altname: Optional[str] = None


class LintConfig(_ConfigModel):
    max_commits_ignore: Optional[list[str]] = Field(
        default=None, description="Pull request URLs exempted from the commit-count check"
    )
    max_commits: int = Field(description="Maximum number of commits allowed in a pull request")


class UserConfig(_ConfigModel):
    allow_user_as_login: bool = Field(description="Use the GitHub login as the display name when the name is private")


class ProjectConfig(_ConfigModel):
    """Complete project configuration."""

    repo: RepoConfig
    mailrepo: MailRepoConfig
    mail: MailConfig
    project: Optional[ProjectInfo] = None
    app: AppConfig
    lint: LintConfig
    user: UserConfig
