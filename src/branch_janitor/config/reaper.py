from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReaperSettings(BaseSettings):
    """Policy knobs for the test-branch reaper.

    Environment variables use the prefix BRANCH_REAPER_.
    Example: BRANCH_REAPER_TEST_BRANCH_PATTERN='^(test|ci)-'
    """

    model_config = SettingsConfigDict(env_prefix="BRANCH_REAPER_", case_sensitive=False, extra="ignore")

    test_branch_pattern: str = Field(
        default=r"^test-",
        description="Regular expression a branch name must match to be treated as created by a test run",
    )
    default_threshold_hours: float = Field(
        default=48.0,
        ge=0,
        allow_inf_nan=False,
        description="Age threshold applied when neither --hours nor --minutes is given",
    )
    max_concurrency: int = Field(
        default=4,
        ge=1,
        description="Maximum number of GitHub calls issued at once while scanning and deleting",
    )
