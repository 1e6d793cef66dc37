from .loader import ConfigSource, JsonConfigSource, ModuleConfigSource, load_config, source_for
from .models import (
    AppConfig,
    LintConfig,
    MailConfig,
    MailRepoConfig,
    ProjectConfig,
    ProjectInfo,
    RepoConfig,
    UserConfig,
)
from .store import ConfigStore, default_store, get_config, load_and_set_config, set_config

__all__ = [
    "AppConfig",
    "ConfigSource",
    "ConfigStore",
    "JsonConfigSource",
    "LintConfig",
    "MailConfig",
    "MailRepoConfig",
    "ModuleConfigSource",
    "ProjectConfig",
    "ProjectInfo",
    "RepoConfig",
    "UserConfig",
    "default_store",
    "get_config",
    "load_and_set_config",
    "load_config",
    "set_config",
    "source_for",
]
