"""Process-wide holder for the project configuration."""

import logging
from pathlib import Path

from ..errors import StateError
from .loader import load_config
from .models import ProjectConfig

logger = logging.getLogger(__name__)


class ConfigStore:
    """
    Holds at most one ProjectConfig.

    The store is either empty or holds a complete configuration; ``get`` on an
    empty store raises instead of returning a default. ``set`` is expected once
    at startup, before any ``get``, so no locking is done.
    """

    def __init__(self) -> None:
        self._config: ProjectConfig | None = None

    def get(self) -> ProjectConfig:
        if self._config is None:
            raise StateError("project-config not set")
        return self._config

    def set(self, config: ProjectConfig) -> ProjectConfig:
        """Install ``config``, replacing whatever was installed before."""
        self._config = config
        return config

    def load(self, path: str | Path) -> ProjectConfig:
        """Load a configuration from ``path`` and install it."""
        config = load_config(path)
        logger.info("Project config loaded from %s (repo %s/%s)", path, config.repo.owner, config.repo.name)
        return self.set(config)

    def clear(self) -> None:
        self._config = None

    @property
    def is_set(self) -> bool:
        return self._config is not None


default_store = ConfigStore()


def get_config() -> ProjectConfig:
    """Return the process-wide configuration or raise StateError if none is set."""
    return default_store.get()


def set_config(config: ProjectConfig) -> ProjectConfig:
    return default_store.set(config)


def load_and_set_config(path: str | Path) -> ProjectConfig:
    return default_store.load(path)
