"""
Resolve a project configuration from a file.

Two source encodings are supported and selected by file extension:
- ``.py``: a Python module whose module-level ``config`` attribute is the
  configuration (a ``ProjectConfig`` or a mapping of the same shape)
- anything else: a JSON document

Both paths return the same ``ProjectConfig`` type, so callers never branch on
the source format.
"""

import importlib.util
import json
import logging
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..errors import LoadError
from .models import ProjectConfig

logger = logging.getLogger(__name__)

MODULE_SUFFIX = ".py"
DEFAULT_EXPORT = "config"

_NOT_SET = "project-config not set"


class ConfigSource(ABC):
    """A file that can be resolved into a ``ProjectConfig``."""

    def __init__(self, path: Path) -> None:
        self.path = path

    @abstractmethod
    def read(self) -> Any:
        """Return the raw value held by the source, or None when it holds nothing."""

    def load(self) -> ProjectConfig:
        value = self.read()
        if value is None:
            raise LoadError(_NOT_SET)
        if isinstance(value, ProjectConfig):
            return value
        try:
            return ProjectConfig.model_validate(value)
        except ValidationError as e:
            raise LoadError(f"{self.path}: not a project configuration: {e}") from e


class JsonConfigSource(ConfigSource):
    def read(self) -> Any:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise LoadError(f"cannot read {self.path}: {e}") from e
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise LoadError(f"{self.path}: invalid JSON: {e}") from e


class ModuleConfigSource(ConfigSource):
    def read(self) -> Any:
        if not self.path.is_file():
            raise LoadError(f"cannot read {self.path}: no such file")

        # A unique module name keeps repeated loads of the same path independent.
        module_name = f"_branch_janitor_config_{uuid.uuid4().hex}"
        spec = importlib.util.spec_from_file_location(module_name, self.path)
        if spec is None or spec.loader is None:
            raise LoadError(f"cannot import {self.path}")

        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            raise LoadError(f"error importing {self.path}: {e}") from e
        return getattr(module, DEFAULT_EXPORT, None)


def source_for(path: str | Path) -> ConfigSource:
    """Pick the source implementation matching the file extension."""
    path = Path(path)
    if path.suffix == MODULE_SUFFIX:
        return ModuleConfigSource(path)
    return JsonConfigSource(path)


def load_config(path: str | Path) -> ProjectConfig:
    """
    Load a project configuration from a JSON file or a Python module.

    Args:
        path: Path to a ``.json`` document or a ``.py`` module exporting ``config``

    Returns:
        The loaded ProjectConfig

    Raises:
        LoadError: The source holds no configuration or cannot be read/parsed
    """
    source = source_for(path)
    logger.debug("Loading project config from %s (%s)", source.path, type(source).__name__)
    return source.load()
