"""Configuration management.

Loads and merges configuration from multiple sources with proper precedence.
"""

import json
import os
from contextvars import ContextVar, Token
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .config_loader import CONFIG_FILENAMES, deep_merge, load_json_file, project_config_files
from .config_schema import (
    AgentConfig,
    Config,
    ControlsConfig,
    LoggingConfig,
    PollConfig,
    TuiConfig,
)
from .global_paths import GlobalPath
from ..util.log import Log

log = Log.create({"service": "config"})

__all__ = [
    "AgentConfig",
    "Config",
    "ConfigError",
    "ConfigManager",
    "ControlsConfig",
    "LoggingConfig",
    "PollConfig",
    "TuiConfig",
]

CONFIG_CONTENT_ENV = "MYCODASH_CONFIG_CONTENT"


class ConfigError(Exception):
    """Configuration error."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Config error in {path}: {message}")


_config_var: ContextVar['ConfigManager'] = ContextVar('_config_var')


class ConfigManager:
    """Configuration management.

    Instance-based with ContextVar for scoping. Class methods delegate
    to the current instance.

    Loads configuration from multiple sources with proper precedence:
    1. Global config (~/.config/mycodash/mycodash.json)
    2. mycodash.json files from the filesystem root down to the directory
    3. MYCODASH_CONFIG_CONTENT environment variable
    4. Explicit overrides (CLI flags)
    """

    def __init__(self) -> None:
        self._cache: Optional[Config] = None
        self._sources: List[str] = []

    # -- ContextVar plumbing --

    @classmethod
    def current(cls) -> 'ConfigManager':
        try:
            return _config_var.get()
        except LookupError:
            instance = cls()
            _config_var.set(instance)
            return instance

    @classmethod
    def provide(cls, instance: 'ConfigManager') -> Token['ConfigManager']:
        return _config_var.set(instance)

    @classmethod
    def restore(cls, token: Token['ConfigManager']) -> None:
        _config_var.reset(token)

    # -- Public API (class methods delegate to current instance) --

    @classmethod
    def reset(cls) -> None:
        """Reset cached configuration."""
        inst = cls.current()
        inst._cache = None
        inst._sources = []

    @classmethod
    def load(
        cls,
        directory: str = ".",
        overrides: Optional[Dict[str, Any]] = None,
    ) -> Config:
        return cls.current()._load(directory, overrides)

    @classmethod
    def get(cls) -> Config:
        inst = cls.current()
        if inst._cache is None:
            return inst._load()
        return inst._cache

    @classmethod
    def sources(cls) -> List[str]:
        return cls.current()._sources.copy()

    # -- Instance methods --

    def _merge_file(self, result: Dict[str, Any], filepath: str, kind: str) -> Dict[str, Any]:
        data = load_json_file(filepath)
        if not data:
            return result
        self._sources.append(filepath)
        log.info(f"loaded {kind} config", {"path": filepath})
        return deep_merge(result, data)

    def _load(
        self,
        directory: str = ".",
        overrides: Optional[Dict[str, Any]] = None,
    ) -> Config:
        result: Dict[str, Any] = {}
        self._sources = []

        # 1. Global config
        for filename in CONFIG_FILENAMES:
            result = self._merge_file(result, os.path.join(GlobalPath.config(), filename), "global")

        # 2. Project configs, root first so the closest file wins
        for path in project_config_files(directory):
            result = self._merge_file(result, str(path), "project")

        # 3. Environment variable config
        env_config = os.environ.get(CONFIG_CONTENT_ENV)
        if env_config:
            try:
                data = json.loads(env_config)
            except json.JSONDecodeError:
                log.error(f"failed to parse {CONFIG_CONTENT_ENV}")
            else:
                if isinstance(data, dict):
                    result = deep_merge(result, data)
                    self._sources.append(CONFIG_CONTENT_ENV)
                    log.info(f"loaded config from {CONFIG_CONTENT_ENV}")

        # 4. Explicit overrides
        if overrides:
            result = deep_merge(result, overrides)

        try:
            self._cache = Config.model_validate(result)
        except ValidationError as exc:
            source = self._sources[-1] if self._sources else "<defaults>"
            raise ConfigError(source, str(exc)) from exc
        return self._cache
