"""Config file discovery and parsing: JSONC, ``{env:VAR}`` substitution, merging."""

from __future__ import annotations

import os
import re
from collections.abc import Iterator
from pathlib import Path
from typing import Any, Dict

import commentjson

from ..util.log import Log

log = Log.create({"service": "config.loader"})

CONFIG_FILENAMES = ("mycodash.json", "mycodash.jsonc")

_ENV_REF = re.compile(r"\{env:([^}]+)\}")


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``override`` into a copy of ``base``; nested objects merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = deep_merge(current, value)
        merged[key] = value
    return merged


def substitute_env_vars(text: str) -> str:
    """Expand ``{env:VAR}`` references; unset variables expand to ``""``."""
    return _ENV_REF.sub(lambda match: os.environ.get(match.group(1), ""), text)


def project_config_files(directory: str) -> Iterator[Path]:
    """Config files from the filesystem root down to ``directory``.

    Later files are closer to the directory and take precedence.
    """
    start = Path(directory).resolve()
    for folder in reversed([start, *start.parents]):
        for name in CONFIG_FILENAMES:
            candidate = folder / name
            if candidate.is_file():
                yield candidate


def load_json_file(filepath: str) -> Dict[str, Any]:
    """Parse a JSON/JSONC object file; problems are logged and yield ``{}``."""
    path = Path(filepath)
    if not path.is_file():
        return {}

    try:
        data = commentjson.loads(substitute_env_vars(path.read_text(encoding="utf-8")))
    except (OSError, ValueError) as e:
        log.error("failed to load config file", {"path": filepath, "error": str(e)})
        return {}

    if not isinstance(data, dict):
        log.error("config file is not an object", {"path": filepath})
        return {}
    return data
