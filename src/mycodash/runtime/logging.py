"""Runtime logging bootstrap helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Optional

from ..core.config import ConfigManager, LoggingConfig
from ..util.log import Log, LogFormat, LogLevel

LogMode = Literal["tui", "status"]


@dataclass(frozen=True)
class LogSettings:
    level: LogLevel
    format: LogFormat
    console: bool
    file: bool
    dev_file: bool


def _pick(explicit: Any, section: Optional[LoggingConfig], name: str, default: Any) -> Any:
    """Command line value, then the ``logging`` config section, then ``default``."""
    if explicit is not None:
        return explicit
    configured = getattr(section, name, None) if section is not None else None
    return default if configured is None else configured


def resolve_log_settings(
    *,
    mode: LogMode,
    level: Optional[str] = None,
    format: Optional[str] = None,
    console: Optional[bool] = None,
    file: Optional[bool] = None,
    dev_file: Optional[bool] = None,
) -> LogSettings:
    cfg = ConfigManager.get()
    section = cfg.logging

    return LogSettings(
        level=LogLevel.parse(_pick(level, section, "level", cfg.log_level)),
        format=LogFormat.parse(_pick(format, section, "format", None)),
        # The TUI owns the terminal.
        console=mode != "tui" and bool(_pick(console, section, "console", False)),
        file=bool(_pick(file, section, "file", True)),
        dev_file=bool(_pick(dev_file, section, "dev_file", False)),
    )


def bootstrap_logging(
    *,
    mode: LogMode,
    level: Optional[str] = None,
    format: Optional[str] = None,
    console: Optional[bool] = None,
    file: Optional[bool] = None,
    dev_file: Optional[bool] = None,
) -> LogSettings:
    """Resolve config and initialize the process logger."""
    settings = resolve_log_settings(
        mode=mode,
        level=level,
        format=format,
        console=console,
        file=file,
        dev_file=dev_file,
    )
    Log.configure(
        level=settings.level,
        format=settings.format,
        console=settings.console,
        file=settings.file,
        dev=settings.dev_file,
    )
    return settings
