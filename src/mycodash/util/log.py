"""Structured logging with tagged loggers, file output and log rotation.

Every module creates its logger once with a ``service`` tag; extra fields
are passed per call as a dict and rendered as key/value pairs, JSON lines or
a human readable line depending on the configured format.
"""

import json
import sys
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TextIO

from ..core.global_paths import GlobalPath

_KEEP_LOG_FILES = 10
_RESERVED = ("time", "delta_ms", "level", "msg")


class LogLevel(str, Enum):
    """Log severity levels, lowest first."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"

    @property
    def priority(self) -> int:
        return list(LogLevel).index(self)

    @classmethod
    def parse(cls, value: Optional[str]) -> "LogLevel":
        if value is None:
            return cls.INFO
        text = value.strip().upper()
        if text == "WARNING":
            text = "WARN"
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"invalid log level: {value}") from None


class LogFormat(str, Enum):
    """Log output format."""
    KV = "kv"
    JSON = "json"
    PRETTY = "pretty"

    @classmethod
    def parse(cls, value: Optional[str]) -> "LogFormat":
        if value is None:
            return cls.KV
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"invalid log format: {value}") from None


@dataclass
class LogConfig:
    """Process-wide sink settings."""
    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.KV
    console: bool = False
    file: bool = False
    log_file_path: Optional[str] = None
    _file_handle: Optional[TextIO] = None


_config = LogConfig()
_last_timestamp = time.time()


def _describe(error: BaseException, depth: int = 0) -> str:
    text = str(error) or error.__class__.__name__
    if error.__cause__ is not None and depth < 10:
        text += " Caused by: " + _describe(error.__cause__, depth + 1)
    return text


def _plain(value: Any) -> Any:
    if isinstance(value, BaseException):
        return _describe(value)
    if value is None or isinstance(value, (dict, list, tuple, int, float, bool)):
        return value
    return str(value)


def _kv_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    text = str(value)
    if not text or "=" in text or any(ch.isspace() for ch in text):
        return json.dumps(text, ensure_ascii=False)
    return text


def _fields(event: Dict[str, Any]) -> str:
    return " ".join(f"{k}={_kv_value(v)}" for k, v in event.items() if k not in _RESERVED)


def _as_json(event: Dict[str, Any]) -> str:
    return json.dumps(event, ensure_ascii=False, separators=(",", ":"))


def _as_kv(event: Dict[str, Any]) -> str:
    head = f"{event['time']} +{event['delta_ms']}ms level={event['level']} msg={_kv_value(event['msg'])}"
    rest = _fields(event)
    return f"{head} {rest}" if rest else head


def _as_pretty(event: Dict[str, Any]) -> str:
    rest = _fields(event)
    suffix = f" ({rest})" if rest else ""
    return f"{event['time']} {event['level'].upper()} {event['msg'] or ''}{suffix} +{event['delta_ms']}ms"


_FORMATTERS: Dict[LogFormat, Callable[[Dict[str, Any]], str]] = {
    LogFormat.KV: _as_kv,
    LogFormat.JSON: _as_json,
    LogFormat.PRETTY: _as_pretty,
}


@dataclass
class LogTimer:
    """Context manager that logs how long a block took."""
    logger: 'Logger'
    message: str
    extra: Dict[str, Any]
    start_time: float = field(default_factory=time.monotonic)

    def stop(self) -> None:
        duration_ms = int((time.monotonic() - self.start_time) * 1000)
        self.logger.debug(self.message, {**self.extra, "status": "completed", "duration": duration_ms})

    def __enter__(self) -> 'LogTimer':
        return self

    def __exit__(self, *args) -> None:
        self.stop()


class Logger:
    """Tagged logger; tags are merged into every event."""

    def __init__(self, tags: Optional[Dict[str, Any]] = None):
        self.tags = tags or {}

    def _event(self, level: LogLevel, message: Any, extra: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        global _last_timestamp

        now = time.time()
        delta_ms = int((now - _last_timestamp) * 1000)
        _last_timestamp = now

        merged = {**self.tags, **(extra or {})}
        return {
            "time": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "delta_ms": delta_ms,
            "level": level.value.lower(),
            "msg": _plain(message),
            **{k: _plain(v) for k, v in merged.items() if v is not None},
        }

    def _log(self, level: LogLevel, message: Any, extra: Optional[Dict[str, Any]]) -> None:
        if level.priority < _config.level.priority:
            return
        line = _FORMATTERS[_config.format](self._event(level, message, extra)) + "\n"
        if _config.console:
            sys.stderr.write(line)
            sys.stderr.flush()
        if _config.file and _config._file_handle:
            _config._file_handle.write(line)
            _config._file_handle.flush()

    def debug(self, message: Any = None, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(LogLevel.DEBUG, message, extra)

    def info(self, message: Any = None, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(LogLevel.INFO, message, extra)

    def warn(self, message: Any = None, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(LogLevel.WARN, message, extra)

    warning = warn

    def error(self, message: Any = None, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(LogLevel.ERROR, message, extra)

    def time(self, message: str, extra: Optional[Dict[str, Any]] = None) -> LogTimer:
        """Time a block; completion is logged at debug level."""
        return LogTimer(logger=self, message=message, extra=extra or {})


class Log:
    """Logger factory and sink configuration."""

    _loggers: Dict[str, Logger] = {}

    @classmethod
    def create(cls, tags: Optional[Dict[str, Any]] = None) -> Logger:
        """Return the logger for ``tags["service"]``, creating it once."""
        tags = tags or {}
        service = tags.get("service")
        if not isinstance(service, str) or not service:
            return Logger(tags=tags)
        if service not in cls._loggers:
            cls._loggers[service] = Logger(tags=tags)
        return cls._loggers[service]

    @classmethod
    def configure(
        cls,
        *,
        level: Optional[LogLevel] = None,
        format: Optional[LogFormat] = None,
        console: Optional[bool] = None,
        file: Optional[bool] = None,
        dev: bool = False,
    ) -> None:
        """Set level, format and sinks; the file sink is on unless ``file=False``."""
        if level is not None:
            _config.level = level
        if format is not None:
            _config.format = format
        if console is not None:
            _config.console = console
        _config.file = file is not False

        cls.close()
        _config.log_file_path = None
        if not _config.file:
            return

        log_dir = Path(GlobalPath.log())
        log_dir.mkdir(parents=True, exist_ok=True)
        cls._cleanup_logs(log_dir)
        name = "dev.log" if dev else datetime.now().strftime("%Y-%m-%dT%H%M%S") + ".log"
        log_path = log_dir / name

        _config.log_file_path = str(log_path)
        _config._file_handle = log_path.open("w", encoding="utf-8")

    @classmethod
    def file(cls) -> str:
        """Path of the current log file, or an empty string."""
        return _config.log_file_path or ""

    @classmethod
    def _cleanup_logs(cls, log_dir: Path) -> None:
        """Delete the oldest timestamped logs so a new one fits the limit."""
        log_files = sorted(
            log_dir.glob("????-??-??T??????.log"),
            key=lambda p: p.stat().st_mtime,
        )
        excess = len(log_files) - _KEEP_LOG_FILES + 1
        for old_file in log_files[:max(excess, 0)]:
            old_file.unlink(missing_ok=True)

    @classmethod
    def close(cls) -> None:
        if _config._file_handle:
            _config._file_handle.close()
            _config._file_handle = None
