"""Configuration schema: Pydantic models for mycodash config files."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..api_client.client import DEFAULT_AGENT_URL, DEFAULT_OBJECT
from ..api_client.types import NULL_SESSION


class AgentConfig(BaseModel):
    """Where and how to reach the agent's ubus object."""
    url: str = DEFAULT_AGENT_URL
    session: str = NULL_SESSION
    object: str = DEFAULT_OBJECT
    timeout: float = Field(10.0, gt=0)
    verify_tls: bool = Field(True, alias="verifyTls")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("url")
    @classmethod
    def _require_http_url(cls, value: str) -> str:
        url = value.strip()
        if not url.startswith(("http://", "https://")):
            raise ValueError("agent url must be an http(s) URL")
        return url


class PollConfig(BaseModel):
    interval: float = Field(2.0, gt=0)


class ControlsConfig(BaseModel):
    step_kbit: int = Field(1000, gt=0, alias="stepKbit")

    model_config = ConfigDict(populate_by_name=True)


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: Optional[Literal["debug", "info", "warn", "warning", "error"]] = None
    format: Optional[Literal["kv", "json", "pretty"]] = None
    console: Optional[bool] = None
    file: Optional[bool] = None
    dev_file: Optional[bool] = Field(None, alias="devFile")

    model_config = ConfigDict(populate_by_name=True)


class TuiConfig(BaseModel):
    theme: Optional[Literal["dark", "light"]] = None


class Config(BaseModel):
    """Main configuration model."""
    agent: AgentConfig = Field(default_factory=AgentConfig)
    poll: PollConfig = Field(default_factory=PollConfig)
    controls: ControlsConfig = Field(default_factory=ControlsConfig)
    logging: Optional[LoggingConfig] = None
    tui: Optional[TuiConfig] = None
    log_level: Optional[str] = Field(None, alias="logLevel")

    model_config = ConfigDict(extra="allow", populate_by_name=True)
