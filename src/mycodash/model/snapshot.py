"""Immutable models for the agent's status replies.

Replies are parsed leniently: anything structurally wrong is treated as
absent instead of failing, so a partially broken reply still renders with
placeholders. Both the agent's snake_case keys and camelCase keys are
accepted.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

UNKNOWN_PERSONA = "unknown"

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def _snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub(r"_\1", key).lower()


def _section(value: Any) -> dict[str, Any]:
    """Return a snake_cased copy of a mapping, or ``{}`` for anything else."""
    if isinstance(value, BaseModel):
        return value.model_dump()
    if not isinstance(value, Mapping):
        return {}
    return {_snake(str(key)): item for key, item in value.items()}


def _non_negative(value: Any) -> Optional[float]:
    """Coerce a wire number; negative, non-finite and non-numeric become absent."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    number = float(value)
    if math.isnan(number) or math.isinf(number) or number < 0:
        return None
    return number


def _text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


def _flag(value: Any) -> bool:
    # ubus encodes booleans as u32
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _normalize_keys(cls, value: Any) -> dict[str, Any]:
        return _section(value)


class Metrics(_WireModel):
    """Live network metrics; every field may be absent."""

    rtt_ms: Optional[float] = None
    jitter_ms: Optional[float] = None
    tx_bps: Optional[float] = None
    rx_bps: Optional[float] = None
    cpu_pct: Optional[float] = None

    @field_validator("rtt_ms", "jitter_ms", "tx_bps", "rx_bps", "cpu_pct", mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> Optional[float]:
        return _non_negative(value)


class Baseline(_WireModel):
    """Reference values the live metrics are compared against."""

    rtt_ms: Optional[float] = None

    @field_validator("rtt_ms", mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> Optional[float]:
        return _non_negative(value)


class Policy(_WireModel):
    """Currently applied bandwidth policy."""

    bandwidth_kbit: Optional[int] = None
    boosted: Optional[bool] = None

    @field_validator("bandwidth_kbit", mode="before")
    @classmethod
    def _coerce_bandwidth(cls, value: Any) -> Optional[int]:
        number = _non_negative(value)
        return None if number is None else int(number)

    @field_validator("boosted", mode="before")
    @classmethod
    def _coerce_boosted(cls, value: Any) -> Optional[bool]:
        return None if value is None else _flag(value)


class PersonaOverride(_WireModel):
    active: bool = False
    value: Optional[str] = None

    @field_validator("active", mode="before")
    @classmethod
    def _coerce_active(cls, value: Any) -> bool:
        return _flag(value)

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, value: Any) -> Optional[str]:
        return _text(value)


class StatusSnapshot(BaseModel):
    """One point-in-time read of the agent's state."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    safe_mode: bool = False
    persona_override: Optional[PersonaOverride] = None
    persona: str = UNKNOWN_PERSONA
    reason: Optional[str] = None
    metrics: Metrics = Field(default_factory=Metrics)
    baseline: Baseline = Field(default_factory=Baseline)
    policy: Policy = Field(default_factory=Policy)

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, value: Any) -> dict[str, Any]:
        data = _section(value)

        # The agent sends the override flat: persona_override=1 plus
        # persona_override_value; the nested form is accepted as well.
        override = data.get("persona_override")
        if override is None or isinstance(override, (Mapping, BaseModel)):
            data["persona_override"] = override
        else:
            data["persona_override"] = {
                "active": override,
                "value": data.get("persona_override_value"),
            }

        data["safe_mode"] = _flag(data.get("safe_mode"))
        persona = _text(data.get("persona"))
        data["persona"] = persona.lower() if persona else UNKNOWN_PERSONA
        data["reason"] = _text(data.get("reason"))
        for key in ("metrics", "baseline", "policy"):
            data[key] = _section(data.get(key))
        return data

    @classmethod
    def from_wire(cls, value: Any) -> "StatusSnapshot":
        return cls.model_validate(value)

    @property
    def override_active(self) -> bool:
        return bool(self.persona_override and self.persona_override.active)


class PersonaOverrideList(_WireModel):
    """Reply of ``persona_list``: current persona and the configured override."""

    current: Optional[str] = None
    override_active: bool = False
    override: Optional[str] = None

    @field_validator("current", "override", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> Optional[str]:
        return _text(value)

    @field_validator("override_active", mode="before")
    @classmethod
    def _coerce_active(cls, value: Any) -> bool:
        return _flag(value)

    @classmethod
    def from_wire(cls, value: Any) -> "PersonaOverrideList":
        return cls.model_validate(value)

    @property
    def has_override(self) -> bool:
        return self.override_active
