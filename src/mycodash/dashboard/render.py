"""Pure mapping from a status snapshot to the dashboard's display tree.

Nothing here touches the screen: ``render_status`` builds a frozen
``StatusView`` which host adapters draw. Equal snapshots always produce
equal views, so the display region can be rebuilt wholesale on every tick.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..model import UNKNOWN_PERSONA, StatusSnapshot

PLACEHOLDER = "—"

RTT_ALERT_MS = 50.0
JITTER_WARNING_MS = 10.0
CPU_ALERT_PCT = 40.0


class Tone(str, Enum):
    NORMAL = "normal"
    WARNING = "warning"
    ALERT = "alert"
    INFO = "info"


# Colors of the original LuCI view
COLOR_NORMAL = "#4CAF50"
COLOR_WARNING = "#FF9800"
COLOR_ALERT = "#f44336"
COLOR_TX = "#2196F3"
COLOR_RX = "#9C27B0"
COLOR_BANDWIDTH = "#673AB7"
COLOR_BASELINE = "#607D8B"


@dataclass(frozen=True)
class Banner:
    kind: str
    text: str
    color: str


@dataclass(frozen=True)
class MetricCard:
    label: str
    value: str
    unit: str
    tone: Tone
    color: str

    @property
    def display(self) -> str:
        if self.value == PLACEHOLDER:
            return PLACEHOLDER
        return f"{self.value} {self.unit}".strip()


@dataclass(frozen=True)
class PersonaBadge:
    persona: str
    label: str
    icon: str
    color: str

    @property
    def text(self) -> str:
        return f"{self.icon} {self.label}"


@dataclass(frozen=True)
class StatusView:
    banners: tuple[Banner, ...]
    metrics: tuple[MetricCard, ...]
    persona: PersonaBadge
    reason: str
    policy: tuple[MetricCard, ...]

    def banner(self, kind: str) -> Optional[Banner]:
        return next((item for item in self.banners if item.kind == kind), None)

    def metric(self, label: str) -> MetricCard:
        for card in (*self.metrics, *self.policy):
            if card.label == label:
                return card
        raise KeyError(label)


_PERSONA_STYLES: dict[str, tuple[str, str]] = {
    "interactive": ("🎮", "#2196F3"),
    "bulk": ("📦", "#FF9800"),
    UNKNOWN_PERSONA: ("❓", "#9E9E9E"),
}


def format_bps(bps: float) -> str:
    """Human readable throughput for a bits-per-second value."""
    if bps >= 1e6:
        return f"{bps / 1e6:.2f} Mbps"
    if bps >= 1e3:
        return f"{bps / 1e3:.1f} kbps"
    return f"{bps:.0f} bps"


def persona_badge(persona: Optional[str]) -> PersonaBadge:
    """Badge for a persona name; unrecognized names get the unknown badge."""
    name = (persona or "").strip().lower()
    if name not in _PERSONA_STYLES:
        name = UNKNOWN_PERSONA
    icon, color = _PERSONA_STYLES[name]
    return PersonaBadge(persona=name, label=name.upper(), icon=icon, color=color)


def _measured(value: Optional[float]) -> Optional[float]:
    # The agent reports 0 for probes that have not produced a sample yet.
    return value if value else None


def _fixed(value: Optional[float]) -> str:
    return PLACEHOLDER if value is None else f"{value:.1f}"


def _threshold_card(
    label: str,
    value: Optional[float],
    unit: str,
    limit: float,
    tone: Tone,
    color: str,
) -> MetricCard:
    measured = _measured(value)
    if measured is not None and measured > limit:
        return MetricCard(label, _fixed(measured), unit, tone, color)
    return MetricCard(label, _fixed(measured), unit, Tone.NORMAL, COLOR_NORMAL)


def _throughput_card(label: str, value: Optional[float], color: str) -> MetricCard:
    if value is None:
        return MetricCard(label, PLACEHOLDER, "", Tone.INFO, color)
    number, _, unit = format_bps(value).partition(" ")
    return MetricCard(label, number, unit, Tone.INFO, color)


def metric_cards(snapshot: StatusSnapshot) -> tuple[MetricCard, ...]:
    m = snapshot.metrics
    return (
        _threshold_card("RTT", m.rtt_ms, "ms", RTT_ALERT_MS, Tone.ALERT, COLOR_ALERT),
        _threshold_card("Jitter", m.jitter_ms, "ms", JITTER_WARNING_MS, Tone.WARNING, COLOR_WARNING),
        _throughput_card("TX", m.tx_bps, COLOR_TX),
        _throughput_card("RX", m.rx_bps, COLOR_RX),
        _threshold_card("CPU", m.cpu_pct, "%", CPU_ALERT_PCT, Tone.ALERT, COLOR_ALERT),
    )


def policy_cards(snapshot: StatusSnapshot) -> tuple[MetricCard, ...]:
    policy = snapshot.policy
    unit = "kbit (boosted)" if policy.boosted else "kbit"
    return (
        MetricCard("Bandwidth", str(policy.bandwidth_kbit or 0), unit, Tone.INFO, COLOR_BANDWIDTH),
        MetricCard(
            "Baseline RTT",
            _fixed(_measured(snapshot.baseline.rtt_ms)),
            "ms",
            Tone.INFO,
            COLOR_BASELINE,
        ),
    )


def banners(snapshot: StatusSnapshot) -> tuple[Banner, ...]:
    result: list[Banner] = []
    if snapshot.safe_mode:
        result.append(Banner("safe_mode", "⚠️ SAFE MODE ACTIVE", COLOR_ALERT))
    if snapshot.override_active:
        value = snapshot.persona_override.value if snapshot.persona_override else None
        result.append(Banner("override", f"🔒 Override: {value or UNKNOWN_PERSONA}", COLOR_WARNING))
    return tuple(result)


def render_status(snapshot: StatusSnapshot) -> StatusView:
    """Build the complete display tree for one snapshot."""
    return StatusView(
        banners=banners(snapshot),
        metrics=metric_cards(snapshot),
        persona=persona_badge(snapshot.persona),
        reason=snapshot.reason or PLACEHOLDER,
        policy=policy_cards(snapshot),
    )
