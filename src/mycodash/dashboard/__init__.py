"""Status synchronization and command dispatch for the dashboard."""

from .commands import COMMANDS, CommandDispatcher, OperatorCommand
from .poller import StatusPoller
from .render import (
    PLACEHOLDER,
    Banner,
    MetricCard,
    PersonaBadge,
    StatusView,
    Tone,
    format_bps,
    persona_badge,
    render_status,
)
from .session import DashboardSession, StatusRegion

__all__ = [
    "COMMANDS",
    "PLACEHOLDER",
    "Banner",
    "CommandDispatcher",
    "DashboardSession",
    "MetricCard",
    "OperatorCommand",
    "PersonaBadge",
    "StatusPoller",
    "StatusRegion",
    "StatusView",
    "Tone",
    "format_bps",
    "persona_badge",
    "render_status",
]
