"""Textual host for the dashboard."""

from .app import DashboardApp, create_app, run_dashboard
from .theme import Theme, ThemeManager
from .widgets import AgentFooter, CommandButton, StatusPanel

__all__ = [
    "AgentFooter",
    "CommandButton",
    "DashboardApp",
    "StatusPanel",
    "Theme",
    "ThemeManager",
    "create_app",
    "run_dashboard",
]
