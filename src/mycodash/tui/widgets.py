"""TUI widgets for the dashboard.

The status panel draws a ``StatusView`` produced by the renderer; it never
looks at the raw snapshot.
"""

from typing import List, Optional

from rich.columns import Columns
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text
from textual.widgets import Button, Static

from ..dashboard import OperatorCommand, StatusRegion, StatusView
from ..dashboard.render import MetricCard, PLACEHOLDER
from .theme import ThemeManager


def _card(card: MetricCard, border: str) -> Panel:
    body = Text(justify="center")
    if card.value == PLACEHOLDER:
        body.append(PLACEHOLDER, style="bold")
    else:
        body.append(card.value, style=f"bold {card.color}")
        if card.unit:
            body.append(f" {card.unit}")
    return Panel(body, title=card.label, border_style=border, width=22)


class StatusPanel(Static):
    """Live status region: banners, metric cards, persona and policy."""

    DEFAULT_CSS = """
    StatusPanel {
        height: auto;
        padding: 0 1;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.status_view: Optional[StatusView] = None
        self.status_error: Optional[str] = None

    def apply_region(self, region: StatusRegion) -> None:
        """Copy the region's view and error and redraw."""
        self.status_view = region.view
        self.status_error = region.error
        self.refresh(layout=True)

    def render(self) -> RenderableType:
        theme = ThemeManager.get_theme()
        parts: List[RenderableType] = []

        view = self.status_view
        if view is None:
            parts.append(Text("Loading status...", style=theme.text_muted))
        else:
            for banner in view.banners:
                parts.append(Text(banner.text, style=f"bold {banner.color}"))

            parts.append(Columns([_card(card, theme.border) for card in view.metrics]))

            persona = Text()
            persona.append("Persona: ", style=theme.text_muted)
            persona.append(view.persona.text, style=f"bold {view.persona.color}")
            persona.append("   Reason: ", style=theme.text_muted)
            persona.append(view.reason, style=theme.text)
            parts.append(persona)

            parts.append(Columns([_card(card, theme.border) for card in view.policy]))

        if self.status_error:
            parts.append(Text(f"✗ {self.status_error}", style=f"bold {theme.error}"))

        return Group(*parts)


class CommandButton(Button):
    """Button bound to one operator command."""

    def __init__(self, command: OperatorCommand, **kwargs) -> None:
        super().__init__(command.title, variant=command.variant, **kwargs)
        self.operator_command = command


class AgentFooter(Static):
    """Footer line showing the agent endpoint and the poll interval."""

    DEFAULT_CSS = """
    AgentFooter {
        height: 1;
        dock: bottom;
        padding: 0 2;
    }
    """

    def __init__(self, endpoint: str = "", interval: float = 0.0, version: str = "", **kwargs) -> None:
        super().__init__(**kwargs)
        self.endpoint = endpoint
        self.interval = interval
        self.version = version

    def render(self) -> Text:
        theme = ThemeManager.get_theme()
        text = Text(no_wrap=True, overflow="ellipsis")
        text.append(self.endpoint, style=theme.text_muted)
        text.append(f"  every {self.interval:g}s", style=theme.text_muted)
        if self.version:
            text.append(f"  {self.version}", style=theme.text_muted)
        return text
