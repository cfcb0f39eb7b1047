"""Main TUI application.

Hosts the status panel and the operator controls. The dashboard session
owns polling; this module only wires it to Textual widgets and surfaces
command results as notifications.
"""

from typing import Any, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Header

from .. import __version__
from ..api_client import MycoAgentClient
from ..core.config import Config, ConfigManager
from ..dashboard import COMMANDS, CommandDispatcher, DashboardSession
from ..dashboard.commands import DEFAULT_STEP_KBIT
from ..dashboard.poller import DEFAULT_INTERVAL
from ..util.error import describe_error
from ..util.log import Log
from .theme import ThemeManager
from .widgets import AgentFooter, CommandButton, StatusPanel

log = Log.create({"service": "tui.app"})

_TEXTUAL_THEMES = {"dark": "textual-dark", "light": "textual-light"}


class DashboardApp(App):
    """Terminal dashboard for one MycoFlow agent."""

    TITLE = "MycoFlow"
    SUB_TITLE = "Bio-Inspired QoS"

    CSS = """
    #status {
        height: 1fr;
    }
    #controls {
        height: auto;
        padding: 1 1 0 1;
    }
    #controls Button {
        margin: 0 1 0 0;
    }
    """

    BINDINGS = [
        *(
            Binding(command.keybind, f"run_command('{command.id}')", command.title)
            for command in COMMANDS
        ),
        Binding("r", "refresh", "Refresh"),
        Binding("ctrl+t", "toggle_theme", "Theme", show=False),
        Binding("q", "quit", "Quit"),
        Binding("ctrl+c", "quit", "Quit", show=False),
    ]

    def __init__(
        self,
        agent: Any,
        *,
        interval: float = DEFAULT_INTERVAL,
        step_kbit: int = DEFAULT_STEP_KBIT,
        endpoint: str = "",
        owns_agent: bool = False,
        session: Optional[DashboardSession] = None,
    ) -> None:
        super().__init__()
        self.agent = agent
        self.owns_agent = owns_agent
        self.endpoint = endpoint
        self.interval = interval
        self.session = session or DashboardSession(agent, interval=interval)
        self.dispatcher = CommandDispatcher(
            agent,
            lambda message, **kwargs: self.notify(message, **kwargs),
            step_kbit=step_kbit,
        )
        self._unsubscribe = None

    def _apply_theme(self) -> None:
        self.theme = _TEXTUAL_THEMES[ThemeManager.get_mode()]

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical():
            yield StatusPanel(id="status")
            with Horizontal(id="controls"):
                for command in COMMANDS:
                    yield CommandButton(command, id=f"command-{command.id.replace('.', '-')}")
        yield AgentFooter(endpoint=self.endpoint, interval=self.interval, version=__version__)

    @property
    def status_panel(self) -> StatusPanel:
        return self.query_one(StatusPanel)

    def on_mount(self) -> None:
        self._apply_theme()
        panel = self.status_panel
        self._unsubscribe = self.session.region.on_change(panel.apply_region)
        self.run_worker(self._activate(), group="session", exclusive=True)

    async def _activate(self) -> None:
        try:
            await self.session.activate()
        except Exception as exc:
            message = describe_error(exc)
            log.error("initial load failed", {"error": exc})
            self.notify(message, title="Status unavailable", severity="error")
            self.session.region.fail(message)
            self.session.start_polling()

    async def on_unmount(self) -> None:
        """Stop polling and release the agent before the app exits."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        await self.session.deactivate()
        if self.owns_agent:
            await self.agent.aclose()

    async def _run_command(self, command_id: str) -> None:
        try:
            await self.dispatcher.dispatch(command_id)
        except Exception as exc:
            self.notify(describe_error(exc), severity="error")

    def action_run_command(self, command_id: str) -> None:
        self.run_worker(self._run_command(command_id), group="commands")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if isinstance(event.button, CommandButton):
            event.stop()
            self.action_run_command(event.button.operator_command.id)

    def action_refresh(self) -> None:
        self.run_worker(self.session.refresh(), group="session")

    def action_toggle_theme(self) -> None:
        """Toggle between dark and light theme."""
        new_mode = ThemeManager.toggle_mode()
        self._apply_theme()
        self.status_panel.refresh()
        self.notify(f"Switched to {new_mode} mode")


def create_app(config: Optional[Config] = None) -> DashboardApp:
    """Build the app and its agent client from configuration."""
    cfg = config or ConfigManager.get()
    agent = MycoAgentClient(
        url=cfg.agent.url,
        session=cfg.agent.session,
        object_name=cfg.agent.object,
        timeout=cfg.agent.timeout,
        verify=cfg.agent.verify_tls,
    )
    if cfg.tui and cfg.tui.theme:
        ThemeManager.set_mode(cfg.tui.theme, persist=False)
    else:
        ThemeManager.load_preference()
    return DashboardApp(
        agent,
        interval=cfg.poll.interval,
        step_kbit=cfg.controls.step_kbit,
        endpoint=f"{agent.url} ({agent.object_name})",
        owns_agent=True,
    )


def run_dashboard(config: Optional[Config] = None) -> None:
    """Run the TUI application."""
    app = create_app(config)
    app.run()
