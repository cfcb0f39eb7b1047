"""Status command - print one snapshot of the agent's state."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, Optional

import httpx
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from ...api_client import AgentClientError, MycoAgentClient
from ...core.config import Config
from ...dashboard import DashboardSession, render_status
from ...dashboard.render import StatusView
from ...model import PersonaOverrideList, StatusSnapshot
from ...util.error import describe_error
from ...util.log import Log

log = Log.create({"service": "cli.status"})


async def fetch_status(
    config: Config,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> tuple[StatusSnapshot, PersonaOverrideList]:
    """Run the dashboard's initial load once against the configured agent."""
    agent = MycoAgentClient(
        url=config.agent.url,
        session=config.agent.session,
        object_name=config.agent.object,
        timeout=config.agent.timeout,
        verify=config.agent.verify_tls,
        transport=transport,
    )
    try:
        return await DashboardSession(agent).load()
    finally:
        await agent.aclose()


def status_payload(status: StatusSnapshot, overrides: PersonaOverrideList) -> Dict[str, Any]:
    return {
        "status": status.model_dump(mode="json"),
        "persona_list": overrides.model_dump(mode="json"),
    }


def status_table(view: StatusView) -> Table:
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="dim")
    table.add_column()
    for card in (*view.metrics, *view.policy):
        table.add_row(card.label, Text(card.display, style=card.color))
    table.add_row("Persona", Text(view.persona.text, style=f"bold {view.persona.color}"))
    table.add_row("Reason", view.reason)
    return table


def status_command(
    config: Config,
    *,
    json_output: bool = False,
    console: Optional[Console] = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Print the agent status; returns the process exit code."""
    out = console or Console()
    try:
        status, overrides = asyncio.run(fetch_status(config, transport=transport))
    except (AgentClientError, ValueError) as exc:
        log.error("status fetch failed", {"error": exc})
        out.print(f"[red]Error:[/red] {escape(describe_error(exc))}")
        return 1

    if json_output:
        out.print_json(json.dumps(status_payload(status, overrides)))
        return 0

    view = render_status(status)
    for banner in view.banners:
        out.print(Text(banner.text, style=f"bold {banner.color}"))
    out.print(status_table(view))
    return 0
