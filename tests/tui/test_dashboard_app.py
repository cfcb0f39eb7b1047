from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from mycodash.api_client import RemoteCallError, TransportFailure
from mycodash.core.global_paths import GlobalPath
from mycodash.dashboard import DashboardSession
from mycodash.tui.app import DashboardApp
from mycodash.tui.theme import ThemeManager
from tests.helpers import FakeAgent, Notifications


async def _parked_sleep(delay: float) -> None:
    await asyncio.Event().wait()


def _app(agent: FakeAgent, **kwargs) -> tuple[DashboardApp, Notifications]:
    app = DashboardApp(agent, session=DashboardSession(agent, sleep=_parked_sleep), **kwargs)
    notes = Notifications()
    app.notify = notes  # type: ignore[method-assign]
    return app, notes


async def _wait(pilot, predicate) -> None:  # type: ignore[no-untyped-def]
    for _ in range(200):
        if predicate():
            return
        await pilot.pause(0.01)
    raise AssertionError("condition not reached")


@pytest.mark.anyio
async def test_app_shows_initial_status_and_runs_key_commands() -> None:
    agent = FakeAgent(bandwidth_kbit=20000)
    app, notes = _app(agent)

    async with app.run_test(size=(160, 50)) as pilot:
        await _wait(pilot, lambda: app.status_panel.status_view is not None)
        assert app.session.poller.running is True
        assert app.status_panel.status_view.metric("Bandwidth").display == "20000 kbit"

        await pilot.press("b")
        await _wait(pilot, lambda: notes.items)
        await pilot.press("t")
        await _wait(pilot, lambda: len(notes.items) == 2)

        assert agent.bandwidth_kbit == 20000
        assert notes.messages == ["Bandwidth boosted +1000 kbit", "Bandwidth throttled -1000 kbit"]

        await pilot.press("r")
        await _wait(pilot, lambda: [name for name, _ in agent.calls].count("status") >= 2)

    assert app.session.poller.running is False
    assert agent.closed is False


@pytest.mark.anyio
async def test_app_buttons_dispatch_persona_commands() -> None:
    agent = FakeAgent()
    app, notes = _app(agent)

    async with app.run_test(size=(160, 50)) as pilot:
        await _wait(pilot, lambda: app.status_panel.status_view is not None)

        await pilot.click("#command-persona-bulk")
        await _wait(pilot, lambda: agent.override == "bulk")
        await pilot.click("#command-persona-clear")
        await _wait(pilot, lambda: agent.override is None)

    assert notes.messages == ["Persona override: bulk", "Persona override cleared"]


@pytest.mark.anyio
async def test_app_reports_failed_command_as_error() -> None:
    agent = FakeAgent()
    app, notes = _app(agent)

    async with app.run_test(size=(160, 50)) as pilot:
        await _wait(pilot, lambda: app.status_panel.status_view is not None)
        agent.fail_with = RemoteCallError("denied", method="policy_boost", code=6)

        await pilot.press("b")
        await _wait(pilot, lambda: notes.items)

    assert notes.items == [("Agent rejected policy_boost: permission denied", "error")]


@pytest.mark.anyio
async def test_app_initial_load_failure_shows_error_and_keeps_polling() -> None:
    agent = FakeAgent()
    agent.fail_with = TransportFailure("no route to host")
    app, notes = _app(agent)

    async with app.run_test(size=(160, 50)) as pilot:
        await _wait(pilot, lambda: app.status_panel.status_error is not None)

        assert app.status_panel.status_view is None
        assert app.status_panel.status_error == "Agent unreachable: no route to host"
        assert notes.items == [("Agent unreachable: no route to host", "error")]
        assert app.session.poller.running is True


@pytest.mark.anyio
async def test_app_toggles_theme_and_persists_choice() -> None:
    agent = FakeAgent()
    app, _ = _app(agent)

    async with app.run_test(size=(160, 50)) as pilot:
        await pilot.press("ctrl+t")
        await pilot.pause()
        assert ThemeManager.get_mode() == "light"
        assert app.theme == "textual-light"

    assert (Path(GlobalPath.state()) / "theme.json").read_text(encoding="utf-8") == '{"mode": "light"}'


@pytest.mark.anyio
async def test_app_closes_owned_agent_on_exit() -> None:
    agent = FakeAgent()
    app, _ = _app(agent, owns_agent=True)

    async with app.run_test(size=(160, 50)) as pilot:
        await _wait(pilot, lambda: app.status_panel.status_view is not None)

    assert agent.closed is True
