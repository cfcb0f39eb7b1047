from __future__ import annotations

import pytest

from mycodash.api_client import RemoteCallError
from mycodash.dashboard import COMMANDS, CommandDispatcher
from tests.helpers import FakeAgent, Notifications


def test_command_table() -> None:
    assert [command.id for command in CommandDispatcher.commands()] == [
        "policy.boost",
        "policy.throttle",
        "persona.interactive",
        "persona.bulk",
        "persona.clear",
    ]
    assert len({command.keybind for command in COMMANDS}) == len(COMMANDS)
    assert CommandDispatcher.get_by_keybind("c").id == "persona.clear"
    assert CommandDispatcher.get("policy.boost").title == "⬆ Boost"
    assert CommandDispatcher.get("nope") is None


def test_dispatcher_rejects_non_positive_step() -> None:
    with pytest.raises(ValueError):
        CommandDispatcher(FakeAgent(), Notifications(), step_kbit=0)


@pytest.mark.anyio
async def test_boost_then_throttle_returns_to_original_bandwidth() -> None:
    agent = FakeAgent(bandwidth_kbit=20000)
    notes = Notifications()
    dispatcher = CommandDispatcher(agent, notes)

    await dispatcher.boost()
    assert agent.bandwidth_kbit == 21000
    await dispatcher.throttle()

    assert agent.bandwidth_kbit == 20000
    assert agent.calls == [("policy_boost", 1000), ("policy_throttle", 1000)]
    assert notes.items == [
        ("Bandwidth boosted +1000 kbit", "information"),
        ("Bandwidth throttled -1000 kbit", "information"),
    ]


@pytest.mark.anyio
async def test_persona_commands_call_agent_and_confirm_once() -> None:
    agent = FakeAgent()
    notes = Notifications()
    dispatcher = CommandDispatcher(agent, notes)

    await dispatcher.override_interactive()
    await dispatcher.override_bulk()
    assert agent.override == "bulk"
    await dispatcher.clear_override()

    assert agent.override is None
    assert agent.calls == [
        ("persona_add", "interactive"),
        ("persona_add", "bulk"),
        ("persona_delete", None),
    ]
    assert notes.messages == [
        "Persona override: interactive",
        "Persona override: bulk",
        "Persona override cleared",
    ]


@pytest.mark.anyio
async def test_dispatch_by_id_uses_configured_step() -> None:
    agent = FakeAgent(bandwidth_kbit=5000)
    notes = Notifications()
    dispatcher = CommandDispatcher(agent, notes, step_kbit=250)

    await dispatcher.dispatch("policy.throttle")

    assert agent.bandwidth_kbit == 4750
    assert notes.messages == ["Bandwidth throttled -250 kbit"]

    with pytest.raises(KeyError):
        await dispatcher.dispatch("policy.reset")


@pytest.mark.anyio
async def test_failed_command_propagates_without_confirmation() -> None:
    agent = FakeAgent()
    agent.fail_with = RemoteCallError("denied", method="policy_boost", code=6)
    notes = Notifications()
    dispatcher = CommandDispatcher(agent, notes)

    with pytest.raises(RemoteCallError):
        await dispatcher.boost()

    assert notes.items == []
    assert agent.bandwidth_kbit == 20000


@pytest.mark.anyio
async def test_commands_do_not_fetch_status() -> None:
    agent = FakeAgent()
    dispatcher = CommandDispatcher(agent, Notifications())

    for command in COMMANDS:
        await dispatcher.dispatch(command.id)

    assert "status" not in [name for name, _ in agent.calls]
