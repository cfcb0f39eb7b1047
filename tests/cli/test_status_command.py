from __future__ import annotations

import httpx
import pytest
from typer.testing import CliRunner

from mycodash.cli.cmd import status as status_module
from mycodash.cli.main import app
from tests.helpers import status_wire, ubus_handler

runner = CliRunner()


def _route_client(monkeypatch: pytest.MonkeyPatch, handler) -> None:  # type: ignore[no-untyped-def]
    real = status_module.MycoAgentClient

    def factory(**kwargs):  # type: ignore[no-untyped-def]
        return real(**{**kwargs, "transport": httpx.MockTransport(handler)})

    monkeypatch.setattr(status_module, "MycoAgentClient", factory)


def test_status_json_prints_status_and_override_list(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict] = []
    _route_client(
        monkeypatch,
        ubus_handler(
            {
                "status": status_wire(persona="bulk"),
                "persona_list": {"current": "bulk", "override_active": 0, "override": ""},
            },
            calls,
        ),
    )

    result = runner.invoke(app, ["--url", "http://router.test/ubus", "--object", "mycoflow", "status", "--json"])

    assert result.exit_code == 0, result.output
    assert '"persona": "bulk"' in result.output
    assert '"override_active": false' in result.output
    assert {call["params"][1] for call in calls} == {"mycoflow"}


def test_status_table_lists_rendered_metrics(monkeypatch: pytest.MonkeyPatch) -> None:
    _route_client(
        monkeypatch,
        ubus_handler({"status": status_wire(safe_mode=1), "persona_list": {}}),
    )

    result = runner.invoke(app, ["status"])

    assert result.exit_code == 0, result.output
    assert "SAFE MODE ACTIVE" in result.output
    assert "1.50 Mbps" in result.output
    assert "INTERACTIVE" in result.output


def test_status_reports_unreachable_agent(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    _route_client(monkeypatch, handler)

    result = runner.invoke(app, ["status"])

    assert result.exit_code == 1
    assert "Agent unreachable" in result.output
