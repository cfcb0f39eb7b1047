"""Shared test helpers."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Callable, Optional

import httpx

from mycodash.model import PersonaOverrideList, StatusSnapshot


def status_wire(**overrides: Any) -> dict[str, Any]:
    """A complete ``status`` reply as the agent sends it."""
    data: dict[str, Any] = {
        "safe_mode": 0,
        "persona_override": 0,
        "persona_override_value": "",
        "persona": "interactive",
        "reason": "gaming traffic detected",
        "metrics": {
            "rtt_ms": 12.5,
            "jitter_ms": 2.0,
            "tx_bps": 1_500_000,
            "rx_bps": 2_500.0,
            "cpu_pct": 15.0,
        },
        "baseline": {"rtt_ms": 10.0, "jitter_ms": 1.0},
        "policy": {"bandwidth_kbit": 20000, "boosted": False},
    }
    data.update(overrides)
    return data


def ubus_handler(
    replies: dict[str, Any],
    calls: Optional[list[dict[str, Any]]] = None,
) -> Callable[[httpx.Request], httpx.Response]:
    """MockTransport handler answering rpcd ``call`` requests by method name.

    A reply that is an ``int`` is returned as a bare ubus status code.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if calls is not None:
            calls.append(body)
        method = body["params"][2]
        if method not in replies:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": [3]})
        reply = replies[method]
        if isinstance(reply, int):
            result: list[Any] = [reply]
        else:
            result = [0, reply]
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

    return handler


class FakeAgent:
    """In-memory agent with the same async surface as ``MycoAgentClient``."""

    def __init__(self, bandwidth_kbit: int = 20000, persona: str = "interactive") -> None:
        self.bandwidth_kbit = bandwidth_kbit
        self.persona = persona
        self.override: Optional[str] = None
        self.safe_mode = False
        self.calls: list[tuple[str, Any]] = []
        self.fail_with: Optional[Exception] = None
        self.status_gate: Optional[asyncio.Event] = None
        self.closed = False

    def _record(self, method: str, arg: Any = None) -> None:
        self.calls.append((method, arg))
        if self.fail_with is not None:
            raise self.fail_with

    def wire(self) -> dict[str, Any]:
        return status_wire(
            safe_mode=int(self.safe_mode),
            persona_override=int(self.override is not None),
            persona_override_value=self.override or "",
            persona=self.override or self.persona,
            policy={"bandwidth_kbit": self.bandwidth_kbit, "boosted": False},
        )

    async def status(self) -> StatusSnapshot:
        self._record("status")
        if self.status_gate is not None:
            await self.status_gate.wait()
        return StatusSnapshot.from_wire(self.wire())

    async def persona_list(self) -> PersonaOverrideList:
        self._record("persona_list")
        return PersonaOverrideList.from_wire(
            {
                "current": self.override or self.persona,
                "override_active": self.override is not None,
                "override": self.override,
            }
        )

    async def policy_boost(self, step_kbit: int) -> None:
        self._record("policy_boost", step_kbit)
        self.bandwidth_kbit += step_kbit

    async def policy_throttle(self, step_kbit: int) -> None:
        self._record("policy_throttle", step_kbit)
        self.bandwidth_kbit -= step_kbit

    async def persona_add(self, persona: str) -> None:
        self._record("persona_add", persona)
        self.override = persona

    async def persona_delete(self) -> None:
        self._record("persona_delete")
        self.override = None

    async def aclose(self) -> None:
        self.closed = True


class Notifications:
    """Recorder usable as a ``notify`` callback."""

    def __init__(self) -> None:
        self.items: list[tuple[str, str]] = []

    def __call__(self, message: str, *, severity: str = "information", **_: Any) -> None:
        self.items.append((message, severity))

    @property
    def messages(self) -> list[str]:
        return [message for message, _ in self.items]
