"""Operator commands.

The dashboard exposes a fixed set of commands. Each one makes a single
agent call and, on success, emits exactly one confirmation notification.
Failures propagate to the caller; commands never touch the display and
never trigger a refresh, the next poll tick picks the change up.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..util.log import Log

log = Log.create({"service": "dashboard.commands"})

DEFAULT_STEP_KBIT = 1000

Notify = Callable[..., None]


@dataclass(frozen=True)
class OperatorCommand:
    """Command definition.

    Attributes:
        id: Unique command identifier
        title: Button label
        keybind: Keyboard shortcut
        variant: Button style hint for host adapters
    """
    id: str
    title: str
    keybind: str
    variant: str = "default"


BOOST = OperatorCommand("policy.boost", "⬆ Boost", "b", "success")
THROTTLE = OperatorCommand("policy.throttle", "⬇ Throttle", "t", "error")
OVERRIDE_INTERACTIVE = OperatorCommand("persona.interactive", "🎮 Interactive", "i", "primary")
OVERRIDE_BULK = OperatorCommand("persona.bulk", "📦 Bulk", "u", "primary")
CLEAR_OVERRIDE = OperatorCommand("persona.clear", "🔄 Clear Override", "c", "warning")

COMMANDS: tuple[OperatorCommand, ...] = (
    BOOST,
    THROTTLE,
    OVERRIDE_INTERACTIVE,
    OVERRIDE_BULK,
    CLEAR_OVERRIDE,
)


class CommandDispatcher:
    """Translate operator commands into agent calls."""

    def __init__(
        self,
        agent: Any,
        notify: Notify,
        *,
        step_kbit: int = DEFAULT_STEP_KBIT,
    ) -> None:
        if step_kbit <= 0:
            raise ValueError("bandwidth step must be positive")
        self._agent = agent
        self._notify = notify
        self._step_kbit = step_kbit
        self._handlers: Dict[str, Callable[[], Awaitable[None]]] = {
            BOOST.id: self.boost,
            THROTTLE.id: self.throttle,
            OVERRIDE_INTERACTIVE.id: self.override_interactive,
            OVERRIDE_BULK.id: self.override_bulk,
            CLEAR_OVERRIDE.id: self.clear_override,
        }

    @property
    def step_kbit(self) -> int:
        return self._step_kbit

    @staticmethod
    def commands() -> List[OperatorCommand]:
        return list(COMMANDS)

    @staticmethod
    def get(command_id: str) -> Optional[OperatorCommand]:
        return next((command for command in COMMANDS if command.id == command_id), None)

    @staticmethod
    def get_by_keybind(keybind: str) -> Optional[OperatorCommand]:
        return next((command for command in COMMANDS if command.keybind == keybind), None)

    async def _run(
        self,
        command: OperatorCommand,
        call: Callable[[], Awaitable[Any]],
        confirmation: str,
    ) -> None:
        try:
            await call()
        except Exception as exc:
            log.error("command failed", {"command": command.id, "error": exc})
            raise
        log.info("command applied", {"command": command.id})
        self._notify(confirmation, severity="information")

    async def boost(self) -> None:
        step = self._step_kbit
        await self._run(
            BOOST,
            lambda: self._agent.policy_boost(step),
            f"Bandwidth boosted +{step} kbit",
        )

    async def throttle(self) -> None:
        step = self._step_kbit
        await self._run(
            THROTTLE,
            lambda: self._agent.policy_throttle(step),
            f"Bandwidth throttled -{step} kbit",
        )

    async def override_interactive(self) -> None:
        await self._run(
            OVERRIDE_INTERACTIVE,
            lambda: self._agent.persona_add("interactive"),
            "Persona override: interactive",
        )

    async def override_bulk(self) -> None:
        await self._run(
            OVERRIDE_BULK,
            lambda: self._agent.persona_add("bulk"),
            "Persona override: bulk",
        )

    async def clear_override(self) -> None:
        await self._run(
            CLEAR_OVERRIDE,
            self._agent.persona_delete,
            "Persona override cleared",
        )

    async def dispatch(self, command_id: str) -> None:
        """Run a command by id; unknown ids raise KeyError."""
        handler = self._handlers.get(command_id)
        if handler is None:
            raise KeyError(f"unknown command: {command_id}")
        await handler()
