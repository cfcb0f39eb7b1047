"""Dashboard session: initial load, display region and polling lifecycle."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Any, List, Optional

from ..model import PersonaOverrideList, StatusSnapshot
from ..util.error import describe_error
from ..util.log import Log
from .poller import DEFAULT_INTERVAL, StatusPoller
from .render import StatusView, render_status

log = Log.create({"service": "dashboard.session"})

ViewListener = Callable[["StatusRegion"], None]


class StatusRegion:
    """The display region: the last rendered view plus the last poll error.

    Only the renderer output is ever written here, and every write replaces
    the whole view.
    """

    def __init__(self) -> None:
        self._view: Optional[StatusView] = None
        self._error: Optional[str] = None
        self._listeners: List[ViewListener] = []

    @property
    def view(self) -> Optional[StatusView]:
        return self._view

    @property
    def error(self) -> Optional[str]:
        return self._error

    def show(self, snapshot: StatusSnapshot) -> StatusView:
        self._view = render_status(snapshot)
        self._error = None
        self._notify()
        return self._view

    def fail(self, message: str) -> None:
        """Record an error; the previous view stays on screen."""
        self._error = message
        self._notify()

    def on_change(self, listener: ViewListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as exc:
                log.error("region listener error", {"error": str(exc)})


class DashboardSession:
    """Owns the poller and the display region for one active view."""

    def __init__(
        self,
        agent: Any,
        *,
        interval: float = DEFAULT_INTERVAL,
        region: Optional[StatusRegion] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._agent = agent
        self.region = region or StatusRegion()
        self.overrides: Optional[PersonaOverrideList] = None
        self.poller: StatusPoller[StatusSnapshot] = StatusPoller(
            agent.status,
            self.region.show,
            interval=interval,
            on_error=self._on_poll_error,
            clock=clock,
            sleep=sleep,
        )

    def _on_poll_error(self, exc: Exception) -> None:
        self.region.fail(describe_error(exc))

    async def load(self) -> tuple[StatusSnapshot, PersonaOverrideList]:
        """Fetch status and the override list together; both must succeed."""
        with log.time("initial load"):
            status, overrides = await asyncio.gather(
                self._agent.status(),
                self._agent.persona_list(),
            )
        return status, overrides

    async def activate(self) -> StatusView:
        """Initial load, first render, then start polling.

        If the initial load fails nothing is rendered and the error is
        raised; polling is not started.
        """
        status, overrides = await self.load()
        self.overrides = overrides
        self.poller.mark_applied()
        view = self.region.show(status)
        self.poller.start()
        log.info(
            "dashboard activated",
            {"persona": status.persona, "override_listed": overrides.has_override},
        )
        return view

    def start_polling(self) -> None:
        """Start polling without a successful initial load."""
        self.poller.start()

    async def refresh(self) -> bool:
        """Run one out-of-band tick (skipped if a fetch is in flight)."""
        return await self.poller.tick()

    async def deactivate(self) -> None:
        await self.poller.stop()
