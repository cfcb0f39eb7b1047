"""Fixed-interval status polling.

``StatusPoller`` owns the polling timeline: one fetch at a time, ticks on a
fixed grid, failures reported and survived, results applied strictly in
send order.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from contextlib import suppress
from typing import Generic, Optional, TypeVar

from ..util.log import Log

log = Log.create({"service": "dashboard.poller"})

DEFAULT_INTERVAL = 2.0

T = TypeVar("T")


class StatusPoller(Generic[T]):
    """Periodically fetch a value and hand it to ``on_result``.

    ``clock`` and ``sleep`` are injectable so tests can drive the timeline
    without real timers.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[T]],
        on_result: Callable[[T], None],
        *,
        interval: float = DEFAULT_INTERVAL,
        on_error: Optional[Callable[[Exception], None]] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if interval <= 0:
            raise ValueError("poll interval must be positive")
        self._fetch = fetch
        self._on_result = on_result
        self._on_error = on_error
        self._interval = interval
        self._clock = clock
        self._sleep = sleep

        self._task: Optional[asyncio.Task[None]] = None
        self._inflight = False
        self._generation = 0
        self._next_seq = 0
        self._applied_seq = 0

        self.ticks = 0
        self.failures = 0
        self.skipped = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def busy(self) -> bool:
        return self._inflight

    def mark_applied(self) -> int:
        """Claim a sequence number for a result applied outside ``tick``.

        Used for the initial load so an older tick cannot overwrite it.
        """
        self._next_seq += 1
        self._applied_seq = self._next_seq
        return self._applied_seq

    async def tick(self) -> bool:
        """Run one fetch. Returns True when a result was applied."""
        if self._inflight:
            self.skipped += 1
            log.debug("tick skipped, fetch outstanding")
            return False

        self._inflight = True
        self._next_seq += 1
        seq = self._next_seq
        generation = self._generation
        self.ticks += 1
        try:
            result = await self._fetch()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self.failures += 1
            log.warning("status fetch failed", {"seq": seq, "error": exc})
            if self._on_error is not None and generation == self._generation:
                self._on_error(exc)
            return False
        finally:
            self._inflight = False

        if generation != self._generation:
            log.debug("discarding result fetched before stop", {"seq": seq})
            return False
        if seq <= self._applied_seq:
            log.debug("discarding stale result", {"seq": seq, "applied": self._applied_seq})
            return False

        self._applied_seq = seq
        self._on_result(result)
        return True

    async def _run(self) -> None:
        deadline = self._clock() + self._interval
        while True:
            delay = deadline - self._clock()
            if delay > 0:
                await self._sleep(delay)
            await self.tick()

            deadline += self._interval
            now = self._clock()
            if now >= deadline:
                missed = int((now - deadline) // self._interval) + 1
                self.skipped += missed
                deadline += missed * self._interval
                log.debug("fetch overran interval", {"missed": missed})

    def start(self) -> asyncio.Task[None]:
        """Start the loop on the running event loop; idempotent."""
        if self._task is not None and not self._task.done():
            return self._task
        self._task = asyncio.get_running_loop().create_task(self._run())
        log.info("polling started", {"interval": self._interval})
        return self._task

    async def stop(self) -> None:
        """Stop issuing ticks; a fetch still in flight is discarded."""
        self._generation += 1
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task
        log.info("polling stopped", {"ticks": self.ticks, "failures": self.failures})
