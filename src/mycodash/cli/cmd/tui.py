"""TUI command - start the interactive dashboard."""

from __future__ import annotations

from collections.abc import Callable
from typing import Optional

from ...core.config import Config
from ...runtime import bootstrap_logging
from ...tui.app import run_dashboard
from ...util.log import Log

log = Log.create({"service": "cli.tui"})


def tui_command(
    config: Config,
    *,
    log_level: Optional[str] = None,
    run: Callable[[Config], None] | None = None,
) -> None:
    """Start the dashboard TUI.

    Args:
        config: Resolved configuration
        log_level: Log level override from the command line
        run: Runner used instead of ``run_dashboard`` (tests)
    """
    bootstrap_logging(mode="tui", level=log_level)
    log.info(
        "starting TUI",
        {
            "url": config.agent.url,
            "object": config.agent.object,
            "interval": config.poll.interval,
        },
    )

    call = run or run_dashboard
    try:
        call(config)
    finally:
        log.info("TUI exited")
        Log.close()
