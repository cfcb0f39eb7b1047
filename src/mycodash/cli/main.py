"""CLI entry point for the MycoFlow dashboard.

Running `mycodash` without arguments launches the TUI (Terminal User Interface).
"""

import json
from typing import Any, Dict, Optional

import typer
from rich.console import Console
from rich.markup import escape

from .. import __version__
from ..core.config import Config, ConfigError, ConfigManager
from ..core.global_paths import GlobalPath

app = typer.Typer(
    name="mycodash",
    help="MycoFlow dashboard - live status and controls for the QoS agent",
    no_args_is_help=False,  # TUI is the default when no args
    add_completion=False,
    invoke_without_command=True,  # Allow callback to run without subcommand
)

console = Console()


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        console.print(f"mycoflow-dash {__version__}")
        raise typer.Exit()


def _overrides(
    url: Optional[str],
    session: Optional[str],
    object_name: Optional[str],
    interval: Optional[float],
    step: Optional[int],
) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    if url is not None:
        result.setdefault("agent", {})["url"] = url
    if session is not None:
        result.setdefault("agent", {})["session"] = session
    if object_name is not None:
        result.setdefault("agent", {})["object"] = object_name
    if interval is not None:
        result["poll"] = {"interval": interval}
    if step is not None:
        result["controls"] = {"step_kbit": step}
    return result


def _config(ctx: typer.Context) -> Config:
    obj = ctx.obj or {}
    try:
        return ConfigManager.load(overrides=obj.get("overrides"))
    except ConfigError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(2)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    url: Optional[str] = typer.Option(
        None,
        "--url",
        "-u",
        help="rpcd ubus endpoint, e.g. http://192.168.1.1/ubus",
    ),
    session: Optional[str] = typer.Option(
        None,
        "--session",
        help="rpcd session token (defaults to the null session)",
    ),
    object_name: Optional[str] = typer.Option(
        None,
        "--object",
        help="ubus object name of the agent",
    ),
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        "-i",
        help="Seconds between status polls",
    ),
    step: Optional[int] = typer.Option(
        None,
        "--step",
        help="Bandwidth step in kbit for boost and throttle",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level (debug, info, warn, error)",
    ),
    print_logs: bool = typer.Option(
        False,
        "--print-logs",
        help="Also write logs to stderr (ignored by the TUI)",
    ),
):
    """MycoFlow dashboard.

    Running without a subcommand launches the interactive TUI.
    """
    GlobalPath.initialize()
    ctx.obj = {
        "overrides": _overrides(url, session, object_name, interval, step),
        "log_level": log_level,
        "print_logs": print_logs,
    }

    # If a subcommand was invoked, don't run TUI
    if ctx.invoked_subcommand is not None:
        return

    from .cmd.tui import tui_command

    tui_command(_config(ctx), log_level=log_level)


@app.command()
def tui(ctx: typer.Context):
    """Start the interactive dashboard.

    This is the default command when running `mycodash` without arguments.
    """
    from .cmd.tui import tui_command

    tui_command(_config(ctx), log_level=(ctx.obj or {}).get("log_level"))


@app.command()
def status(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print the raw status and override list as JSON",
    ),
):
    """Fetch the agent status once and print it."""
    from ..runtime import bootstrap_logging
    from .cmd.status import status_command

    config = _config(ctx)
    obj = ctx.obj or {}
    bootstrap_logging(
        mode="status",
        level=obj.get("log_level"),
        console=True if obj.get("print_logs") else None,
    )
    code = status_command(config, json_output=json_output, console=console)
    if code:
        raise typer.Exit(code)


@app.command()
def config(
    ctx: typer.Context,
    show: bool = typer.Option(
        False,
        "--show",
        help="Show current configuration",
    ),
    path: bool = typer.Option(
        False,
        "--path",
        help="Show configuration file path",
    ),
):
    """Inspect configuration."""
    if path:
        console.print(GlobalPath.config())
        return

    if show:
        cfg = _config(ctx)
        console.print_json(json.dumps(cfg.model_dump(), indent=2, default=str))
        sources = ConfigManager.sources()
        if sources:
            console.print(f"[dim]Sources: {', '.join(sources)}[/dim]")
        return

    console.print("Use --show to display configuration or --path to show config path")


if __name__ == "__main__":
    app()
