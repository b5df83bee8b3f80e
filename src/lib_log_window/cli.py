"""Rich-click command line interface.

Purpose
-------
Host the ``viewer`` command that every console window runs, plus the
operator helpers ``info``, ``demo`` and ``colors``.

Contents
--------
* :func:`cli` – root group with traceback and ``.env`` toggles.
* :func:`main` – entry point delegating to :func:`lib_cli_exit_tools.run_cli`.

System Role
-----------
Presentation layer only: argument parsing and echoing. Behaviour lives in
:mod:`lib_log_window.viewer`, :mod:`lib_log_window.demo` and the runtime.
"""

from __future__ import annotations

import os
from typing import Sequence

import lib_cli_exit_tools
import rich_click as click
from click.core import ParameterSource
from rich.console import Console

from . import __init__conf__
from . import config as config_module
from .demo import run_demo
from .domain import ConsoleColor
from .runtime import summary_info
from .viewer import run_viewer

CLICK_CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

_demo_runner = run_demo
_viewer_runner = run_viewer


@click.group(
    help=__init__conf__.title,
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=True,
)
@click.version_option(
    version=__init__conf__.version,
    prog_name=__init__conf__.shell_command,
    message=f"{__init__conf__.shell_command} version {__init__conf__.version}",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help=f"Load LOG_WINDOW_* settings from the nearest .env (env toggle: {config_module.DOTENV_ENV_VAR}).",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool) -> None:
    """Root command storing global flags for subcommands."""

    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback

    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not ParameterSource.DEFAULT:
        explicit = use_dotenv
    if config_module.should_use_dotenv(explicit=explicit, env_value=os.getenv(config_module.DOTENV_ENV_VAR)):
        config_module.enable_dotenv()

    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print the package metadata banner."""

    click.echo(summary_info(), nl=False)


@cli.command("viewer", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("pid", type=click.IntRange(min=1))
@click.argument("subject")
@click.option(
    "--connect-timeout",
    type=click.FloatRange(min=0.0, min_open=True),
    default=5.0,
    show_default=True,
    help="Seconds to wait for the producer channel.",
)
def cli_viewer(pid: int, subject: str, connect_timeout: float) -> None:
    """Render SUBJECT records produced by process PID (started by the library)."""

    code = _viewer_runner(pid, subject, connect_timeout=connect_timeout)
    if code:
        raise SystemExit(code)


@cli.command("demo", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--subject", "subjects", multiple=True, default=("net", "db"), show_default=True, help="Subject window to open (repeatable).")
@click.option("--count", type=click.IntRange(min=1), default=5, show_default=True, help="Lines posted to every subject.")
@click.option("--interval", type=click.FloatRange(min=0.0), default=0.5, show_default=True, help="Seconds between lines.")
@click.option("--terminal", default=None, help="Terminal command prefix, or 'none' for headless viewers.")
def cli_demo(subjects: tuple[str, ...], count: int, interval: float, terminal: str | None) -> None:
    """Open demo windows and post coloured sample lines."""

    summary = _demo_runner(subjects=subjects, count=count, interval=interval, terminal=terminal)
    if not summary["available"]:
        click.echo("Console windows are not available on this host (no terminal emulator found).")
        return
    for subject, forwarded in summary["forwarded"].items():
        click.echo(f"{subject}: forwarded {forwarded}/{count}")


@cli.command("colors", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_colors() -> None:
    """List the console palette with the ordinals used on the wire."""

    console = Console(highlight=False)
    for member in ConsoleColor:
        back = "white" if member is ConsoleColor.BLACK else "black"
        console.print(f"{member.value:>2}  {member.name}", style=f"{member.rich_name} on {back}")


def main(argv: Sequence[str] | None = None, *, restore_traceback: bool = True) -> int:
    """Run the CLI through :func:`lib_cli_exit_tools.run_cli`.

    Traceback preferences changed by ``--traceback`` are restored afterwards
    so embedding hosts keep their own configuration.
    """

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        return int(
            lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name=__init__conf__.shell_command,
            )
        )
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "main"]
