"""Typer application and CLI entry point for gcli.

This module wires together the top-level Typer application: the root
callback that resolves configuration from the global flags, the built-in
commands (``init``, ``authorize``, ``config``, ``list``, ``help``,
``whoami``, ``version``), and one sub-app per GitHub API group generated
from the command registry.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.  Unhandled exceptions are written to a crash log under
the data directory.

See Also:
    :mod:`gcli.config`: Configuration resolution.
    :mod:`gcli.command_tree`: Generation of the API command groups.
"""

from __future__ import annotations

import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from gcli import __version__
from gcli.command_tree import RootGroup, attach_api_commands, user_supplied
from gcli.commands.authorize import authorize_command
from gcli.commands.config import config_command
from gcli.commands.init import init_command
from gcli.commands.meta import PROGRAM_NAME, help_command, list_command, version_command, whoami_command
from gcli.config import DEFAULT_FILENAME, flags_to_config, load_config
from gcli.context import AppContext
from gcli.exceptions import GcliError
from gcli.exit_codes import EXIT_CANCELLED, EXIT_GENERIC_FAILURE
from gcli.output import OutputManager
from gcli.resources import build_registry

registry = build_registry()

app = typer.Typer(
    name="gcli",
    cls=RootGroup,
    help="Command line interface for the GitHub API v3.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"{PROGRAM_NAME} {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show program version.",
    ),
    filename: str = typer.Option(
        DEFAULT_FILENAME, "--filename", metavar="<filename>", help="Configuration file name."
    ),
    token: Optional[str] = typer.Option(
        None, "--token", metavar="<oauth token>", help="Authentication token."
    ),
    login: Optional[str] = typer.Option(None, "--login", help="Authentication login."),
    password: Optional[str] = typer.Option(None, "--password", help="Authentication password."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colorization in output."),
    no_pager: bool = typer.Option(False, "--no-pager", help="Disable pagination of the output."),
    pager: Optional[str] = typer.Option(
        None, "--pager", "-p", metavar="less|more|...", help="Command to be used for paging."
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress response output."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose output mode."),
    output_format: Optional[str] = typer.Option(
        None, "--format", metavar="table|json|csv|plain", help="Output format."
    ),
    auto_pagination: bool = typer.Option(
        False, "--auto-pagination", help="Fetch every page of paginated collections."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Resolves the configuration (defaults < config files < the flags given
    here), creates the :class:`~gcli.output.OutputManager`, and stores an
    :class:`~gcli.context.AppContext` on ``ctx.obj``.

    Only flags actually typed on the command line override the config
    files; click's parameter source tells them apart from defaults.  A test
    may pre-seed ``ctx.obj`` with ``{"client_factory": ...}`` to replace the
    HTTP client.
    """
    values: dict[str, Any] = {
        "token": token,
        "login": login,
        "password": password,
        "no_color": no_color,
        "no_pager": no_pager,
        "pager": pager,
        "quiet": quiet,
        "output_format": output_format,
        "auto_pagination": auto_pagination,
    }
    flags = {
        ("format" if name == "output_format" else name): value
        for name, value in values.items()
        if user_supplied(ctx, name)
    }

    boot = OutputManager(no_color=no_color, verbose=verbose)
    try:
        config = load_config(filename, flags_to_config(flags))
    except GcliError as exc:
        boot.error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    output = OutputManager(
        no_color=bool(config.fetch("core.no-color")),
        quiet=bool(config.fetch("core.quiet")),
        verbose=verbose,
    )
    for source in config.sources:
        output.debug(f"Loaded config from {source}")

    extra: dict[str, Any] = {}
    if isinstance(ctx.obj, dict) and ctx.obj.get("client_factory"):
        extra["client_factory"] = ctx.obj["client_factory"]
    ctx.obj = AppContext(
        config=config,
        output=output,
        registry=registry,
        filename=filename,
        **extra,
    )


app.command("init")(init_command)
app.command("authorize")(authorize_command)
app.command("config")(config_command)
app.command("list")(list_command)
app.command("help")(help_command)
app.command("whoami")(whoami_command)
app.command("version")(version_command)
attach_api_commands(app, registry)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from gcli.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``gcli`` console script.

    :class:`~gcli.exceptions.GcliError` instances that escape a command
    cause a clean exit with the error's ``exit_code``.  All other
    exceptions produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_CANCELLED)
    except Exception as exc:
        output = OutputManager()
        if isinstance(exc, GcliError):
            output.error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        output.error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
