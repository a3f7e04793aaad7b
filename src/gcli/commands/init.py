"""Init command -- create a configuration file with the built-in defaults.

Implements ``gcli init``.  The file goes to the home directory unless
``--local`` asks for the current directory, and an existing file is only
replaced with ``--force``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from gcli.config import config_defaults, write_config
from gcli.context import get_app_context


def init_command(
    ctx: typer.Context,
    filename: Optional[str] = typer.Argument(
        None, help="Config file name (defaults to --filename)."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration file."
    ),
    local: bool = typer.Option(
        False,
        "--local",
        "-l",
        help="Create the file in the current directory instead of the home directory.",
    ),
) -> None:
    """Create a configuration file or overwrite an existing one.

    The new file holds every built-in default, so it doubles as a reference
    of the available settings.

    Raises:
        typer.Exit: With code 1 if the file exists and ``--force`` was not
            given.

    Example::

        gcli init
        gcli init --local --force
    """
    app_ctx = get_app_context(ctx)
    base = Path.cwd() if local else Path.home()
    path = base / (filename or app_ctx.filename)

    with app_ctx.guard():
        write_config(path, config_defaults(), force=force)

    app_ctx.output.success(f"Writing new configuration file to {path}")
