"""Config command -- get and set configuration options.

Implements ``gcli config``.  Names are dotted keys into the two sections of
the file (``core.format``, ``user.token``)::

    gcli config                       # list every option
    gcli config core.format           # print one value
    gcli config core.format json      # set a value
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from gcli.config import (
    ResolvedConfig,
    config_defaults,
    deep_merge,
    find_config_file,
    read_config,
    update_config_value,
)
from gcli.context import AppContext, get_app_context
from gcli.exceptions import ConfigError, ConfigFileMissingError


def _target_file(app_ctx: AppContext, local: bool) -> Path:
    """The config file the command reads and writes."""
    if local:
        path = Path.cwd() / app_ctx.filename
        if not path.is_file():
            raise ConfigFileMissingError(path)
        return path
    path = find_config_file(app_ctx.filename)
    if path is None:
        raise ConfigFileMissingError()
    return path


def config_command(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="Dotted option name, e.g. core.format."),
    value: Optional[str] = typer.Argument(None, help="New value for the option."),
    list_all: bool = typer.Option(False, "--list", "-l", help="List all options."),
    local: bool = typer.Option(
        False, "--local", help="Use the configuration file in the current directory."
    ),
) -> None:
    """Get and set GitHub configuration options.

    With only a name the current value is printed; with a name and a value
    the option is set in the file.  The read-modify-write cycle runs under
    an exclusive lock so concurrent invocations cannot interleave.

    Raises:
        typer.Exit: With code 1 if no configuration file exists or the key
            has no value.
    """
    app_ctx = get_app_context(ctx)
    output = app_ctx.output

    with app_ctx.guard():
        path = _target_file(app_ctx, local)

        if list_all or name is None:
            config = ResolvedConfig(deep_merge(config_defaults(), read_config(path)))
            output.debug(f"Listing {path}")
            rows = [[key, _display(val)] for key, val in config.flatten().items()]
            output.print_table([], rows)
            return

        if value is None:
            if name not in app_ctx.config:
                raise ConfigError(f"No value set for '{name}'")
            output.print_data(_display(app_ctx.config.fetch(name)))
            return

        written = update_config_value(path, name, value)
        output.print_data(_display(written))


def _display(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return "" if value is None else str(value)
