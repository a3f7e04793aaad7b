"""Authorize command -- obtain an OAuth token and save the credentials.

Implements ``gcli authorize``.  The login and password are read from
prompts, ``auth create`` is called with basic auth through the regular
router, and the login, password and returned token are stored in the
configuration file (home directory, or the current one with ``--local``).
"""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Optional

import typer

from gcli.config import ResolvedConfig, config_defaults, config_lock, deep_merge, read_config, write_config
from gcli.context import get_app_context
from gcli.exceptions import ConfigFileExistsError, ServerError
from gcli.render import SingleRecord
from gcli.router import Router

DEFAULT_SCOPES = "public_repo,repo"
DEFAULT_NOTE = "gcli"
DEFAULT_NOTE_URL = "https://github.com/peter-murach/github_cli"


def authorize_command(
    ctx: typer.Context,
    scopes: Optional[str] = typer.Option(
        None,
        "--scopes",
        metavar="user,public_repo,repo",
        help="Comma separated scopes that this authorization is in.",
    ),
    note: Optional[str] = typer.Option(
        None, "--note", help="A note to remind you what the OAuth token is for."
    ),
    note_url: Optional[str] = typer.Option(
        None, "--note-url", help="A URL to remind you what the OAuth token is for."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Update an existing file without asking."
    ),
    local: bool = typer.Option(
        False,
        "--local",
        "-l",
        help="Save to the file in the current directory instead of the home directory.",
    ),
) -> None:
    """Add user authentication token.

    An existing configuration file keeps its other settings; only the
    ``user.login``, ``user.password`` and ``user.token`` keys change.
    Without ``--force`` the user is asked before such a file is touched.

    Raises:
        typer.Exit: With code 1 if the update was declined, or with the
            exit code of the failed ``auth create`` call.
    """
    app_ctx = get_app_context(ctx)
    output = app_ctx.output
    base = Path.cwd() if local else Path.home()
    path = base / app_ctx.filename

    with app_ctx.guard():
        if path.is_file() and not force and not output.confirm(
            f"Update the credentials in {path}?"
        ):
            raise ConfigFileExistsError(path)

        login = output.prompt("login")
        password = output.mask_prompt("password")

        # Token auth would take precedence over the prompted credentials.
        credentials = ResolvedConfig(app_ctx.config.as_dict())
        credentials.set("user.login", login)
        credentials.set("user.password", password)
        credentials.set("user.token", "")
        basic_ctx = dataclasses.replace(app_ctx, config=credentials)

        with basic_ctx.make_client() as client:
            router = Router(app_ctx.registry, client, app_ctx.format_opts())
            stream = router.dispatch(
                "auth:create",
                [],
                {
                    "scopes": scopes or DEFAULT_SCOPES,
                    "note": note or DEFAULT_NOTE,
                    "note_url": note_url or DEFAULT_NOTE_URL,
                },
            )
        token = stream.record.get("token") if isinstance(stream, SingleRecord) else None
        if not token:
            raise ServerError("The authorization response carried no token")

        with config_lock(path):
            current = read_config(path) if path.is_file() else config_defaults()
            user = {"login": login, "password": password, "token": token}
            write_config(path, deep_merge(current, {"user": user}), force=True)

    output.success(f"Saved credentials for {login} to {path}")
