"""Informational commands: ``list``, ``help``, ``whoami`` and ``version``."""

from __future__ import annotations

from typing import Optional

import typer

from gcli import __version__
from gcli.context import get_app_context
from gcli.models import CommandEntry, OptionKind
from gcli.output import OutputManager
from gcli.usage import GLOBAL_FLAGS, command_listing, global_flags, usage_banner

PROGRAM_NAME = "GitHub API v3 CLI client"


def list_command(
    ctx: typer.Context,
    pattern: Optional[str] = typer.Argument(
        None, help="Only show commands whose name contains this text."
    ),
) -> None:
    """List all available commands limited by pattern."""
    app_ctx = get_app_context(ctx)
    rows = [[f"gcli {name}", desc] for name, desc in command_listing(app_ctx.registry, pattern)]
    if not rows:
        app_ctx.output.warning(f"No commands match '{pattern}'")
        return
    app_ctx.output.print_table([], rows)


def help_command(
    ctx: typer.Context,
    group: Optional[str] = typer.Argument(None, help="Command group."),
    verb: Optional[str] = typer.Argument(None, help="Command within the group."),
) -> None:
    """Describe the available commands or a specific command."""
    app_ctx = get_app_context(ctx)
    output = app_ctx.output
    registry = app_ctx.registry

    with app_ctx.guard():
        if group is None:
            output.print_data(f"Usage: {global_flags()}\n")
            output.print_table(
                ["Commands", ""],
                [[g, registry.group_description(g)] for g in sorted(registry.groups)],
                indent=2,
            )
            output.print_data("")
            output.print_table(["Options", ""], [list(flag) for flag in GLOBAL_FLAGS], indent=2)
            return

        canonical = registry.resolve_group(group)
        if verb is None:
            output.print_data(f"{registry.group_description(canonical)}\n")
            rows = []
            for name in registry.verbs(canonical):
                entry = registry.get(canonical, name)
                if entry is not None and not entry.hidden:
                    rows.append([usage_banner(entry), entry.description])
            output.print_table(["Commands", ""], rows, indent=2)
            return

        _describe(app_ctx.output, registry.resolve(canonical, verb))


def _describe(output: OutputManager, entry: CommandEntry) -> None:
    output.print_data(f"Usage: {usage_banner(entry)}\n")
    output.print_data(f"{entry.description}\n")
    if entry.positional_params:
        output.print_table(
            ["Arguments", ""],
            [
                [f"<{p.name}>", p.description or ("optional" if not p.required else "")]
                for p in entry.positional_params
            ],
            indent=2,
        )
    if entry.option_params:
        rows = []
        for spec in entry.option_params:
            names = ", ".join(
                f"-{a}" if len(a) == 1 else f"--{a}" for a in (*spec.aliases, spec.name)
            )
            if spec.kind != OptionKind.BOOL:
                names = f"{names}=<{spec.banner or spec.name}>"
            rows.append([names, spec.description])
        output.print_table(["Options", ""], rows, indent=2)


def whoami_command(ctx: typer.Context) -> None:
    """Print the username config to standard out."""
    app_ctx = get_app_context(ctx)
    login = app_ctx.config.fetch("user.login")
    app_ctx.output.print_data(
        login or "Not authed. Run 'gcli authorize'"
    )


def version_command() -> None:
    """Display Github CLI version."""
    typer.echo(f"{PROGRAM_NAME} {__version__}")
