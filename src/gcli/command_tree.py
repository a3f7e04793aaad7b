"""Build the Typer command tree from the command registry.

Every registered :class:`~gcli.models.CommandEntry` becomes a leaf command
under a sub-app named after its group::

    gcli <group> <verb> [args...] [--flag value ...]

**Algorithm summary**

1. Create one :class:`typer.Typer` sub-app per registry group, using
   :class:`ResourceGroup` so verbs resolve through aliases.
2. For each entry, generate a command function whose signature declares a
   :func:`typer.Argument` per positional parameter and a :func:`typer.Option`
   per option, plus the per-command presentation flags (``--format``,
   ``--auto-pagination``, ``--no-pager``, ``--no-color``).
3. At run time the function keeps only the flags the user actually typed
   (checked via click's parameter source), then hands positionals and flags
   to :class:`~gcli.router.Router` and renders the stream.

Values are passed through as strings: type checking happens in
:func:`~gcli.params.build_params`, never in click, so every command reports
bad input the same way.
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Mapping, Optional, Sequence

import click
import typer
from typer.core import TyperGroup

from gcli.context import AppContext, get_app_context
from gcli.exceptions import UnknownCommandError
from gcli.models import CommandEntry, OptionKind, OptionSpec
from gcli.registry import GROUP_ALIASES, VERB_ALIASES, CommandRegistry, lookup_name, suggest
from gcli.render import Renderer
from gcli.router import Router

# Compared by name: Typer may run on its own copy of click, whose enum is a
# different class from the standalone package.
_USER_SOURCES = frozenset({"COMMANDLINE", "ENVIRONMENT"})

# (identifier, format_opts key, declaration, help)
_FORMAT_FLAGS: tuple[tuple[str, str, tuple[str, ...], str], ...] = (
    ("fmt_format", "format", ("--format",), "Output format: table, json, csv or plain."),
    ("fmt_auto_pagination", "auto_pagination", ("--auto-pagination",),
     "Fetch every page of a paginated collection."),
    ("fmt_no_pager", "no-pager", ("--no-pager",), "Disable pagination of the output."),
    ("fmt_no_color", "no-color", ("--no-color",), "Disable colorization in output."),
)


# ---------------------------------------------------------------------------
# Alias-aware groups
# ---------------------------------------------------------------------------


class AliasedGroup(TyperGroup):
    """A :class:`TyperGroup` that resolves names case-insensitively.

    Lookup order is exact name, case-insensitive name, then :attr:`aliases`.
    An unknown name fails with the suggestions of
    :class:`~gcli.exceptions.UnknownCommandError`.
    """

    aliases: Mapping[str, str] = {}

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        cmd = super().get_command(ctx, cmd_name)
        if cmd is not None:
            return cmd
        name = lookup_name(cmd_name, self.list_commands(ctx), self.aliases)
        return super().get_command(ctx, name) if name else None

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[Optional[str], Optional[click.Command], list[str]]:
        cmd_name = args[0]
        if cmd_name.startswith("-"):
            return super().resolve_command(ctx, args)
        cmd = self.get_command(ctx, cmd_name)
        if cmd is None:
            if ctx.resilient_parsing:
                return None, None, args
            ctx.fail(format_unknown(self.unknown(ctx, cmd_name)))
        return cmd.name, cmd, args[1:]

    def unknown(self, ctx: click.Context, cmd_name: str) -> UnknownCommandError:
        visible = [
            name for name in self.list_commands(ctx)
            if not getattr(self.commands.get(name), "hidden", False)
        ]
        return UnknownCommandError(cmd_name, suggest(cmd_name, visible))


class RootGroup(AliasedGroup):
    """Top-level group.  Also accepts ``group:verb`` as a single token."""

    aliases = {**GROUP_ALIASES, "ls": "list"}

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[Optional[str], Optional[click.Command], list[str]]:
        return super().resolve_command(ctx, split_command_args(args))


class ResourceGroup(AliasedGroup):
    """Group of verbs for one API resource (``gcli repo ...``)."""

    aliases = VERB_ALIASES

    def unknown(self, ctx: click.Context, cmd_name: str) -> UnknownCommandError:
        exc = super().unknown(ctx, cmd_name)
        return UnknownCommandError(
            f"{self.name} {cmd_name}", [f"{self.name} {s}" for s in exc.suggestions]
        )


def split_command_args(args: Sequence[str]) -> list[str]:
    """Turn ``["repo:list", ...]`` into ``["repo", "list", ...]``."""
    args = list(args)
    if args and not args[0].startswith("-") and ":" in args[0]:
        group, _, verb = args[0].partition(":")
        return [group, verb, *args[1:]] if verb else [group, *args[1:]]
    return args


def format_unknown(exc: UnknownCommandError) -> str:
    """Render an unknown-command error with its suggestions."""
    lines = [str(exc)]
    if exc.suggestions:
        lines.append("Did you mean one of these?")
        lines.extend(f"    {name}" for name in exc.suggestions)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def attach_api_commands(app: typer.Typer, registry: CommandRegistry) -> typer.Typer:
    """Add one sub-app per registry group to *app* and return *app*.

    Example::

        app = typer.Typer(cls=RootGroup)
        attach_api_commands(app, build_registry())
    """
    for group in registry.groups:
        sub = typer.Typer(
            name=group,
            cls=ResourceGroup,
            help=registry.group_description(group),
            no_args_is_help=True,
        )
        for verb in registry.verbs(group):
            entry = registry.get(group, verb)
            assert entry is not None
            sub.command(
                name=verb,
                help=entry.description,
                hidden=entry.hidden,
            )(_build_command_function(entry))
        app.add_typer(sub, name=group)
    return app


def run_command(
    app_ctx: AppContext,
    entry: CommandEntry,
    positionals: Sequence[Any],
    flag_map: Mapping[str, Any],
) -> None:
    """Dispatch *entry* through the router and render its result."""
    output = app_ctx.output
    with app_ctx.guard():
        with app_ctx.make_client() as client:
            router = Router(app_ctx.registry, client, app_ctx.format_opts())
            output.debug(
                f"{entry.name}: {entry.endpoint.method.value.upper()} {entry.endpoint.path}"
            )
            stream = router.dispatch(entry.name, positionals, flag_map)
            Renderer(output).render(stream)


# ---------------------------------------------------------------------------
# Dynamic command function builder
# ---------------------------------------------------------------------------


def sanitize_param_name(name: str) -> str:
    """Convert an option name into a CLI flag (``per_page`` -> ``--per-page``)."""
    return "--" + name.replace("_", "-")


def _option_decls(spec: OptionSpec) -> tuple[str, ...]:
    flag = sanitize_param_name(spec.name)
    if spec.kind == OptionKind.BOOL:
        flag = f"{flag}/--no-{flag[2:]}"
    aliases = tuple(f"-{a}" if len(a) == 1 else sanitize_param_name(a) for a in spec.aliases)
    return (flag, *aliases)


def _option_help(spec: OptionSpec) -> str:
    text = spec.description
    if spec.default is not None:
        text = f"{text} (default: {spec.default})".strip()
    return text


def _build_command_function(entry: CommandEntry) -> Callable[..., None]:
    """Generate a Typer-compatible function for *entry*.

    The function takes ``**values``; its visible signature is set through
    ``__signature__`` so that Typer sees one parameter per argument and
    option.  Identifiers are positional (``arg_0``, ``opt_0``) because API
    names are free to clash with each other or with Python keywords.
    """
    arguments = [(f"arg_{i}", spec) for i, spec in enumerate(entry.positional_params)]
    options = [(f"opt_{i}", spec) for i, spec in enumerate(entry.option_params)]
    taken = {spec.name.replace("-", "_") for _, spec in options}
    format_flags = [flag for flag in _FORMAT_FLAGS if flag[1].replace("-", "_") not in taken]

    parameters = [
        inspect.Parameter(
            "ctx", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=typer.Context
        )
    ]
    for ident, spec in arguments:
        parameters.append(inspect.Parameter(
            ident,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            annotation=Optional[str],
            default=typer.Argument(
                None,
                metavar=spec.name.upper() if spec.required else f"[{spec.name.upper()}]",
                help=spec.description or None,
                show_default=False,
            ),
        ))
    for ident, spec in options:
        is_bool = spec.kind == OptionKind.BOOL
        parameters.append(inspect.Parameter(
            ident,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            annotation=Optional[bool] if is_bool else Optional[str],
            default=typer.Option(
                None,
                *_option_decls(spec),
                help=_option_help(spec),
                metavar=None if is_bool else (spec.banner or spec.kind.value).upper(),
                show_default=False,
            ),
        ))
    for ident, key, decls, help_text in format_flags:
        is_bool = key != "format"
        parameters.append(inspect.Parameter(
            ident,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            annotation=Optional[bool] if is_bool else Optional[str],
            default=typer.Option(
                None, *decls, help=help_text, show_default=False,
                rich_help_panel="Output",
            ),
        ))

    def _command(ctx: typer.Context, **values: Any) -> None:
        positionals: list[Any] = []
        for ident, _ in arguments:
            value = values.get(ident)
            if value is None:
                break
            positionals.append(value)

        flag_map: dict[str, Any] = {
            spec.name: values[ident] for ident, spec in options if user_supplied(ctx, ident)
        }
        for ident, key, _, _ in format_flags:
            if user_supplied(ctx, ident):
                flag_map[key] = True if values[ident] is None else values[ident]

        run_command(get_app_context(ctx), entry, positionals, flag_map)

    _command.__signature__ = inspect.Signature(parameters)  # type: ignore[attr-defined]
    _command.__name__ = f"_cmd_{entry.group}_{entry.verb}"
    _command.__doc__ = entry.description
    return _command


def user_supplied(ctx: click.Context, name: str) -> bool:
    """Whether the parameter *name* was given by the user rather than defaulted."""
    source = ctx.get_parameter_source(name)
    return source is not None and source.name in _USER_SOURCES
