"""Shorthand constructors for declaring API commands.

Resource modules describe their commands as data::

    command("ref", "get", "Get a reference",
            "GET", "/repos/{user}/{repo}/git/refs/{ref}",
            args=("user", "repo", "ref"))

Positional specs are strings: ``"id:int"`` declares an integer and
``"[sha]"`` an optional argument (optional arguments can only fill query
keys, never path placeholders).
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Union

from gcli.models import (
    CommandEntry,
    Endpoint,
    HTTPMethod,
    Inclusion,
    OptionKind,
    OptionSpec,
    ParamSpec,
)

PAGE_OPTIONS: tuple[OptionSpec, ...] = (
    OptionSpec(name="page", kind=OptionKind.INT, banner="n",
               description="Page number to fetch."),
    OptionSpec(name="per_page", kind=OptionKind.INT, banner="n",
               description="Number of records per page (max 100)."),
)


def arg(spec: str, description: str = "") -> ParamSpec:
    """Parse a positional declaration such as ``"id:int"`` or ``"[sha]"``."""
    required = not spec.startswith("[")
    name, _, kind = spec.strip("[]").partition(":")
    return ParamSpec(
        name=name,
        required=required,
        kind=OptionKind(kind or "string"),
        description=description,
    )


def opt(
    name: str,
    kind: str = "string",
    description: str = "",
    *,
    aliases: Iterable[str] = (),
    default: Any = None,
    banner: str = "",
    api_name: Optional[str] = None,
    always: bool = False,
) -> OptionSpec:
    """Declare an option.  ``always=True`` sends the default when unset."""
    return OptionSpec(
        name=name,
        kind=OptionKind(kind),
        aliases=tuple(aliases),
        default=default,
        banner=banner,
        description=description,
        api_name=api_name,
        inclusion=Inclusion.ALWAYS if always else Inclusion.OMIT,
    )


def command(
    group: str,
    verb: str,
    description: str,
    method: str,
    path: str,
    args: Iterable[Union[str, ParamSpec]] = (),
    options: Iterable[OptionSpec] = (),
    query: Iterable[str] = (),
    paginated: bool = False,
    items_key: Optional[str] = None,
    accept: Optional[str] = None,
    hidden: bool = False,
) -> CommandEntry:
    """Build a :class:`~gcli.models.CommandEntry`.

    Paginated commands automatically accept ``--page`` and ``--per-page``.
    """
    option_params = tuple(options)
    if paginated:
        option_params += PAGE_OPTIONS
    return CommandEntry(
        group=group,
        verb=verb,
        description=description,
        positional_params=tuple(arg(a) if isinstance(a, str) else a for a in args),
        option_params=option_params,
        endpoint=Endpoint(
            method=HTTPMethod(method.lower()),
            path=path,
            query_keys=tuple(query),
            paginated=paginated,
            items_key=items_key,
            accept=accept,
        ),
        hidden=hidden,
    )
