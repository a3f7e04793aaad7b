"""Usage banners and command listings."""

from __future__ import annotations

from typing import Optional

from gcli.models import CommandEntry, OptionKind, OptionSpec
from gcli.registry import CommandRegistry

GLOBAL_FLAGS: tuple[tuple[str, str], ...] = (
    ("--filename=<name>", "Configuration file name (default .gcliconfig)"),
    ("--token=<token>", "Authentication token"),
    ("--login=<login>", "Authentication login"),
    ("--password=<password>", "Authentication password"),
    ("--format=<table|json|csv|plain>", "Output format"),
    ("--auto-pagination", "Fetch every page of paginated collections"),
    ("--no-color", "Disable colourised output"),
    ("--no-pager", "Disable pagination of the output"),
    ("-p, --pager=<cmd>", "Command used to page long output"),
    ("-q, --quiet", "Suppress response output"),
    ("--verbose", "Show debug information"),
    ("-V, --version", "Show version and exit"),
)


def option_usage(spec: OptionSpec) -> str:
    """``[--state=<state>]`` style fragment for one option."""
    if spec.kind == OptionKind.BOOL:
        return f"[--{spec.name}]"
    banner = spec.banner or spec.name
    return f"[--{spec.name}=<{banner}>]"


def usage_banner(entry: CommandEntry, program: str = "gcli") -> str:
    """One-line synopsis of *entry*.

    Example::

        >>> usage_banner(status_create)
        'gcli status create <user> <repo> <sha> [--state=<state>] [--target=<target>] ...'
    """
    parts = [program, entry.group, entry.verb]
    for param in entry.positional_params:
        parts.append(f"<{param.name}>" if param.required else f"[<{param.name}>]")
    parts.extend(option_usage(spec) for spec in entry.option_params)
    return " ".join(parts)


def command_listing(
    registry: CommandRegistry,
    pattern: Optional[str] = "",
) -> list[tuple[str, str]]:
    """Visible commands whose ``group verb`` name matches *pattern*.

    Matching is a case-insensitive substring match (``:`` in the pattern is
    read as a space).  Results are sorted by name.
    """
    needle = (pattern or "").replace(":", " ").strip().lower()
    listing = [
        (entry.name, entry.description)
        for entry in registry
        if not entry.hidden and needle in entry.name.lower()
    ]
    return sorted(listing)


def global_flags() -> str:
    """Usage line of the options accepted before the command name."""
    flags = " ".join(f"[{flag.split(', ')[-1]}]" for flag, _ in GLOBAL_FLAGS)
    return f"gcli {flags} <group> <verb> [args...]"
