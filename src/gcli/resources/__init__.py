"""Declarative command definitions for every GitHub API group.

Each module lists its commands as :class:`~gcli.models.CommandEntry` data
(``COMMANDS``) plus a help line per group (``GROUPS``).
:func:`build_registry` loads them all into one frozen
:class:`~gcli.registry.CommandRegistry`.
"""

from __future__ import annotations

from types import ModuleType
from typing import Iterable, Optional

from gcli.registry import CommandRegistry
from gcli.resources import activity, gists, git, issues, orgs, repos, users

RESOURCE_MODULES: tuple[ModuleType, ...] = (
    repos,
    git,
    issues,
    orgs,
    users,
    activity,
    gists,
)


def build_registry(modules: Optional[Iterable[ModuleType]] = None) -> CommandRegistry:
    """Register the commands of *modules* (all resources by default) and freeze."""
    registry = CommandRegistry()
    for module in RESOURCE_MODULES if modules is None else modules:
        for group, description in module.GROUPS.items():
            registry.describe_group(group, description)
        for entry in module.COMMANDS:
            registry.register(entry)
    return registry.freeze()
