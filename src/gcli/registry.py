"""Static command registry with alias and case-insensitive lookup.

Every API command is declared as a :class:`~gcli.models.CommandEntry` and
registered once at start-up (see :func:`gcli.resources.build_registry`).
After :meth:`CommandRegistry.freeze` the registry is read-only.

Name resolution for both groups and verbs follows the same order:

1. case-insensitive exact match,
2. the alias table (``repository`` -> ``repo``, ``ls`` -> ``list``, ...).

A prefix such as ``rep`` never runs a command; it only ranks suggestions.

When nothing matches, :class:`~gcli.exceptions.UnknownCommandError` is raised
carrying up to :data:`MAX_SUGGESTIONS` similar names.
"""

from __future__ import annotations

import difflib
from collections import OrderedDict
from typing import Iterable, Iterator, Mapping, Optional

from gcli.exceptions import IncompleteCommandError, UnknownCommandError
from gcli.models import CommandEntry

MAX_SUGGESTIONS = 5

GROUP_ALIASES: dict[str, str] = {
    "repository": "repo",
    "reference": "ref",
    "is": "issue",
}

VERB_ALIASES: dict[str, str] = {
    "ls": "list",
    "all": "list",
    "show": "get",
    "new": "create",
    "rm": "delete",
    "remove": "delete",
}


def suggest(name: str, candidates: Iterable[str], limit: int = MAX_SUGGESTIONS) -> list[str]:
    """Rank *candidates* by similarity to *name*.

    Prefix matches come first (shortest first), followed by the closest
    :func:`difflib.get_close_matches` results.
    """
    lowered = name.lower()
    pool = sorted(set(candidates))
    ranked = sorted(
        (c for c in pool if c.lower().startswith(lowered) or lowered.startswith(c.lower())),
        key=lambda c: (len(c), c),
    )
    for match in difflib.get_close_matches(lowered, pool, n=limit, cutoff=0.5):
        if match not in ranked:
            ranked.append(match)
    return ranked[:limit]


def lookup_name(
    name: str,
    names: Iterable[str],
    aliases: Mapping[str, str],
) -> Optional[str]:
    """Resolve *name* against *names* case-insensitively, then through *aliases*.

    Prefixes never resolve; they only feed :func:`suggest`.
    """
    lowered = name.lower()
    by_lower = {n.lower(): n for n in names}
    if lowered in by_lower:
        return by_lower[lowered]
    aliased = aliases.get(lowered)
    if aliased is not None and aliased.lower() in by_lower:
        return by_lower[aliased.lower()]
    return None


class CommandRegistry:
    """Mapping of ``(group, verb)`` to :class:`~gcli.models.CommandEntry`.

    Args:
        group_aliases: Alternative group names (lower-case).
        verb_aliases: Alternative verb names (lower-case), shared by all
            groups.

    Example::

        registry = CommandRegistry()
        registry.register(entry)
        registry.freeze()
        registry.resolve("Repository", "ls")   # -> the "repo list" entry
    """

    def __init__(
        self,
        group_aliases: Optional[Mapping[str, str]] = None,
        verb_aliases: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._groups: OrderedDict[str, OrderedDict[str, CommandEntry]] = OrderedDict()
        self._descriptions: dict[str, str] = {}
        self._group_aliases = dict(GROUP_ALIASES if group_aliases is None else group_aliases)
        self._verb_aliases = dict(VERB_ALIASES if verb_aliases is None else verb_aliases)
        self._frozen = False

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def describe_group(self, group: str, description: str) -> None:
        """Attach a help line to *group*."""
        self._check_mutable()
        self._descriptions[group] = description

    def register(self, entry: CommandEntry) -> CommandEntry:
        """Add *entry*.

        Raises:
            ValueError: If the registry is frozen or ``(group, verb)`` is
                already taken.
        """
        self._check_mutable()
        verbs = self._groups.setdefault(entry.group, OrderedDict())
        if entry.verb in verbs:
            raise ValueError(f"Command '{entry.name}' is already registered")
        verbs[entry.verb] = entry
        return entry

    def freeze(self) -> CommandRegistry:
        """Make the registry read-only and return it."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self) -> None:
        if self._frozen:
            raise ValueError("Command registry is frozen")

    # ------------------------------------------------------------------ #
    # Lookup
    # ------------------------------------------------------------------ #

    @property
    def groups(self) -> list[str]:
        """Registered group names in registration order."""
        return list(self._groups)

    def group_description(self, group: str) -> str:
        return self._descriptions.get(group, f"Leverage {group.capitalize()} API")

    def verbs(self, group: str) -> list[str]:
        """Verbs registered under *group* (canonical name required)."""
        return list(self._groups.get(group, {}))

    def __iter__(self) -> Iterator[CommandEntry]:
        for verbs in self._groups.values():
            yield from verbs.values()

    def __len__(self) -> int:
        return sum(len(v) for v in self._groups.values())

    def resolve_group(self, name: str) -> str:
        """Return the canonical group name for *name*.

        Raises:
            UnknownCommandError: If no group matches.
        """
        group = lookup_name(name, self._groups, self._group_aliases)
        if group is None:
            raise UnknownCommandError(name, suggest(name, self._all_names()))
        return group

    def resolve_verb(self, group: str, name: str) -> str:
        """Return the canonical verb of *group* for *name*.

        Raises:
            UnknownCommandError: If *group* has no such verb.
        """
        verbs = self._groups.get(group, {})
        verb = lookup_name(name, verbs, self._verb_aliases)
        if verb is None:
            suggestions = [f"{group} {v}" for v in suggest(name, verbs)]
            raise UnknownCommandError(f"{group} {name}", suggestions)
        return verb

    def resolve(self, group: str, verb: Optional[str]) -> CommandEntry:
        """Resolve a two-level name to its entry.

        Raises:
            UnknownCommandError: If the group or verb is unknown.
            IncompleteCommandError: If *verb* is ``None``.
        """
        canonical_group = self.resolve_group(group)
        if verb is None:
            raise IncompleteCommandError(canonical_group)
        canonical_verb = self.resolve_verb(canonical_group, verb)
        return self._groups[canonical_group][canonical_verb]

    def get(self, group: str, verb: str) -> Optional[CommandEntry]:
        """Exact, case-sensitive lookup without alias resolution."""
        return self._groups.get(group, {}).get(verb)

    def _all_names(self) -> list[str]:
        return list(self._groups) + [entry.name for entry in self]
