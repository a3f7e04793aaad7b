"""Route ``group verb`` invocations to remote API calls.

:class:`Router` ties the registry, the parameter builder and the remote
collaborator together::

    router = Router(registry, client, format_opts={"format": "json"})
    stream = router.dispatch("repo:list", ["octocat"], {"type": "owner"})
    Renderer(output).render(stream)

Every check that can fail locally (name resolution, positional arity, option
coercion) runs before the remote call, so an invalid invocation never
reaches GitHub.  Failures of the remote call itself propagate unchanged.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Optional, Protocol, Sequence

from gcli.client.pagination import PaginatedCursor
from gcli.models import CommandEntry, Endpoint
from gcli.params import build_params
from gcli.registry import CommandRegistry
from gcli.render import Collection, PaginatedCollection, RenderStream, SingleRecord

_NAME_SEPARATOR = re.compile(r"[:\s]+")


class RemoteAPI(Protocol):
    """The remote-API collaborator as seen by the router."""

    def invoke(
        self,
        endpoint: Endpoint,
        positionals: Sequence[Any],
        keywords: dict[str, Any],
    ) -> Any: ...


def split_command_name(raw: str) -> tuple[str, Optional[str]]:
    """Split ``"repo:list"`` or ``"repo list"`` into ``("repo", "list")``.

    Only the first separator counts; with none the verb is ``None``.
    """
    parts = _NAME_SEPARATOR.split(raw.strip(), maxsplit=1)
    group = parts[0]
    verb = parts[1] if len(parts) > 1 and parts[1] else None
    return group, verb


def wrap_result(result: Any, format_opts: Mapping[str, Any]) -> RenderStream:
    """Wrap a remote result in the matching render stream."""
    opts = dict(format_opts)
    if isinstance(result, PaginatedCursor):
        return PaginatedCollection(cursor=result, format_opts=opts)
    if isinstance(result, list):
        return Collection(records=result, format_opts=opts)
    if result is None:
        return SingleRecord(format_opts=opts)
    if isinstance(result, Mapping):
        return SingleRecord(record=dict(result), format_opts=opts)
    return SingleRecord(record={"result": result}, format_opts=opts)


class Router:
    """Resolves, validates and dispatches API commands.

    Args:
        registry: Frozen command registry.
        api: Remote collaborator with an ``invoke`` method.
        format_opts: Base presentation settings, usually taken from the
            resolved configuration.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        api: RemoteAPI,
        format_opts: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._registry = registry
        self._api = api
        self._format_opts = dict(format_opts or {})

    def lookup(self, raw_name: str) -> CommandEntry:
        """Resolve *raw_name* to its entry without calling anything.

        Raises:
            UnknownCommandError: No such group or verb.
            IncompleteCommandError: Only a group was given.
        """
        group, verb = split_command_name(raw_name)
        return self._registry.resolve(group, verb)

    def dispatch(
        self,
        raw_name: str,
        positional_args: Sequence[Any] = (),
        flag_map: Optional[Mapping[str, Any]] = None,
    ) -> RenderStream:
        """Run the command named *raw_name* and return its render stream.

        Raises:
            InvalidUsageError: For any local validation failure.
            RemoteCallError: When the remote call fails.
        """
        entry = self.lookup(raw_name)
        bag = build_params(entry, positional_args, flag_map, self._format_opts)
        result = self._api.invoke(entry.endpoint, bag.positionals, bag.keywords)
        return wrap_result(result, bag.format_opts)
