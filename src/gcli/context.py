"""Per-invocation application context.

The root Typer callback builds one :class:`AppContext` and stores it on
``ctx.obj``; every command pulls it from there instead of reaching for
module-level state.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional

import typer

from gcli.client import GitHubClient
from gcli.config import DEFAULT_FILENAME, ResolvedConfig
from gcli.exceptions import GcliError, UnknownCommandError
from gcli.exit_codes import EXIT_CANCELLED
from gcli.output import OutputManager
from gcli.registry import CommandRegistry

ClientFactory = Callable[["AppContext"], GitHubClient]


def default_client_factory(app_ctx: AppContext) -> GitHubClient:
    """Build a :class:`GitHubClient` from the resolved configuration."""
    return GitHubClient.from_config(app_ctx.config, output=app_ctx.output)


@dataclass
class AppContext:
    """Everything one invocation needs, built once and passed explicitly.

    Attributes:
        config: The resolved configuration.
        output: Terminal collaborator.
        registry: The frozen command registry.
        filename: Config file name in effect (``--filename``).
        client_factory: Creates the remote client; tests substitute a fake.
    """

    config: ResolvedConfig
    output: OutputManager
    registry: CommandRegistry
    filename: str = DEFAULT_FILENAME
    client_factory: ClientFactory = field(default=default_client_factory)

    def make_client(self) -> GitHubClient:
        return self.client_factory(self)

    def format_opts(self) -> dict[str, Any]:
        """Presentation settings from the resolved ``core`` section."""
        return {
            "format": self.config.fetch("core.format", "table"),
            "no-pager": self.config.fetch("core.no-pager", False),
            "no-color": self.config.fetch("core.no-color", False),
            "pager": self.config.fetch("core.pager"),
            "quiet": self.config.fetch("core.quiet", False),
            "auto_pagination": self.config.fetch("core.auto_pagination", False),
        }

    @contextmanager
    def guard(self) -> Iterator[None]:
        """Report :class:`~gcli.exceptions.GcliError` and exit with its code.

        Example::

            with app_ctx.guard():
                write_config(path, data, force=False)
        """
        try:
            yield
        except UnknownCommandError as exc:
            self.output.error(str(exc))
            if exc.suggestions:
                self.output.suggest("Did you mean one of these?")
                for name in exc.suggestions:
                    self.output.suggest(f"  {name}")
            raise typer.Exit(code=exc.exit_code) from None
        except GcliError as exc:
            self.output.error(str(exc))
            raise typer.Exit(code=exc.exit_code) from None
        except KeyboardInterrupt:
            self.output.error("Cancelled.")
            raise typer.Exit(code=EXIT_CANCELLED) from None


def get_app_context(ctx: Optional[typer.Context]) -> AppContext:
    """Return the :class:`AppContext` attached to *ctx* or one of its parents."""
    while ctx is not None:
        if isinstance(ctx.obj, AppContext):
            return ctx.obj
        ctx = ctx.parent
    raise RuntimeError("gcli application context is not initialised")
