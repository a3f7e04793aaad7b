"""Terminal layer with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- primary data only (rendered API responses).  This is what
  downstream tools pipe and parse.
* **stderr** -- all diagnostics (status, warnings, errors, suggestions).
  Never contaminates the data stream.
* **TTY detection** -- Rich styling only when the stream is an interactive
  terminal.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` CLI flag / ``core.no-color`` setting.

One :class:`OutputManager` is created per invocation and carried on the
:class:`~gcli.context.AppContext`; the renderer and built-in commands receive
it explicitly.
"""

from __future__ import annotations

import os
import shlex
import shutil
import subprocess
import sys
from typing import Optional, Sequence

import typer
from rich.console import Console, RenderableType
from rich.markup import escape
from rich.table import Table
from rich.text import Text


class OutputManager:
    """Central manager for all CLI output.

    Maintains two Rich :class:`~rich.console.Console` instances -- one for
    stdout (data) and one for stderr (diagnostics) -- and routes every
    output call to the correct stream.

    Args:
        no_color: Disable all colour and Rich markup.
        quiet: Suppress informational messages and response output.
        verbose: Enable debug-level messages on stderr.
    """

    def __init__(
        self,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        self._stdout = Console(no_color=self._no_color)
        self._stderr = Console(no_color=self._no_color, stderr=True)

    @property
    def no_color(self) -> bool:
        """Whether colour output is disabled."""
        return self._no_color

    @property
    def is_quiet(self) -> bool:
        """Whether quiet mode is enabled."""
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        """Whether verbose mode is enabled."""
        return self._verbose

    @property
    def is_tty(self) -> bool:
        """Whether stdout is an interactive terminal."""
        return _is_tty()

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Print raw text to stdout.

        Args:
            text: The string to write.  A trailing newline is appended.
        """
        print(text, file=sys.stdout, flush=True)

    def print_table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
        title: Optional[str] = None,
        indent: int = 0,
    ) -> None:
        """Print a borderless table to stdout (used for help listings).

        Args:
            headers: Column header strings; pass an empty sequence to hide
                the header row.
            rows: Row data as lists of cell strings.
            title: Optional table title.
            indent: Left padding in spaces.
        """
        table = Table(
            title=title,
            show_header=bool(headers),
            header_style="bold cyan",
            box=None,
            padding=(0, 2, 0, 0),
            pad_edge=False,
        )
        width = max((len(r) for r in rows), default=len(headers))
        for idx in range(max(width, len(headers))):
            table.add_column(headers[idx] if idx < len(headers) else "")
        for row in rows:
            table.add_row(*(Text(cell) for cell in row))
        if indent:
            from rich.padding import Padding

            self._stdout.print(Padding(table, (0, 0, 0, indent)))
        else:
            self._stdout.print(table)

    def capture(self, renderable: RenderableType, no_color: bool = False) -> str:
        """Render *renderable* with the stdout console and return the text.

        Args:
            renderable: Any Rich renderable (tables, text, ...).
            no_color: Strip styling even when the console would emit it.
        """
        console = self._stdout
        if no_color and not self._no_color:
            console = Console(no_color=True, color_system=None, width=self._stdout.width)
        with console.capture() as captured:
            console.print(renderable)
        return captured.get().rstrip("\n")

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Print an informational message to stderr.  Suppressed by ``--quiet``."""
        if not self._quiet:
            if self._no_color:
                print(message, file=sys.stderr, flush=True)
            else:
                self._stderr.print(escape(message), highlight=False)

    def success(self, message: str) -> None:
        """Print a green confirmation to stderr.  Suppressed by ``--quiet``."""
        if not self._quiet:
            if self._no_color:
                print(message, file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[green]{escape(message)}[/green]", highlight=False)

    def warning(self, message: str) -> None:
        """Print a yellow warning to stderr.  NOT suppressed by ``--quiet``."""
        if self._no_color:
            print(f"Warning: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[yellow]Warning:[/yellow] {escape(message)}", highlight=False)

    def error(self, message: str) -> None:
        """Print a bold-red error to stderr.  Never suppressed."""
        if self._no_color:
            print(f"Error: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[bold red]Error:[/bold red] {escape(message)}", highlight=False)

    def suggest(self, message: str) -> None:
        """Print a dimmed next-step suggestion to stderr.  Suppressed by ``--quiet``."""
        if not self._quiet:
            formatted = f"→ {message}"
            if self._no_color:
                print(formatted, file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[dim]{escape(formatted)}[/dim]", highlight=False)

    def debug(self, message: str) -> None:
        """Print a debug message to stderr.  Only shown with ``--verbose``."""
        if self._verbose:
            if self._no_color:
                print(f"[debug] {message}", file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[dim]\\[debug] {escape(message)}[/dim]", highlight=False)

    # ------------------------------------------------------------------ #
    # Prompts
    # ------------------------------------------------------------------ #

    def prompt(self, label: str) -> str:
        """Ask for a line of input on the terminal."""
        return typer.prompt(label).strip()

    def mask_prompt(self, label: str) -> str:
        """Ask for a secret without echoing it."""
        return typer.prompt(label, hide_input=True).strip()

    def confirm(self, label: str) -> bool:
        """Ask a yes/no question."""
        return typer.confirm(label)

    # ------------------------------------------------------------------ #
    # Pager support
    # ------------------------------------------------------------------ #

    def paged_output(self, text: str, pager: Optional[str] = None) -> None:
        """Output text through a pager command.

        Uses *pager*, then ``$PAGER``, then ``less -FIRX``.  If the pager
        cannot be started the text is printed directly to stdout.
        """
        pager_cmd = pager or os.environ.get("PAGER") or "less -FIRX"
        try:
            proc = subprocess.Popen(
                shlex.split(pager_cmd),
                stdin=subprocess.PIPE,
                encoding="utf-8",
            )
            proc.communicate(input=text)
        except (OSError, ValueError, BrokenPipeError):
            print(text, file=sys.stdout, flush=True)


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    """Check if stdout is a TTY."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


def terminal_height() -> int:
    """Number of rows in the attached terminal (24 when unknown)."""
    return shutil.get_terminal_size(fallback=(80, 24)).lines
