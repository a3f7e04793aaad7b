"""Response rendering: turn API results into table, JSON, CSV or plain text.

The router wraps every remote result in one of three stream shapes:

* :class:`SingleRecord` -- one mapping (``repo get``, ``status create``).
* :class:`Collection` -- a finite list of records.
* :class:`PaginatedCollection` -- a :class:`~gcli.client.PaginatedCursor`
  whose pages are fetched on demand.

:class:`Renderer` consumes a stream exactly once.  Paginated streams are
either drained page after page (``--auto-pagination``) or shown one page at a
time with a hint that more is available.  Rendered text taller than the
terminal is piped through the configured pager.

Example::

    renderer = Renderer(output)
    renderer.render(Collection(records=[{"name": "gcli"}]), {"format": "csv"})
"""

from __future__ import annotations

import csv
import io
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, Optional, Sequence, Union

from rich.table import Table
from rich.text import Text

from gcli.exceptions import CancelledError, RenderFormatUnsupported
from gcli.output import terminal_height

if TYPE_CHECKING:
    from gcli.client.pagination import PaginatedCursor
    from gcli.output import OutputManager

MAX_COLUMN_SCAN = 50
"""Number of leading records inspected to determine collection columns."""

PAGINATION_HINT = "More results are available. Use --auto-pagination to fetch every page."


class OutputFormat(str, Enum):
    """Supported output formats."""

    TABLE = "table"
    JSON = "json"
    CSV = "csv"
    PLAIN = "plain"


def parse_format(name: Optional[str]) -> OutputFormat:
    """Return the :class:`OutputFormat` called *name* (``None`` means table).

    Raises:
        RenderFormatUnsupported: If *name* is not a known format.
    """
    if name is None or name == "":
        return OutputFormat.TABLE
    try:
        return OutputFormat(str(name).strip().lower())
    except ValueError:
        raise RenderFormatUnsupported(str(name)) from None


# --- Streams ---


@dataclass
class SingleRecord:
    """A single record.  An empty mapping stands for "no content"."""

    record: dict[str, Any] = field(default_factory=dict)
    format_opts: dict[str, Any] = field(default_factory=dict)


@dataclass
class Collection:
    """A finite, ordered list of records."""

    records: list[Any] = field(default_factory=list)
    format_opts: dict[str, Any] = field(default_factory=dict)


@dataclass
class PaginatedCollection:
    """A collection whose pages are fetched lazily through *cursor*."""

    cursor: PaginatedCursor
    format_opts: dict[str, Any] = field(default_factory=dict)


RenderStream = Union[SingleRecord, Collection, PaginatedCollection]


# --- Cell and column helpers ---


def compact_value(value: Any) -> str:
    """Collapse a field value into a single cell string.

    Nested objects show their most identifying key (``login``, ``name`` or
    ``id``), or compact JSON when none is present; lists are joined with
    commas.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Mapping):
        for key in ("login", "name", "id"):
            if value.get(key) not in (None, ""):
                return str(value[key])
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    if isinstance(value, (list, tuple)):
        return ",".join(compact_value(item) for item in value)
    return str(value)


def _as_record(item: Any) -> dict[str, Any]:
    if isinstance(item, Mapping):
        return dict(item)
    return {"value": item}


def collect_columns(records: Sequence[Any], limit: int = MAX_COLUMN_SCAN) -> list[str]:
    """Union of field names over the first *limit* records, in first-seen order."""
    columns: dict[str, None] = {}
    for item in records[:limit]:
        for key in _as_record(item):
            columns.setdefault(str(key), None)
    return list(columns)


def _rows(records: Sequence[Any], columns: Sequence[str]) -> list[list[str]]:
    rows = []
    for item in records:
        record = _as_record(item)
        rows.append([compact_value(record.get(col)) for col in columns])
    return rows


def _is_truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "y", "1", "on")
    return bool(value)


# --- Renderer ---


class Renderer:
    """Writes render streams to the terminal.

    Args:
        output: Terminal collaborator.
        height: Screen height used for the pager decision (defaults to the
            attached terminal's height).
    """

    def __init__(self, output: OutputManager, height: Optional[int] = None) -> None:
        self._output = output
        self._height = height

    def render(
        self,
        stream: RenderStream,
        format_opts: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Render *stream*.

        ``format_opts`` entries override the ones carried by the stream.

        Raises:
            CancelledError: Auto-pagination was interrupted (after the
                records fetched so far were rendered).
            RemoteCallError: A later page failed.  Any error from a later
                page is re-raised after the records fetched so far were
                rendered.
        """
        opts = dict(stream.format_opts)
        opts.update(format_opts or {})
        fmt = self._resolve_format(opts.get("format"))

        if isinstance(stream, SingleRecord):
            self._emit(self.format_record(stream.record, fmt, opts), opts)
        elif isinstance(stream, Collection):
            self._emit(self.format_records(stream.records, fmt, opts), opts)
        elif _is_truthy(opts.get("auto_pagination")):
            self._render_all_pages(stream.cursor, fmt, opts)
        else:
            records, token = stream.cursor.next()
            self._emit(self.format_records(records, fmt, opts), opts)
            if token is not None:
                self._output.info(PAGINATION_HINT)

    def _render_all_pages(
        self,
        cursor: PaginatedCursor,
        fmt: OutputFormat,
        opts: Mapping[str, Any],
    ) -> None:
        records: list[Any] = []
        try:
            while True:
                page, token = cursor.next()
                records.extend(page)
                if token is None:
                    break
        except KeyboardInterrupt:
            self._emit(self.format_records(records, fmt, opts), opts)
            raise CancelledError(
                f"Interrupted; showing the {len(records)} record(s) fetched so far."
            ) from None
        except Exception:
            self._emit(self.format_records(records, fmt, opts), opts)
            raise
        self._emit(self.format_records(records, fmt, opts), opts)

    def _resolve_format(self, name: Optional[str]) -> OutputFormat:
        try:
            return parse_format(name)
        except RenderFormatUnsupported as exc:
            self._output.warning(str(exc))
            return OutputFormat.TABLE

    # ------------------------------------------------------------------ #
    # Formatting
    # ------------------------------------------------------------------ #

    def format_record(
        self,
        record: Mapping[str, Any],
        fmt: OutputFormat,
        opts: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Format a single record as text."""
        if fmt == OutputFormat.JSON:
            return json.dumps(record, indent=2, ensure_ascii=False, default=str)
        if not record:
            return ""
        if fmt == OutputFormat.CSV:
            columns = [str(k) for k in record]
            return _csv_text(columns, _rows([record], columns))
        if fmt == OutputFormat.PLAIN:
            return "\n".join(f"{key}\t{compact_value(value)}" for key, value in record.items())

        table = Table(show_header=False, box=None, padding=(0, 2, 0, 0), pad_edge=False)
        table.add_column(style="bold")
        table.add_column(overflow="fold")
        for key, value in record.items():
            table.add_row(Text(str(key)), Text(compact_value(value)))
        return self._output.capture(table, no_color=_is_truthy((opts or {}).get("no-color")))

    def format_records(
        self,
        records: Sequence[Any],
        fmt: OutputFormat,
        opts: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Format a list of records as text."""
        if fmt == OutputFormat.JSON:
            return json.dumps(list(records), indent=2, ensure_ascii=False, default=str)
        if not records:
            return ""
        columns = collect_columns(records)
        rows = _rows(records, columns)
        if fmt == OutputFormat.CSV:
            return _csv_text(columns, rows)
        if fmt == OutputFormat.PLAIN:
            return "\n".join("\t".join(row) for row in [columns, *rows])

        table = Table(show_header=True, header_style="bold cyan")
        for col in columns:
            table.add_column(col, overflow="fold")
        for row in rows:
            table.add_row(*(Text(cell) for cell in row))
        return self._output.capture(table, no_color=_is_truthy((opts or {}).get("no-color")))

    # ------------------------------------------------------------------ #
    # Emission
    # ------------------------------------------------------------------ #

    def _emit(self, text: str, opts: Mapping[str, Any]) -> None:
        if _is_truthy(opts.get("quiet")):
            return
        if not text:
            self._output.info("No results.")
            return
        if self.should_page(text, opts):
            self._output.paged_output(text, opts.get("pager") or None)
        else:
            self._output.print_data(text)

    def should_page(self, text: str, opts: Mapping[str, Any]) -> bool:
        """Whether *text* goes through the pager rather than straight to stdout."""
        if _is_truthy(opts.get("no-pager")) or not self._output.is_tty:
            return False
        height = self._height if self._height is not None else terminal_height()
        return text.count("\n") + 1 > height


def _csv_text(columns: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(columns)
    writer.writerows(rows)
    return buf.getvalue().rstrip("\n")
