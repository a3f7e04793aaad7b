"""Tests for gcli.render -- formats, pagination modes, partial output and paging.

Covers:
- parse_format and the table fallback for unknown formats
- Single records and collections in table / json / csv / plain
- Column union across heterogeneous records
- Manual pagination: first page only, hint only when more pages exist
- Auto pagination: pages fetched strictly in order, one fetch per page
- Partial output on interrupt and on a failing later page
- Quiet mode, empty results and the pager decision
"""

from __future__ import annotations

import csv
import io
import json
from typing import Any, Optional
from unittest.mock import MagicMock

import httpx
import pytest

from gcli.exceptions import CancelledError, RenderFormatUnsupported, ServerError
from gcli.output import OutputManager
from gcli.render import (
    PAGINATION_HINT,
    Collection,
    OutputFormat,
    PaginatedCollection,
    Renderer,
    SingleRecord,
    collect_columns,
    compact_value,
    parse_format,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class ScriptedCursor:
    """Hands out pre-baked pages and counts how many were requested.

    Each script item is either a list of records or an exception to raise
    when that page is requested.
    """

    def __init__(self, *script: Any) -> None:
        self._script = list(script)
        self.calls = 0

    def next(self) -> tuple[list[Any], Optional[str]]:
        item = self._script[self.calls]
        self.calls += 1
        if isinstance(item, BaseException):
            raise item
        token = f"page-{self.calls + 1}" if self.calls < len(self._script) else None
        return item, token


@pytest.fixture
def renderer(output: OutputManager) -> Renderer:
    return Renderer(output, height=24)


# ---------------------------------------------------------------------------
# Format selection
# ---------------------------------------------------------------------------


class TestParseFormat:
    def test_default_is_table(self) -> None:
        assert parse_format(None) == OutputFormat.TABLE
        assert parse_format("") == OutputFormat.TABLE

    def test_case_insensitive(self) -> None:
        assert parse_format("JSON") == OutputFormat.JSON

    def test_unknown(self) -> None:
        with pytest.raises(RenderFormatUnsupported):
            parse_format("yaml")

    def test_unknown_falls_back_to_table_with_warning(self, renderer, capsys) -> None:
        renderer.render(SingleRecord(record={"name": "gcli"}), {"format": "yaml"})
        captured = capsys.readouterr()
        assert "Unsupported output format 'yaml'" in captured.err
        assert "gcli" in captured.out


# ---------------------------------------------------------------------------
# Cells and columns
# ---------------------------------------------------------------------------


class TestCells:
    def test_compact_values(self) -> None:
        assert compact_value(None) == ""
        assert compact_value(True) == "true"
        assert compact_value({"login": "octocat", "id": 1}) == "octocat"
        assert compact_value({"sha": "abc"}) == '{"sha":"abc"}'
        assert compact_value(["bug", {"name": "ui"}]) == "bug,ui"

    def test_column_union_keeps_first_seen_order(self) -> None:
        records = [{"id": 1, "name": "a"}, {"id": 2, "private": True}]
        assert collect_columns(records) == ["id", "name", "private"]

    def test_column_scan_limit(self) -> None:
        records = [{"id": i} for i in range(60)] + [{"late": 1}]
        assert collect_columns(records) == ["id"]


# ---------------------------------------------------------------------------
# Formats
# ---------------------------------------------------------------------------


class TestFormats:
    def test_json_record(self, renderer, capsys) -> None:
        renderer.render(SingleRecord(record={"id": 1, "name": "gcli"}), {"format": "json"})
        assert json.loads(capsys.readouterr().out) == {"id": 1, "name": "gcli"}

    def test_json_collection(self, renderer, capsys) -> None:
        renderer.render(Collection(records=[{"id": 1}, {"id": 2}]), {"format": "json"})
        assert json.loads(capsys.readouterr().out) == [{"id": 1}, {"id": 2}]

    def test_csv_collection_with_missing_fields(self, renderer, capsys) -> None:
        records = [{"id": 1, "name": "a"}, {"id": 2, "private": True}]
        renderer.render(Collection(records=records), {"format": "csv"})
        rows = list(csv.reader(io.StringIO(capsys.readouterr().out)))
        assert rows == [["id", "name", "private"], ["1", "a", ""], ["2", "", "true"]]

    def test_plain_collection(self, renderer, capsys) -> None:
        renderer.render(Collection(records=[{"id": 1, "name": "a"}]), {"format": "plain"})
        assert capsys.readouterr().out.splitlines() == ["id\tname", "1\ta"]

    def test_plain_record(self, renderer, capsys) -> None:
        renderer.render(SingleRecord(record={"id": 1, "owner": {"login": "o"}}), {"format": "plain"})
        assert capsys.readouterr().out.splitlines() == ["id\t1", "owner\to"]

    def test_table_collection_shows_every_column(self, renderer, capsys) -> None:
        records = [{"id": 1, "name": "alpha"}, {"id": 2, "private": True}]
        renderer.render(Collection(records=records))
        out = capsys.readouterr().out
        for text in ("id", "name", "private", "alpha", "true"):
            assert text in out

    def test_table_record(self, renderer, capsys) -> None:
        renderer.render(SingleRecord(record={"full_name": "octocat/hello"}))
        out = capsys.readouterr().out
        assert "full_name" in out
        assert "octocat/hello" in out

    def test_stream_format_opts_used(self, renderer, capsys) -> None:
        renderer.render(SingleRecord(record={"id": 1}, format_opts={"format": "json"}))
        assert json.loads(capsys.readouterr().out) == {"id": 1}

    def test_empty_collection(self, renderer, capsys) -> None:
        renderer.render(Collection(records=[]))
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "No results." in captured.err

    def test_empty_collection_json(self, renderer, capsys) -> None:
        renderer.render(Collection(records=[]), {"format": "json"})
        assert json.loads(capsys.readouterr().out) == []

    def test_quiet_suppresses_output(self, renderer, capsys) -> None:
        renderer.render(Collection(records=[{"id": 1}]), {"quiet": True})
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


class TestManualPagination:
    def test_first_page_only_with_hint(self, renderer, capsys) -> None:
        cursor = ScriptedCursor([{"id": "A"}, {"id": "B"}], [{"id": "C"}, {"id": "D"}])
        renderer.render(PaginatedCollection(cursor=cursor), {"format": "plain"})

        captured = capsys.readouterr()
        assert captured.out.splitlines() == ["id", "A", "B"]
        assert PAGINATION_HINT in captured.err
        assert cursor.calls == 1

    def test_no_hint_on_last_page(self, renderer, capsys) -> None:
        cursor = ScriptedCursor([{"id": "A"}])
        renderer.render(PaginatedCollection(cursor=cursor), {"format": "plain"})
        assert PAGINATION_HINT not in capsys.readouterr().err


class TestAutoPagination:
    def test_pages_in_order_with_one_fetch_each(self, renderer, capsys) -> None:
        cursor = ScriptedCursor([{"id": "A"}, {"id": "B"}], [{"id": "C"}, {"id": "D"}])
        renderer.render(
            PaginatedCollection(cursor=cursor),
            {"format": "json", "auto_pagination": True},
        )

        assert json.loads(capsys.readouterr().out) == [
            {"id": "A"}, {"id": "B"}, {"id": "C"}, {"id": "D"},
        ]
        assert cursor.calls == 2

    def test_auto_pagination_from_string_setting(self, renderer, capsys) -> None:
        cursor = ScriptedCursor([{"id": "A"}], [{"id": "B"}])
        renderer.render(
            PaginatedCollection(cursor=cursor, format_opts={"auto_pagination": "true"}),
            {"format": "plain"},
        )
        assert capsys.readouterr().out.splitlines() == ["id", "A", "B"]

    def test_no_hint_in_auto_mode(self, renderer, capsys) -> None:
        cursor = ScriptedCursor([{"id": "A"}], [{"id": "B"}])
        renderer.render(PaginatedCollection(cursor=cursor), {"auto_pagination": True})
        assert PAGINATION_HINT not in capsys.readouterr().err

    def test_interrupt_renders_partial_then_cancels(self, renderer, capsys) -> None:
        cursor = ScriptedCursor([{"id": "A"}, {"id": "B"}], KeyboardInterrupt())
        with pytest.raises(CancelledError) as exc_info:
            renderer.render(
                PaginatedCollection(cursor=cursor),
                {"format": "json", "auto_pagination": True},
            )
        assert exc_info.value.exit_code == 130
        assert json.loads(capsys.readouterr().out) == [{"id": "A"}, {"id": "B"}]

    def test_failing_page_renders_partial_then_reraises(self, renderer, capsys) -> None:
        error = ServerError("HTTP 502: Bad Gateway")
        cursor = ScriptedCursor([{"id": "A"}], [{"id": "B"}], error)
        with pytest.raises(ServerError) as exc_info:
            renderer.render(
                PaginatedCollection(cursor=cursor),
                {"format": "json", "auto_pagination": True},
            )
        assert exc_info.value is error
        assert json.loads(capsys.readouterr().out) == [{"id": "A"}, {"id": "B"}]
        assert cursor.calls == 3

    def test_transport_failure_still_renders_partial(self, renderer, capsys) -> None:
        error = httpx.RemoteProtocolError("Server disconnected")
        cursor = ScriptedCursor([{"id": "A"}, {"id": "B"}], error)
        with pytest.raises(httpx.RemoteProtocolError):
            renderer.render(
                PaginatedCollection(cursor=cursor),
                {"format": "json", "auto_pagination": True},
            )
        assert json.loads(capsys.readouterr().out) == [{"id": "A"}, {"id": "B"}]


# ---------------------------------------------------------------------------
# Pager decision
# ---------------------------------------------------------------------------


class TestPager:
    def _tty_output(self) -> MagicMock:
        output = MagicMock(spec=OutputManager)
        output.is_tty = True
        return output

    def test_long_output_goes_through_pager(self) -> None:
        output = self._tty_output()
        Renderer(output, height=3).render(
            Collection(records=[{"id": i} for i in range(10)]),
            {"format": "plain", "pager": "more"},
        )
        output.paged_output.assert_called_once()
        assert output.paged_output.call_args.args[1] == "more"
        output.print_data.assert_not_called()

    def test_short_output_is_printed(self) -> None:
        output = self._tty_output()
        Renderer(output, height=24).render(
            Collection(records=[{"id": 1}]), {"format": "plain"}
        )
        output.print_data.assert_called_once_with("id\n1")
        output.paged_output.assert_not_called()

    def test_no_pager_flag(self) -> None:
        output = self._tty_output()
        renderer = Renderer(output, height=1)
        assert not renderer.should_page("a\nb\nc", {"no-pager": True})
        assert renderer.should_page("a\nb\nc", {})

    def test_never_page_when_not_a_tty(self, renderer) -> None:
        assert not renderer.should_page("\n" * 100, {})
