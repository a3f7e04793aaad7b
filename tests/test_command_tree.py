"""Tests for the Typer command tree helpers."""

from __future__ import annotations

import enum
from unittest.mock import MagicMock

import pytest

from gcli.command_tree import format_unknown, split_command_args, user_supplied
from gcli.exceptions import UnknownCommandError


class _ForeignSource(enum.Enum):
    """Stands in for the parameter-source enum of another click copy."""

    COMMANDLINE = 1
    ENVIRONMENT = 2
    DEFAULT = 3
    DEFAULT_MAP = 4


def _ctx(source) -> MagicMock:
    ctx = MagicMock()
    ctx.get_parameter_source.return_value = source
    return ctx


class TestUserSupplied:
    @pytest.mark.parametrize(
        "source, expected",
        [
            (_ForeignSource.COMMANDLINE, True),
            (_ForeignSource.ENVIRONMENT, True),
            (_ForeignSource.DEFAULT, False),
            (_ForeignSource.DEFAULT_MAP, False),
            (None, False),
        ],
    )
    def test_matches_source_by_name(self, source, expected: bool) -> None:
        assert user_supplied(_ctx(source), "opt_0") is expected

    def test_click_enum(self) -> None:
        from click.core import ParameterSource

        assert user_supplied(_ctx(ParameterSource.COMMANDLINE), "sha")
        assert not user_supplied(_ctx(ParameterSource.DEFAULT), "sha")


class TestSplitCommandArgs:
    def test_colon_token(self) -> None:
        assert split_command_args(["repo:list", "--page", "2"]) == ["repo", "list", "--page", "2"]

    def test_group_only(self) -> None:
        assert split_command_args(["repo:"]) == ["repo"]

    def test_flags_untouched(self) -> None:
        assert split_command_args(["--format", "a:b"]) == ["--format", "a:b"]


def test_format_unknown_lists_suggestions() -> None:
    text = format_unknown(UnknownCommandError("ref updat", ["ref update"]))
    assert text.splitlines() == [
        'Could not find command "ref updat".',
        "Did you mean one of these?",
        "    ref update",
    ]
