"""Tests for gcli.params -- mapping CLI arguments and flags onto API parameters.

Covers:
- Positional consumption, missing and surplus arguments
- Alias equivalence for options
- Three-state option values and the omit / always inclusion policy
- api_name renaming
- Value coercion for every option kind
- Separation of presentation flags into format_opts
"""

from __future__ import annotations

import pytest

from gcli.exceptions import InvalidOptionTypeError, InvalidUsageError, MissingArgumentError
from gcli.models import OptionKind, ValueState
from gcli.params import (
    build_keywords,
    build_params,
    coerce_value,
    normalize_name,
    parse_bool,
    resolve_option,
    split_format_options,
)
from gcli.resources.base import command, opt


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def ref_update(registry):
    return registry.get("ref", "update")


@pytest.fixture
def status_create(registry):
    return registry.get("status", "create")


@pytest.fixture
def team_add_member(registry):
    return registry.get("team", "add_member")


# ---------------------------------------------------------------------------
# Positionals
# ---------------------------------------------------------------------------


class TestPositionals:
    def test_consumed_in_order(self, ref_update) -> None:
        bag = build_params(ref_update, ["octocat", "hello", "heads/main"], {"sha": "aa2"})
        assert bag.positionals == ["octocat", "hello", "heads/main"]

    def test_missing_required_argument(self, ref_update) -> None:
        with pytest.raises(MissingArgumentError) as exc_info:
            build_params(ref_update, ["octocat", "hello"])
        assert exc_info.value.argument == "ref"
        assert exc_info.value.exit_code == 2
        assert "ref update" in str(exc_info.value)

    def test_too_many_arguments(self, ref_update) -> None:
        with pytest.raises(InvalidUsageError, match="takes 3 argument"):
            build_params(ref_update, ["a", "b", "c", "d"])

    def test_integer_positional_is_coerced(self, team_add_member) -> None:
        bag = build_params(team_add_member, ["42", "alice"])
        assert bag.positionals == [42, "alice"]
        assert bag.keywords == {}

    def test_integer_positional_rejects_text(self, team_add_member) -> None:
        with pytest.raises(InvalidOptionTypeError):
            build_params(team_add_member, ["abc", "alice"])

    def test_optional_trailing_positional(self) -> None:
        entry = command("x", "search", "Search", "GET", "/search", args=("[q]",), query=("q",))
        assert build_params(entry, []).positionals == []
        assert build_params(entry, ["gcli"]).positionals == ["gcli"]


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


class TestOptions:
    def test_ref_update_sends_force_false_by_default(self, ref_update) -> None:
        bag = build_params(ref_update, ["octocat", "hello", "heads/main"], {"sha": "aa218f56"})
        assert bag.keywords == {"sha": "aa218f56", "force": False}

    def test_alias_is_equivalent_to_canonical_name(self, ref_update) -> None:
        args = ["octocat", "hello", "heads/main"]
        by_name = build_params(ref_update, args, {"sha": "aa2", "force": True})
        by_alias = build_params(ref_update, args, {"sha": "aa2", "f": True})
        assert by_name.keywords == by_alias.keywords == {"sha": "aa2", "force": True}

    def test_explicit_false_is_sent(self, ref_update) -> None:
        bag = build_params(ref_update, ["o", "r", "heads/x"], {"sha": "aa2", "force": "false"})
        assert bag.keywords["force"] is False

    def test_api_name_renames_keyword(self, status_create) -> None:
        bag = build_params(
            status_create,
            ["octocat", "hello", "6dcb09b"],
            {"state": "success", "target": "https://ci.example.com/1"},
        )
        assert bag.keywords == {
            "state": "success",
            "target_url": "https://ci.example.com/1",
        }

    def test_unset_omitted_options_are_left_out(self, status_create) -> None:
        bag = build_params(status_create, ["octocat", "hello", "6dcb09b"], {"state": "pending"})
        assert "description" not in bag.keywords
        assert "context" not in bag.keywords

    def test_none_value_counts_as_unset(self, status_create) -> None:
        bag = build_params(status_create, ["o", "r", "s"], {"state": None})
        assert bag.keywords == {}

    def test_dashed_and_underscored_names(self) -> None:
        spec = opt("per_page", "int")
        assert resolve_option(spec, {"per-page": "5"}).value == "5"
        assert resolve_option(spec, {"--per_page": "5"}).value == "5"

    def test_bad_int_value(self) -> None:
        with pytest.raises(InvalidOptionTypeError, match="--per_page"):
            build_keywords((opt("per_page", "int"),), {"per_page": "many"})


class TestResolveOption:
    def test_user_supplied(self) -> None:
        value = resolve_option(opt("force", "bool", default=False), {"force": True})
        assert value.state == ValueState.USER_SUPPLIED

    def test_explicit_default(self) -> None:
        value = resolve_option(opt("force", "bool", default=False), {})
        assert value.state == ValueState.EXPLICIT_DEFAULT
        assert value.value is False

    def test_unset(self) -> None:
        value = resolve_option(opt("state"), {})
        assert value.state == ValueState.UNSET
        assert not value.is_set

    def test_default_omitted_unless_always(self) -> None:
        omitted = opt("sort", default="created")
        always = opt("sort", default="created", always=True)
        assert build_keywords((omitted,), {}) == {}
        assert build_keywords((always,), {}) == {"sort": "created"}


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------


class TestCoercion:
    @pytest.mark.parametrize("text", ["true", "YES", "y", "1", "on"])
    def test_truthy_strings(self, text: str) -> None:
        assert parse_bool(text) is True

    @pytest.mark.parametrize("text", ["false", "No", "n", "0", "off"])
    def test_falsy_strings(self, text: str) -> None:
        assert parse_bool(text) is False

    def test_bool_rejects_garbage(self) -> None:
        with pytest.raises(InvalidOptionTypeError) as exc_info:
            coerce_value("force", OptionKind.BOOL, "maybe")
        assert exc_info.value.exit_code == 2

    def test_int(self) -> None:
        assert coerce_value("page", OptionKind.INT, " 3 ") == 3

    def test_int_rejects_bool(self) -> None:
        with pytest.raises(InvalidOptionTypeError):
            coerce_value("page", OptionKind.INT, True)

    def test_array_from_commas(self) -> None:
        assert coerce_value("events", OptionKind.ARRAY, "push, pull_request,") == [
            "push",
            "pull_request",
        ]

    def test_hash_from_pairs(self) -> None:
        assert coerce_value("config", OptionKind.HASH, "url:http://ci,content_type:json") == {
            "url": "http://ci",
            "content_type": "json",
        }

    def test_hash_from_json(self) -> None:
        assert coerce_value("config", OptionKind.HASH, '{"insecure_ssl": "0"}') == {
            "insecure_ssl": "0"
        }

    def test_hash_rejects_malformed_pair(self) -> None:
        with pytest.raises(InvalidOptionTypeError):
            coerce_value("config", OptionKind.HASH, "novalue")

    def test_string_passthrough(self) -> None:
        assert coerce_value("name", OptionKind.STRING, 5) == "5"


# ---------------------------------------------------------------------------
# Format options
# ---------------------------------------------------------------------------


class TestFormatOptions:
    def test_normalize_name(self) -> None:
        assert normalize_name("--No-Pager") == "no_pager"

    def test_split(self) -> None:
        api, fmt = split_format_options(
            {"state": "open", "--format": "json", "no_pager": True, "quiet": None}
        )
        assert api == {"state": "open"}
        assert fmt == {"format": "json", "no-pager": True}

    def test_format_flags_never_reach_keywords(self, status_create) -> None:
        bag = build_params(
            status_create,
            ["o", "r", "s"],
            {"state": "success", "format": "json", "auto_pagination": True},
            {"format": "table", "pager": "less"},
        )
        assert bag.keywords == {"state": "success"}
        assert bag.format_opts == {"format": "json", "pager": "less", "auto_pagination": True}
