"""Map CLI arguments and flags onto remote API call parameters.

Given a :class:`~gcli.models.CommandEntry` and the raw values of one
invocation, :func:`build_params` produces a :class:`~gcli.models.ParamBag`:

* **Positionals** are consumed in declared order.  A missing required one
  raises :class:`~gcli.exceptions.MissingArgumentError`.
* **Options** are looked up by canonical name or any alias, tracked as a
  three-state :class:`~gcli.models.OptionValue` (unset / explicit default /
  user supplied), coerced to their declared :class:`~gcli.models.OptionKind`,
  renamed to their ``api_name``, and then either included or omitted
  according to their :class:`~gcli.models.Inclusion`.
* **Format options** (``format``, ``no-pager``, ...) are split off into
  ``format_opts`` and never reach the API.

Everything here is local validation: the builder runs before the router
issues any request, so a bad invocation never costs a network round trip.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional, Sequence

from gcli.exceptions import InvalidOptionTypeError, InvalidUsageError, MissingArgumentError
from gcli.models import (
    CommandEntry,
    Inclusion,
    OptionKind,
    OptionSpec,
    OptionValue,
    ParamBag,
    ValueState,
)


FORMAT_OPTION_NAMES: tuple[str, ...] = (
    "format",
    "no-pager",
    "no-color",
    "pager",
    "quiet",
    "auto_pagination",
)
"""Presentation settings routed to the renderer instead of the API."""

_TRUE_STRINGS = frozenset({"true", "yes", "y", "1", "on"})
_FALSE_STRINGS = frozenset({"false", "no", "n", "0", "off"})


def normalize_name(name: str) -> str:
    """Normalise a flag name so ``no-pager``, ``no_pager`` and ``--no-pager`` compare equal."""
    return name.lstrip("-").replace("-", "_").lower()


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------


def parse_bool(value: Any) -> bool:
    """Parse a boolean from a bool or a yes/no style string.

    Raises:
        ValueError: If *value* is not recognisable as a boolean.
    """
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _parse_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("booleans are not integers")
    if isinstance(value, int):
        return value
    return int(str(value).strip())


def _parse_array(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    text = str(value).strip()
    if not text:
        return []
    return [item.strip() for item in text.split(",") if item.strip()]


def _parse_hash(value: Any) -> dict[str, Any]:
    """Parse ``{"a": 1}`` JSON or ``key:value,key2:value2`` pairs."""
    if isinstance(value, Mapping):
        return dict(value)
    text = str(value).strip()
    if not text:
        return {}
    if text.startswith("{"):
        parsed = json.loads(text)
        if not isinstance(parsed, dict):
            raise ValueError("expected a JSON object")
        return parsed
    result: dict[str, Any] = {}
    for pair in text.split(","):
        if not pair.strip():
            continue
        key, sep, val = pair.partition(":")
        if not sep or not key.strip():
            raise ValueError(f"malformed pair {pair!r}")
        result[key.strip()] = val.strip()
    return result


_COERCERS = {
    OptionKind.STRING: str,
    OptionKind.BOOL: parse_bool,
    OptionKind.INT: _parse_int,
    OptionKind.ARRAY: _parse_array,
    OptionKind.HASH: _parse_hash,
}


def coerce_value(name: str, kind: OptionKind, value: Any) -> Any:
    """Coerce *value* to *kind*.

    Args:
        name: Option name, used in the error message.
        kind: Target :class:`~gcli.models.OptionKind`.
        value: Raw value, usually a string from the command line.

    Raises:
        InvalidOptionTypeError: If the value cannot be converted.
    """
    if kind == OptionKind.STRING and isinstance(value, str):
        return value
    try:
        return _COERCERS[kind](value)
    except (ValueError, TypeError) as exc:
        raise InvalidOptionTypeError(name, kind.value, value) from exc


# ---------------------------------------------------------------------------
# Option resolution
# ---------------------------------------------------------------------------


def resolve_option(spec: OptionSpec, options: Mapping[str, Any]) -> OptionValue:
    """Find the value supplied for *spec* under its name or any alias.

    A key mapped to ``None`` counts as not supplied.  When nothing was
    supplied the spec's declared default (if any) becomes an explicit
    default; otherwise the option stays unset.
    """
    normalized = {normalize_name(k): v for k, v in options.items()}
    for name in spec.names:
        value = normalized.get(normalize_name(name))
        if value is not None:
            return OptionValue.user_supplied(value)
    if spec.default is not None:
        return OptionValue.explicit_default(spec.default)
    return OptionValue.unset()


def _include(spec: OptionSpec, value: OptionValue) -> bool:
    if value.state == ValueState.USER_SUPPLIED:
        return True
    if value.state == ValueState.EXPLICIT_DEFAULT:
        return spec.inclusion == Inclusion.ALWAYS
    return False


def build_keywords(
    option_specs: Sequence[OptionSpec],
    options: Mapping[str, Any],
) -> dict[str, Any]:
    """Build the keyword map sent to the API for *option_specs*."""
    keywords: dict[str, Any] = {}
    for spec in option_specs:
        value = resolve_option(spec, options)
        if not _include(spec, value):
            continue
        keywords[spec.keyword] = coerce_value(spec.name, spec.kind, value.value)
    return keywords


def split_format_options(
    options: Mapping[str, Any],
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Separate presentation flags from API flags.

    Returns:
        ``(api_options, format_overrides)``.  Format keys are returned in
        their canonical :data:`FORMAT_OPTION_NAMES` spelling and ``None``
        values are dropped.
    """
    canonical = {normalize_name(n): n for n in FORMAT_OPTION_NAMES}
    api_options: dict[str, Any] = {}
    overrides: dict[str, Any] = {}
    for key, value in options.items():
        target = canonical.get(normalize_name(key))
        if target is None:
            api_options[key] = value
        elif value is not None:
            overrides[target] = value
    return api_options, overrides


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def build_params(
    entry: CommandEntry,
    positional_args: Sequence[Any],
    options: Optional[Mapping[str, Any]] = None,
    format_opts: Optional[Mapping[str, Any]] = None,
) -> ParamBag:
    """Build the :class:`~gcli.models.ParamBag` for one invocation of *entry*.

    Args:
        entry: The command being invoked.
        positional_args: Positional arguments in the order given.
        options: Flags supplied by the user, keyed by flag name or alias.
        format_opts: Base presentation settings (normally derived from the
            resolved configuration).  Format flags in *options* override
            them.

    Returns:
        A bag whose ``positionals`` and ``keywords`` are ready to pass to the
        remote API and whose ``format_opts`` is meant for the renderer.

    Raises:
        MissingArgumentError: A required positional argument is absent.
        InvalidUsageError: More positional arguments were given than declared.
        InvalidOptionTypeError: A value could not be coerced to its kind.

    Example::

        >>> bag = build_params(ref_update, ["octocat", "hello", "heads/main"],
        ...                    {"sha": "aa218f56"})
        >>> bag.keywords
        {'sha': 'aa218f56', 'force': False}
    """
    args = list(positional_args)
    declared = entry.positional_params
    if len(args) > len(declared):
        raise InvalidUsageError(
            f"'{entry.name}' takes {len(declared)} argument(s) but {len(args)} were given"
        )

    positionals: list[Any] = []
    for index, param in enumerate(declared):
        value = args[index] if index < len(args) else None
        if value is None:
            if param.required:
                raise MissingArgumentError(entry.name, param.name)
            break
        if param.kind != OptionKind.STRING:
            value = coerce_value(param.name, param.kind, value)
        positionals.append(value)

    api_options, overrides = split_format_options(options or {})
    keywords = build_keywords(entry.option_params, api_options)

    merged_format = dict(format_opts or {})
    merged_format.update(overrides)

    return ParamBag(positionals=positionals, keywords=keywords, format_opts=merged_format)
