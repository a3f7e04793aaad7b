"""Canonical Pydantic models shared across all gcli modules.

This is the single source of truth for data shapes in the project. The models
fall into two groups:

**Configuration models** -- the built-in defaults and the schema used to
validate ``.gcliconfig`` files:
    :class:`CoreConfig`, :class:`UserConfig`, and :class:`ConfigFile`.

**Command models** -- declared once per API command at start-up and consumed
by the parameter builder, router and usage formatter:
    :class:`OptionKind`, :class:`Inclusion`, :class:`OptionSpec`,
    :class:`ParamSpec`, :class:`HTTPMethod`, :class:`Endpoint`,
    :class:`CommandEntry`, :class:`ValueState`, :class:`OptionValue`, and
    :class:`ParamBag`.

Command models are frozen: once a command is registered nothing about it can
change for the lifetime of the process.
"""

from __future__ import annotations

import enum
import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# --- Configuration ---


class CoreConfig(BaseModel):
    """The ``core`` section: connection and presentation settings."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    adapter: str = "net_http"
    site: str = "https://github.com"
    endpoint: str = Field(default="https://api.github.com", description="API base URL")
    ssl: str = ""
    mime: str = "json"
    editor: str = "vi"
    pager: str = Field(default="less -FIRX", description="Command used for paging")
    no_pager: bool = Field(default=False, alias="no-pager")
    no_color: bool = Field(default=False, alias="no-color")
    quiet: bool = False
    format: str = Field(default="table", description="Output format: table, json, csv, plain")
    aliases: str = ""
    auto_pagination: bool = Field(
        default=False, description="Fetch every page of paginated collections"
    )


class UserConfig(BaseModel):
    """The ``user`` section: credentials and personal defaults."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    token: str = ""
    login: str = ""
    password: str = ""
    name: str = ""
    repo: str = ""
    org: str = ""


class ConfigFile(BaseModel):
    """Schema of a ``.gcliconfig`` document.

    ``ConfigFile().model_dump(by_alias=True)`` yields the built-in defaults.
    Unknown keys are preserved so that hand-edited files round-trip.
    """

    model_config = ConfigDict(extra="allow")

    core: CoreConfig = Field(default_factory=CoreConfig)
    user: UserConfig = Field(default_factory=UserConfig)


# --- Command declarations ---


class OptionKind(str, enum.Enum):
    """Value kinds an option can declare."""

    STRING = "string"
    BOOL = "bool"
    INT = "int"
    ARRAY = "array"
    HASH = "hash"


class Inclusion(str, enum.Enum):
    """Whether an option is sent when the user did not supply it.

    ``OMIT`` leaves the key out of the request entirely; ``ALWAYS`` sends the
    declared default. GitHub treats a missing key differently from an empty
    one for several endpoints, so this is declared per option.
    """

    OMIT = "omit"
    ALWAYS = "always"


class OptionSpec(BaseModel):
    """A single ``--flag`` accepted by a command.

    Example::

        OptionSpec(name="target", kind=OptionKind.STRING, api_name="target_url",
                   description="Target URL to associate with this status.")
    """

    model_config = ConfigDict(frozen=True)

    name: str
    kind: OptionKind = OptionKind.STRING
    aliases: tuple[str, ...] = ()
    default: Any = None
    banner: str = ""
    description: str = ""
    api_name: Optional[str] = Field(
        default=None, description="Keyword sent to the API (defaults to name)"
    )
    inclusion: Inclusion = Inclusion.OMIT

    @property
    def keyword(self) -> str:
        """The parameter name the API expects."""
        return self.api_name or self.name

    @property
    def names(self) -> tuple[str, ...]:
        """Canonical name followed by every alias."""
        return (self.name, *self.aliases)


class ParamSpec(BaseModel):
    """A positional argument accepted by a command."""

    model_config = ConfigDict(frozen=True)

    name: str
    required: bool = True
    kind: OptionKind = OptionKind.STRING
    description: str = ""


class HTTPMethod(str, enum.Enum):
    """HTTP methods used by the GitHub REST API."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"


_PLACEHOLDER_RE = re.compile(r"\{([^}]+)\}")


class Endpoint(BaseModel):
    """The HTTP shape of one remote API call.

    Positional arguments fill the ``{placeholders}`` of *path* in order; any
    positionals left over are sent as query parameters named by
    *query_keys*.
    """

    model_config = ConfigDict(frozen=True)

    method: HTTPMethod
    path: str
    query_keys: tuple[str, ...] = ()
    paginated: bool = False
    items_key: Optional[str] = Field(
        default=None, description="Key holding the records of a wrapped collection"
    )
    accept: Optional[str] = Field(default=None, description="Accept header override")

    @property
    def placeholders(self) -> list[str]:
        """Names of the path template placeholders, in order."""
        return _PLACEHOLDER_RE.findall(self.path)


class CommandEntry(BaseModel):
    """One ``group verb`` command bound to a remote API endpoint."""

    model_config = ConfigDict(frozen=True)

    group: str
    verb: str
    description: str = ""
    positional_params: tuple[ParamSpec, ...] = ()
    option_params: tuple[OptionSpec, ...] = ()
    endpoint: Endpoint
    hidden: bool = False

    @model_validator(mode="after")
    def _unique_option_names(self) -> CommandEntry:
        seen: set[str] = set()
        for spec in self.option_params:
            for name in spec.names:
                key = name.replace("-", "_")
                if key in seen:
                    raise ValueError(
                        f"Duplicate option '{name}' in command '{self.group} {self.verb}'"
                    )
                seen.add(key)
        return self

    @model_validator(mode="after")
    def _positionals_cover_endpoint(self) -> CommandEntry:
        slots = len(self.endpoint.placeholders)
        if len(self.positional_params) != slots + len(self.endpoint.query_keys):
            raise ValueError(
                f"Command '{self.group} {self.verb}' declares {len(self.positional_params)} "
                f"argument(s) for {slots} path placeholder(s) and "
                f"{len(self.endpoint.query_keys)} query key(s)"
            )
        if not all(p.required for p in self.positional_params[:slots]):
            raise ValueError(
                f"Command '{self.group} {self.verb}' has an optional path argument"
            )
        return self

    @property
    def name(self) -> str:
        """Display name, e.g. ``"repo list"``."""
        return f"{self.group} {self.verb}"

    @property
    def key(self) -> tuple[str, str]:
        """Registry key ``(group, verb)``."""
        return (self.group, self.verb)


# --- Per-invocation values ---


class ValueState(str, enum.Enum):
    """Where an option's value came from."""

    UNSET = "unset"
    EXPLICIT_DEFAULT = "explicit_default"
    USER_SUPPLIED = "user_supplied"


class OptionValue(BaseModel):
    """An option value together with its provenance.

    Keeping the state separate from the value is what lets the parameter
    builder tell "the user passed ``--force=false``" from "``force`` was
    never mentioned".
    """

    model_config = ConfigDict(frozen=True)

    state: ValueState = ValueState.UNSET
    value: Any = None

    @classmethod
    def unset(cls) -> OptionValue:
        return cls()

    @classmethod
    def explicit_default(cls, value: Any) -> OptionValue:
        return cls(state=ValueState.EXPLICIT_DEFAULT, value=value)

    @classmethod
    def user_supplied(cls, value: Any) -> OptionValue:
        return cls(state=ValueState.USER_SUPPLIED, value=value)

    @property
    def is_set(self) -> bool:
        return self.state != ValueState.UNSET


class ParamBag(BaseModel):
    """Arguments for one remote call, plus presentation-only settings.

    ``format_opts`` is metadata for the renderer and never reaches the API.
    """

    positionals: list[Any] = Field(default_factory=list)
    keywords: dict[str, Any] = Field(default_factory=dict)
    format_opts: dict[str, Any] = Field(default_factory=dict)
