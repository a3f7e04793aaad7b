"""Layered configuration: built-in defaults < config files < CLI flags.

This module handles all persistent configuration for gcli:

* **Defaults** -- declared as Pydantic models in :mod:`gcli.models`
  (:class:`~gcli.models.ConfigFile`); see :func:`config_defaults`.
* **Config files** -- YAML documents named ``.gcliconfig`` (overridable via
  ``--filename``), searched in the current directory first and then in the
  home directory.  See :func:`search_paths`, :func:`read_config`,
  :func:`write_config`.
* **Precedence resolution** -- :func:`resolve` deep-merges the layers into a
  :class:`ResolvedConfig` addressed by dotted keys (``core.format``).
* **Mutation** -- :func:`update_config_value` performs the
  read-modify-write cycle of ``gcli config <key> <value>`` while holding
  :func:`config_lock`.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) so an interrupted write never leaves a partially
written config file behind.
"""

from __future__ import annotations

import copy
import os
import platform
import tempfile
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional, Sequence

import yaml
from pydantic import ValidationError

from gcli.exceptions import ConfigError, ConfigFileExistsError, ConfigFileMissingError
from gcli.models import ConfigFile, OptionKind

_APP_NAME = "gcli"
DEFAULT_FILENAME = ".gcliconfig"

GLOBAL_FLAG_KEYS: dict[str, str] = {
    "token": "user.token",
    "login": "user.login",
    "password": "user.password",
    "no_color": "core.no-color",
    "no_pager": "core.no-pager",
    "pager": "core.pager",
    "quiet": "core.quiet",
    "format": "core.format",
    "auto_pagination": "core.auto_pagination",
}
"""Global CLI flag name -> dotted config key it overrides."""


# --- Data directory (crash logs) ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/gcli/`` (default ``~/.local/share/gcli/``).
    On macOS/Windows: ``~/.gcli/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Dotted-key helpers ---


def config_defaults() -> dict[str, Any]:
    """Return the built-in defaults as a nested ``{"core": {...}, "user": {...}}`` dict."""
    return ConfigFile().model_dump(by_alias=True)


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge *override* into a copy of *base*.

    Nested mappings are merged key by key rather than replaced::

        >>> deep_merge({"core": {"format": "table", "quiet": False}},
        ...            {"core": {"format": "json"}})
        {'core': {'format': 'json', 'quiet': False}}
    """
    result = copy.deepcopy(dict(base))
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(result.get(key), Mapping):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def expand_dotted(flat: Mapping[str, Any]) -> dict[str, Any]:
    """Turn ``{"core.format": "json"}`` into ``{"core": {"format": "json"}}``.

    Keys without a dot and values that are already mappings pass through.
    """
    nested: dict[str, Any] = {}
    for key, value in flat.items():
        parts = key.split(".")
        target = nested
        for part in parts[:-1]:
            existing = target.get(part)
            if not isinstance(existing, dict):
                existing = {}
                target[part] = existing
            target = existing
        leaf = parts[-1]
        if isinstance(value, Mapping) and isinstance(target.get(leaf), dict):
            target[leaf] = deep_merge(target[leaf], value)
        else:
            target[leaf] = value
    return nested


def flatten(nested: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten a nested mapping into dotted keys, preserving order."""
    flat: dict[str, Any] = {}
    for key, value in nested.items():
        dotted = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping) and value:
            flat.update(flatten(value, dotted))
        else:
            flat[dotted] = value
    return flat


class ResolvedConfig:
    """The effective configuration of one invocation.

    Wraps a nested mapping and exposes it by dotted key.  Built once per
    process by :func:`resolve` and treated as read-only afterwards.

    Args:
        data: Nested configuration mapping.
        sources: Config files that contributed to *data*, highest
            precedence first.
    """

    def __init__(
        self,
        data: Optional[Mapping[str, Any]] = None,
        sources: Sequence[Path] = (),
    ) -> None:
        self._data: dict[str, Any] = copy.deepcopy(dict(data or {}))
        self.sources: list[Path] = list(sources)

    def fetch(self, key: str, default: Any = None) -> Any:
        """Return the value at dotted *key*, or *default* when absent."""
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, Mapping) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> Any:
        """Set the value at dotted *key*, creating intermediate sections."""
        parts = key.split(".")
        node = self._data
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = value
        return value

    def __contains__(self, key: object) -> bool:
        sentinel = object()
        return isinstance(key, str) and self.fetch(key, sentinel) is not sentinel

    def flatten(self) -> dict[str, Any]:
        """Return an ordered ``dotted key -> value`` mapping."""
        return flatten(self._data)

    def as_dict(self) -> dict[str, Any]:
        """Return a deep copy of the nested data."""
        return copy.deepcopy(self._data)

    def __repr__(self) -> str:
        return f"ResolvedConfig({self._data!r})"


def resolve(
    defaults: Mapping[str, Any],
    file_layers: Sequence[Mapping[str, Any]] = (),
    cli_flags: Optional[Mapping[str, Any]] = None,
    sources: Sequence[Path] = (),
) -> ResolvedConfig:
    """Resolve config with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (dotted or nested keys; ``None`` values are ignored)
        2. File layers, in search order -- the first layer wins over later ones
        3. Built-in defaults

    Args:
        defaults: Nested built-in defaults.
        file_layers: Parsed config files ordered by search precedence
            (current directory before home directory).
        cli_flags: Explicit per-invocation overrides.
        sources: Paths the file layers were read from, for diagnostics.

    Returns:
        The merged :class:`ResolvedConfig`.
    """
    merged = deep_merge({}, defaults)
    for layer in reversed(list(file_layers)):
        merged = deep_merge(merged, expand_dotted(layer))
    flags = {k: v for k, v in (cli_flags or {}).items() if v is not None}
    merged = deep_merge(merged, expand_dotted(flags))
    return ResolvedConfig(merged, sources)


def flags_to_config(flags: Mapping[str, Any]) -> dict[str, Any]:
    """Map global CLI flag values onto dotted config keys.

    Only flags the user actually supplied should be passed in; ``None``
    values are dropped.
    """
    result: dict[str, Any] = {}
    for name, value in flags.items():
        key = GLOBAL_FLAG_KEYS.get(name.replace("-", "_"))
        if key is not None and value is not None:
            result[key] = value
    return result


# --- Persistence ---


def search_paths(
    filename: str = DEFAULT_FILENAME,
    cwd: Optional[Path] = None,
    home: Optional[Path] = None,
) -> list[Path]:
    """Return candidate config file paths in precedence order (cwd, then home)."""
    candidates = [
        (cwd or Path.cwd()) / filename,
        (home or Path.home()) / filename,
    ]
    unique: list[Path] = []
    for path in candidates:
        if path not in unique:
            unique.append(path)
    return unique


def find_config_file(
    filename: str = DEFAULT_FILENAME,
    cwd: Optional[Path] = None,
    home: Optional[Path] = None,
) -> Optional[Path]:
    """Return the highest-precedence existing config file, or ``None``."""
    for path in search_paths(filename, cwd, home):
        if path.is_file():
            return path
    return None


def read_config(path: Path) -> dict[str, Any]:
    """Read and validate a YAML config file.

    Only the keys present in the file are returned, so absent keys fall
    through to lower layers.  Keys come back under their dotted-config
    spelling (``no_pager`` in the file is returned as ``no-pager``).

    Raises:
        ConfigFileMissingError: If *path* does not exist.
        ConfigError: If the file is not valid YAML or fails validation.
    """
    if not path.is_file():
        raise ConfigFileMissingError(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError) as exc:
        raise ConfigError(f"Invalid config file at {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config file at {path}: expected a mapping")
    try:
        validated = ConfigFile.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config file at {path}: {exc}") from exc
    return validated.model_dump(by_alias=True, exclude_unset=True)


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems.  On any failure the
    temp file is removed and *path* is left untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


def write_config(path: Path, data: Mapping[str, Any], force: bool = False) -> None:
    """Persist *data* as YAML at *path*.

    Raises:
        ConfigFileExistsError: If *path* exists and *force* is false.
    """
    if path.exists() and not force:
        raise ConfigFileExistsError(path)
    text = yaml.safe_dump(dict(data), default_flow_style=False, sort_keys=False)
    _atomic_write(path, text)


@contextmanager
def config_lock(path: Path, timeout: float = 10.0, poll: float = 0.05) -> Iterator[Path]:
    """Hold an exclusive lock on *path* for the duration of the block.

    The lock is a sibling ``<name>.lock`` file created with ``O_EXCL``.  It is
    removed on exit, including when the block raises.

    Raises:
        ConfigError: If the lock cannot be acquired within *timeout* seconds.
    """
    lock_path = path.with_name(f"{path.name}.lock")
    deadline = time.monotonic() + timeout
    while True:
        try:
            fd = os.open(str(lock_path), os.O_CREAT | os.O_EXCL | os.O_WRONLY)
            break
        except FileExistsError:
            if time.monotonic() >= deadline:
                raise ConfigError(
                    f"Config file {path} is locked by another process ({lock_path})"
                ) from None
            time.sleep(poll)
    try:
        os.write(fd, str(os.getpid()).encode())
        yield path
    finally:
        os.close(fd)
        try:
            os.unlink(lock_path)
        except OSError:
            pass


def coerce_config_value(key: str, value: str) -> Any:
    """Coerce a string from the command line to the type of the key's default.

    Unknown keys and string-typed keys keep the raw string.

    Raises:
        InvalidOptionTypeError: If the key is boolean and *value* is not.
    """
    from gcli.params import coerce_value

    current = ResolvedConfig(config_defaults()).fetch(key)
    if isinstance(current, bool):
        return coerce_value(key, OptionKind.BOOL, value)
    if isinstance(current, int):
        return coerce_value(key, OptionKind.INT, value)
    return value


def update_config_value(path: Path, key: str, value: str) -> Any:
    """Set dotted *key* to *value* in the config file at *path*.

    Runs the whole read-modify-write cycle under :func:`config_lock`.

    Returns:
        The coerced value that was written.

    Raises:
        ConfigFileMissingError: If *path* does not exist.
    """
    with config_lock(path):
        current = ResolvedConfig(read_config(path))
        coerced = current.set(key, coerce_config_value(key, value))
        write_config(path, current.as_dict(), force=True)
    return coerced


def load_config(
    filename: str = DEFAULT_FILENAME,
    cli_flags: Optional[Mapping[str, Any]] = None,
    cwd: Optional[Path] = None,
    home: Optional[Path] = None,
) -> ResolvedConfig:
    """Load every existing config file and resolve it against *cli_flags*.

    Missing files contribute nothing; having no config file at all is not an
    error.
    """
    layers: list[dict[str, Any]] = []
    sources: list[Path] = []
    for path in search_paths(filename, cwd, home):
        if path.is_file():
            layers.append(read_config(path))
            sources.append(path)
    return resolve(config_defaults(), layers, cli_flags, sources)
