"""Exception hierarchy for gcli.

All exceptions inherit from :class:`GcliError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`gcli.exit_codes`.
The top-level error handler in :func:`gcli.app.main` catches ``GcliError``
and exits with the appropriate code, while unexpected exceptions produce a
crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Local validation errors (everything under :class:`InvalidUsageError` and
:class:`ConfigError`) are always raised before any request reaches GitHub.

Subclass hierarchy::

    GcliError (exit 1)
    +-- InvalidUsageError            (exit 2)
    |   +-- MissingArgumentError
    |   +-- InvalidOptionTypeError
    |   +-- UnknownCommandError
    |   +-- IncompleteCommandError
    +-- ConfigError                  (exit 1)
    |   +-- ConfigFileExistsError
    |   +-- ConfigFileMissingError
    +-- RemoteCallError              (exit 1)
    |   +-- AuthError                (exit 3)
    |   +-- NotFoundError            (exit 4)
    |   +-- ServerError              (exit 5)
    |   +-- ConnectionError_         (exit 6)
    +-- RenderFormatUnsupported      (recovered by the renderer)
    +-- CancelledError               (exit 130)
"""

from __future__ import annotations

from typing import Optional, Sequence

from gcli.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CANCELLED,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class GcliError(Exception):
    """Base exception for all gcli errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`gcli.exit_codes`. The entry point catches this
    exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(GcliError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class MissingArgumentError(InvalidUsageError):
    """Raised when a required positional argument was not supplied."""

    def __init__(self, command: str, argument: str):
        super().__init__(f"'{command}' was called with no value for required argument <{argument}>")
        self.command = command
        self.argument = argument


class InvalidOptionTypeError(InvalidUsageError):
    """Raised when an option value cannot be coerced to its declared kind."""

    def __init__(self, option: str, kind: str, value: object):
        super().__init__(f"Expected {kind} value for '--{option}'; got {value!r}")
        self.option = option
        self.kind = kind
        self.value = value


class UnknownCommandError(InvalidUsageError):
    """Raised when an invocation does not name a registered command.

    Args:
        name: The name as typed by the user.
        suggestions: Up to five similar command names, best match first.
    """

    def __init__(self, name: str, suggestions: Optional[Sequence[str]] = None):
        super().__init__(f'Could not find command "{name}".')
        self.name = name
        self.suggestions: list[str] = list(suggestions or [])


class IncompleteCommandError(InvalidUsageError):
    """Raised when a group is named without a verb (e.g. ``gcli repo``)."""

    def __init__(self, group: str):
        super().__init__(f'"{group}" requires a sub-command.')
        self.group = group


class ConfigError(GcliError):
    """Raised for configuration problems (unreadable files, invalid YAML, bad keys)."""

    exit_code = EXIT_GENERIC_FAILURE


class ConfigFileExistsError(ConfigError):
    """Raised when writing a config file that already exists without ``--force``."""

    def __init__(self, path: object):
        super().__init__(
            f"Not overwriting existing config file {path}, use --force to override."
        )
        self.path = path


class ConfigFileMissingError(ConfigError):
    """Raised when a command requires a config file and none exists."""

    def __init__(self, path: object = None):
        where = f" at {path}" if path is not None else ""
        super().__init__(
            f"Configuration file does not exist{where}. "
            "Please use `gcli init` to create one."
        )
        self.path = path


class RemoteCallError(GcliError):
    """Raised when the remote API call fails.

    The message of the underlying failure is passed through unchanged.
    The core never retries a ``RemoteCallError``.
    """


class AuthError(RemoteCallError):
    """Raised when GitHub rejects the credentials (HTTP 401 / 403)."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(RemoteCallError):
    """Raised when the API returns HTTP 404 (resource not found)."""

    exit_code = EXIT_NOT_FOUND


class ServerError(RemoteCallError):
    """Raised when the API returns an error status other than 401, 403 or 404."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(RemoteCallError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class RenderFormatUnsupported(GcliError):
    """Raised by :func:`gcli.render.parse_format` for an unknown format name.

    The renderer recovers from it by warning and falling back to ``table``.
    """

    def __init__(self, name: str):
        super().__init__(f"Unsupported output format '{name}', falling back to table.")
        self.name = name


class CancelledError(GcliError):
    """Raised after an interrupted command has rendered its partial output."""

    exit_code = EXIT_CANCELLED
