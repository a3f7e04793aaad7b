"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~gcli.exceptions.GcliError` subclass.

Example::

    $ gcli repoo list
    $ echo $?
    2   # EXIT_INVALID_USAGE -- unknown command
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred (including configuration problems)."""

EXIT_INVALID_USAGE = 2
"""Unknown command, missing argument, or an option value of the wrong type."""

EXIT_AUTH_FAILURE = 3
"""GitHub rejected the credentials (HTTP 401/403)."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The API returned an error status other than 401/403/404."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_CANCELLED = 130
"""The user interrupted the command (Ctrl-C)."""
