"""Built-in CLI commands for gcli.

These sit at the top level of the command tree next to the API groups:

* :mod:`~gcli.commands.init` -- write a default configuration file.
* :mod:`~gcli.commands.authorize` -- obtain an OAuth token and save the credentials.
* :mod:`~gcli.commands.config` -- query, set and list configuration options.
* :mod:`~gcli.commands.meta` -- ``list``, ``help``, ``whoami`` and ``version``.

Each module exports plain callback functions registered directly on the root
app in :mod:`gcli.app`.
"""
