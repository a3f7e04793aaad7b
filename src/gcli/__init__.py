"""gcli -- GitHub's REST API on the command line.

Every API resource is exposed as a command group with sub-commands that map
CLI flags onto API parameters::

    gcli repo list --user rails
    gcli status create octocat hello-world 7f86c1b --state=pending
    gcli issue:list octocat hello-world --auto-pagination --format=csv

Responses are rendered as tables, JSON, CSV, or plain text, and multi-page
collections can be fetched transparently with ``--auto-pagination``.

Modules:
    app: Typer application and CLI entry point.
    config: Layered configuration (defaults < config files < CLI flags).
    params: Maps CLI arguments and flags onto API call parameters.
    registry: The static table of ``group verb`` commands.
    router: Resolves an invocation and calls the remote API.
    render: Renders single records, collections, and paginated streams.
    usage: Usage banners and command listings.
    output: stdout/stderr terminal layer with Rich support.
"""

__version__ = "0.9.0"
