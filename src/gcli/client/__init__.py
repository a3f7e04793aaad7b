"""Remote-API collaborator for gcli.

Provides :class:`GitHubClient`, a blocking client that wraps :mod:`httpx`
with token/basic auth, endpoint expansion, ``Link``-header pagination, and
retry with exponential backoff, and :class:`PaginatedCursor`, the page
iterator returned for collection endpoints.

Example::

    from gcli.client import GitHubClient

    with GitHubClient(token="ghp_...") as client:
        repo = client.invoke(endpoint, ["octocat", "hello-world"], {})
"""

from gcli.client.github import GitHubClient
from gcli.client.pagination import PaginatedCursor

__all__ = ["GitHubClient", "PaginatedCursor"]
