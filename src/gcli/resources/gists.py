"""Gist and search commands."""

from __future__ import annotations

from gcli.resources.base import command, opt

GROUPS = {
    "gist": "Leverage Gists API",
    "search": "Leverage Search API",
}

_SEARCH_OPTIONS = (
    opt("sort", description="The sort field; depends on the searched resource."),
    opt("order", description="The sort order: asc or desc."),
)

_TEXT_MATCH = "application/vnd.github.text-match+json"

COMMANDS = [
    # gist
    command("gist", "list", "List the authenticated user's gists", "GET", "/gists",
            options=(opt("since", description="Only gists updated after this ISO 8601 time."),),
            paginated=True),
    command("gist", "list_user", "List a user's gists", "GET",
            "/users/{user}/gists", args=("user",), paginated=True),
    command("gist", "public", "List public gists", "GET", "/gists/public", paginated=True),
    command("gist", "starred", "List starred gists", "GET", "/gists/starred", paginated=True),
    command("gist", "get", "Get a single gist", "GET", "/gists/{id}", args=("id",)),
    command("gist", "create", "Create a gist", "POST", "/gists",
            options=(
                opt("description", description="Description of the gist."),
                opt("public", "bool", "Whether the gist is public.", default=False, always=True),
                opt("files", "hash", "Files as a JSON object of filename to {\"content\": ...}."),
            )),
    command("gist", "edit", "Edit a gist", "PATCH", "/gists/{id}", args=("id",),
            options=(
                opt("description", description="Description of the gist."),
                opt("files", "hash", "Files as a JSON object of filename to {\"content\": ...}."),
            )),
    command("gist", "star", "Star a gist", "PUT", "/gists/{id}/star", args=("id",)),
    command("gist", "unstar", "Unstar a gist", "DELETE", "/gists/{id}/star", args=("id",)),
    command("gist", "check_star", "Check if a gist is starred", "GET",
            "/gists/{id}/star", args=("id",), hidden=True),
    command("gist", "fork", "Fork a gist", "POST", "/gists/{id}/forks", args=("id",)),
    command("gist", "delete", "Delete a gist", "DELETE", "/gists/{id}", args=("id",)),

    # search
    command("search", "repo", "Search repositories", "GET", "/search/repositories",
            args=("q",), query=("q",), options=_SEARCH_OPTIONS,
            paginated=True, items_key="items"),
    command("search", "code", "Search code", "GET", "/search/code",
            args=("q",), query=("q",), options=_SEARCH_OPTIONS,
            paginated=True, items_key="items", accept=_TEXT_MATCH),
    command("search", "issue", "Search issues and pull requests", "GET", "/search/issues",
            args=("q",), query=("q",), options=_SEARCH_OPTIONS,
            paginated=True, items_key="items"),
    command("search", "user", "Search users", "GET", "/search/users",
            args=("q",), query=("q",), options=_SEARCH_OPTIONS,
            paginated=True, items_key="items"),
    command("search", "commit", "Search commits", "GET", "/search/commits",
            args=("q",), query=("q",), options=_SEARCH_OPTIONS,
            paginated=True, items_key="items"),
]
