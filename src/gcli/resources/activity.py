"""Activity commands: events, notifications, starring and watching."""

from __future__ import annotations

from gcli.resources.base import command, opt

GROUPS = {
    "event": "Leverage Events API",
    "notify": "Leverage Notifications API",
    "star": "Leverage Starring API",
    "watch": "Leverage Watching API",
}

_REPO = ("user", "repo")

COMMANDS = [
    # event
    command("event", "public", "List public events", "GET", "/events", paginated=True),
    command("event", "repository", "List repository events", "GET",
            "/repos/{user}/{repo}/events", args=_REPO, paginated=True),
    command("event", "issue", "List issue events for a repository", "GET",
            "/repos/{user}/{repo}/issues/events", args=_REPO, paginated=True),
    command("event", "network", "List public events for a network of repositories", "GET",
            "/networks/{user}/{repo}/events", args=_REPO, paginated=True),
    command("event", "org", "List public events for an organization", "GET",
            "/orgs/{org}/events", args=("org",), paginated=True),
    command("event", "received", "List events that a user has received", "GET",
            "/users/{user}/received_events", args=("user",), paginated=True),
    command("event", "performed", "List events performed by a user", "GET",
            "/users/{user}/events", args=("user",), paginated=True),

    # notify
    command("notify", "list", "List your notifications", "GET", "/notifications",
            options=(
                opt("all", "bool", "Show notifications marked as read."),
                opt("participating", "bool",
                    "Show only notifications in which you are directly participating."),
                opt("since", description="Only notifications updated after this ISO 8601 time."),
            ),
            paginated=True),
    command("notify", "list_repo", "List your notifications in a repository", "GET",
            "/repos/{user}/{repo}/notifications", args=_REPO,
            options=(opt("all", "bool", "Show notifications marked as read."),),
            paginated=True),
    command("notify", "get", "View a single thread", "GET",
            "/notifications/threads/{id}", args=("id:int",)),
    command("notify", "mark", "Mark notifications as read", "PUT", "/notifications",
            options=(opt("last_read_at", description="Mark notifications updated before this time."),)),
    command("notify", "subscription", "Get a thread subscription", "GET",
            "/notifications/threads/{id}/subscription", args=("id:int",)),
    command("notify", "subscribe", "Set a thread subscription", "PUT",
            "/notifications/threads/{id}/subscription", args=("id:int",),
            options=(
                opt("subscribed", "bool", "Receive notifications from this thread."),
                opt("ignored", "bool", "Block all notifications from this thread."),
            )),
    command("notify", "delete", "Delete a thread subscription", "DELETE",
            "/notifications/threads/{id}/subscription", args=("id:int",)),

    # star
    command("star", "list", "List stargazers", "GET",
            "/repos/{user}/{repo}/stargazers", args=_REPO, paginated=True),
    command("star", "starred", "List repositories being starred by a user", "GET",
            "/users/{user}/starred", args=("user",),
            options=(
                opt("sort", description="Can be one of created or updated."),
                opt("direction", description="Can be one of asc or desc."),
            ),
            paginated=True),
    command("star", "starring", "Check if you are starring a repository", "GET",
            "/user/starred/{user}/{repo}", args=_REPO),
    command("star", "start", "Star a repository", "PUT",
            "/user/starred/{user}/{repo}", args=_REPO),
    command("star", "stop", "Unstar a repository", "DELETE",
            "/user/starred/{user}/{repo}", args=_REPO),

    # watch
    command("watch", "list", "List watchers", "GET",
            "/repos/{user}/{repo}/subscribers", args=_REPO, paginated=True),
    command("watch", "watched", "List repositories being watched by a user", "GET",
            "/users/{user}/subscriptions", args=("user",), paginated=True),
    command("watch", "watching", "Get a repository subscription", "GET",
            "/repos/{user}/{repo}/subscription", args=_REPO),
    command("watch", "start", "Watch a repository", "PUT",
            "/repos/{user}/{repo}/subscription", args=_REPO,
            options=(
                opt("subscribed", "bool", "Receive notifications from this repository.",
                    default=True, always=True),
                opt("ignored", "bool", "Ignore all notifications from this repository."),
            )),
    command("watch", "stop", "Stop watching a repository", "DELETE",
            "/repos/{user}/{repo}/subscription", args=_REPO),
]
