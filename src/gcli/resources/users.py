"""User commands: users, emails, followers and authorizations."""

from __future__ import annotations

from gcli.resources.base import command, opt

GROUPS = {
    "user": "Leverage Users API",
    "email": "Leverage Emails API",
    "follower": "Leverage Followers API",
    "auth": "Leverage Authorizations API",
}

_AUTH_OPTIONS = (
    opt("scopes", "array", "Comma separated scopes that this authorization is in.",
        banner="user,public_repo,repo"),
    opt("note", description="A note to remind you what the OAuth token is for."),
    opt("note_url", description="A URL to remind you what the OAuth token is for."),
)

COMMANDS = [
    # user
    command("user", "list", "List all users", "GET", "/users",
            options=(opt("since", "int", "The integer id of the last user seen."),),
            paginated=True),
    command("user", "get", "Get a single user", "GET", "/users/{user}", args=("user",)),
    command("user", "me", "Get the authenticated user", "GET", "/user"),
    command("user", "update", "Update the authenticated user", "PATCH", "/user",
            options=(
                opt("name", description="The new name of the user."),
                opt("email", description="Publicly visible email address."),
                opt("blog", description="The new blog URL of the user."),
                opt("company", description="The new company of the user."),
                opt("location", description="The new location of the user."),
                opt("hireable", "bool", "The new hiring availability of the user."),
                opt("bio", description="The new short biography of the user."),
            )),

    # email
    command("email", "list", "List email addresses for the authenticated user", "GET",
            "/user/emails", paginated=True),
    command("email", "add", "Add email addresses", "POST", "/user/emails",
            options=(opt("emails", "array", "Comma separated email addresses."),)),
    command("email", "delete", "Delete email addresses", "DELETE", "/user/emails",
            options=(opt("emails", "array", "Comma separated email addresses."),)),

    # follower
    command("follower", "list", "List a user's followers", "GET",
            "/users/{user}/followers", args=("user",), paginated=True),
    command("follower", "mine", "List the authenticated user's followers", "GET",
            "/user/followers", paginated=True),
    command("follower", "following", "List who a user is following", "GET",
            "/users/{user}/following", args=("user",), paginated=True),
    command("follower", "follower", "Check if you are following a user", "GET",
            "/user/following/{user}", args=("user",)),
    command("follower", "follow", "Follow a user", "PUT",
            "/user/following/{user}", args=("user",)),
    command("follower", "unfollow", "Unfollow a user", "DELETE",
            "/user/following/{user}", args=("user",)),

    # auth
    command("auth", "list", "List your authorizations", "GET",
            "/authorizations", paginated=True),
    command("auth", "get", "Get a single authorization", "GET",
            "/authorizations/{id}", args=("id:int",)),
    command("auth", "create", "Create a new authorization", "POST", "/authorizations",
            options=_AUTH_OPTIONS),
    command("auth", "update", "Update an existing authorization", "PATCH",
            "/authorizations/{id}", args=("id:int",),
            options=(
                *_AUTH_OPTIONS,
                opt("add_scopes", "array", "Scopes to add to this authorization."),
                opt("remove_scopes", "array", "Scopes to remove from this authorization."),
            )),
    command("auth", "delete", "Delete an authorization", "DELETE",
            "/authorizations/{id}", args=("id:int",)),
]
