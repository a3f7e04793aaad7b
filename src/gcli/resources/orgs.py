"""Organization commands: organizations, members and teams."""

from __future__ import annotations

from gcli.resources.base import command, opt

GROUPS = {
    "org": "Leverage Organizations API",
    "member": "Leverage Members API",
    "team": "Leverage Teams API",
}

_TEAM = ("id:int",)
_TEAM_USER = ("id:int", "user")
_TEAM_REPO = ("id:int", "user", "repo")

COMMANDS = [
    # org
    command("org", "list", "List public organizations for a user", "GET",
            "/users/{user}/orgs", args=("user",), paginated=True),
    command("org", "get", "Get properties for an organization", "GET",
            "/orgs/{org}", args=("org",)),
    command("org", "edit", "Edit organization", "PATCH", "/orgs/{org}", args=("org",),
            options=(
                opt("billing_email", description="Billing email address."),
                opt("company", description="The company name."),
                opt("email", description="The publicly visible email address."),
                opt("location", description="The location."),
                opt("name", description="The shorthand name of the company."),
            )),

    # member
    command("member", "list", "List members of an organization", "GET",
            "/orgs/{org}/members", args=("org",),
            options=(
                opt("public", "bool", "List only public members."),
                opt("filter", description="Filter members: 2fa_disabled or all."),
            ),
            paginated=True),
    command("member", "member", "Check if a user is a member of an organization", "GET",
            "/orgs/{org}/members/{user}", args=("org", "user")),
    command("member", "publicize", "Publicize a user's membership", "PUT",
            "/orgs/{org}/public_members/{user}", args=("org", "user")),
    command("member", "conceal", "Conceal a user's membership", "DELETE",
            "/orgs/{org}/public_members/{user}", args=("org", "user")),
    command("member", "delete", "Remove a member from an organization", "DELETE",
            "/orgs/{org}/members/{user}", args=("org", "user")),

    # team
    command("team", "list", "List teams of an organization", "GET",
            "/orgs/{org}/teams", args=("org",), paginated=True),
    command("team", "get", "Get a team", "GET", "/teams/{id}", args=_TEAM),
    command("team", "create", "Create a team", "POST", "/orgs/{org}/teams", args=("org",),
            options=(
                opt("name", description="The name of the team."),
                opt("repo_names", "array", "Comma separated repositories to add the team to."),
                opt("permission", description="Permission to grant: pull, push or admin."),
                opt("privacy", description="Team visibility: secret or closed."),
            )),
    command("team", "edit", "Edit a team", "PATCH", "/teams/{id}", args=_TEAM,
            options=(
                opt("name", description="The name of the team."),
                opt("permission", description="Permission to grant: pull, push or admin."),
                opt("privacy", description="Team visibility: secret or closed."),
            )),
    command("team", "delete", "Delete a team", "DELETE", "/teams/{id}", args=_TEAM),
    command("team", "list_member", "List team members", "GET",
            "/teams/{id}/members", args=_TEAM,
            options=(opt("role", description="Filter by role: member, maintainer or all."),),
            paginated=True),
    command("team", "member", "Get team membership for a user", "GET",
            "/teams/{id}/memberships/{user}", args=_TEAM_USER),
    command("team", "add_member", "Add a team member", "PUT",
            "/teams/{id}/memberships/{user}", args=_TEAM_USER,
            options=(opt("role", description="Role in the team: member or maintainer."),)),
    command("team", "remove_member", "Remove a team member", "DELETE",
            "/teams/{id}/memberships/{user}", args=_TEAM_USER),
    command("team", "list_repo", "List team repositories", "GET",
            "/teams/{id}/repos", args=_TEAM, paginated=True),
    command("team", "repo", "Check if a team manages a repository", "GET",
            "/teams/{id}/repos/{user}/{repo}", args=_TEAM_REPO),
    command("team", "add_repo", "Add a team repository", "PUT",
            "/teams/{id}/repos/{user}/{repo}", args=_TEAM_REPO,
            options=(opt("permission", description="Permission to grant: pull, push or admin."),)),
    command("team", "remove_repo", "Remove a team repository", "DELETE",
            "/teams/{id}/repos/{user}/{repo}", args=_TEAM_REPO),
]
