"""Repository commands and the sub-resources hanging off a repository."""

from __future__ import annotations

from gcli.resources.base import command, opt

GROUPS = {
    "repo": "Leverage Repositories API",
    "fork": "Leverage Forks API",
    "collab": "Leverage Collaborators API",
    "hook": "Leverage Hooks API",
    "key": "Leverage Keys API",
    "content": "Leverage Contents API",
    "commit": "Leverage Commits API",
    "download": "Leverage Downloads API",
    "merge": "Leverage Merging API",
    "stat": "Leverage Statistics API",
    "status": "Leverage Statuses API",
}

_REPO = ("user", "repo")

_REPO_OPTIONS = (
    opt("description", description="A short description of the repository."),
    opt("homepage", description="A URL with more information about the repository."),
    opt("private", "bool", "Make the repository private."),
    opt("has_issues", "bool", "Enable issues for this repository."),
    opt("has_wiki", "bool", "Enable the wiki for this repository."),
    opt("has_downloads", "bool", "Enable downloads for this repository."),
)

_HOOK_OPTIONS = (
    opt("name", description="The name of the service being called, e.g. web."),
    opt("config", "hash", "Key/value pairs of hook settings, e.g. url:http://ci.example.com."),
    opt("events", "array", "Comma separated events the hook is triggered for."),
    opt("active", "bool", "Whether notifications are sent when the hook is triggered."),
)

_CONTENT_WRITE = (
    opt("path", description="The content path."),
    opt("message", description="The commit message."),
    opt("content", description="The new file content, Base64 encoded."),
    opt("sha", description="The blob SHA of the file being replaced."),
    opt("branch", description="The branch name."),
)

COMMANDS = [
    # repo
    command("repo", "list", "List repositories", "GET", "/user/repos",
            options=(
                opt("visibility", description="Can be one of all, public or private."),
                opt("type", description="Can be one of all, owner, public, private, member."),
                opt("sort", description="Can be one of created, updated, pushed, full_name."),
                opt("direction", description="Can be one of asc or desc."),
            ),
            paginated=True),
    command("repo", "list_user", "List public repositories for a user", "GET",
            "/users/{user}/repos", args=("user",),
            options=(
                opt("type", description="Can be one of all, owner, member."),
                opt("sort", description="Can be one of created, updated, pushed, full_name."),
            ),
            paginated=True),
    command("repo", "list_org", "List repositories of an organization", "GET",
            "/orgs/{org}/repos", args=("org",),
            options=(opt("type", description="Can be one of all, public, private, forks, sources, member."),),
            paginated=True),
    command("repo", "get", "Get a repository", "GET", "/repos/{user}/{repo}", args=_REPO),
    command("repo", "create", "Create a new repository for the authenticated user", "POST",
            "/user/repos",
            options=(
                opt("name", description="The name of the repository."),
                *_REPO_OPTIONS,
                opt("auto_init", "bool", "Create an initial commit with an empty README."),
                opt("gitignore_template", description="Desired language or platform .gitignore template."),
            )),
    command("repo", "create_org", "Create a new repository in an organization", "POST",
            "/orgs/{org}/repos", args=("org",),
            options=(
                opt("name", description="The name of the repository."),
                *_REPO_OPTIONS,
                opt("team_id", "int", "The id of the team that will be granted access."),
            )),
    command("repo", "edit", "Edit a repository", "PATCH", "/repos/{user}/{repo}", args=_REPO,
            options=(
                opt("name", description="The name of the repository."),
                *_REPO_OPTIONS,
                opt("default_branch", description="Update the default branch."),
            )),
    command("repo", "delete", "Delete a repository", "DELETE",
            "/repos/{user}/{repo}", args=_REPO),
    command("repo", "branches", "List branches", "GET",
            "/repos/{user}/{repo}/branches", args=_REPO, paginated=True),
    command("repo", "branch", "Get a branch", "GET",
            "/repos/{user}/{repo}/branches/{branch}", args=("user", "repo", "branch")),
    command("repo", "contributors", "List contributors", "GET",
            "/repos/{user}/{repo}/contributors", args=_REPO,
            options=(opt("anon", "bool", "Include anonymous contributors."),),
            paginated=True),
    command("repo", "languages", "List languages", "GET",
            "/repos/{user}/{repo}/languages", args=_REPO),
    command("repo", "tags", "List tags", "GET",
            "/repos/{user}/{repo}/tags", args=_REPO, paginated=True),
    command("repo", "teams", "List teams", "GET",
            "/repos/{user}/{repo}/teams", args=_REPO, paginated=True),

    # fork
    command("fork", "list", "List forks", "GET", "/repos/{user}/{repo}/forks", args=_REPO,
            options=(opt("sort", description="Can be one of newest, oldest, stargazers."),),
            paginated=True),
    command("fork", "create", "Create a fork", "POST", "/repos/{user}/{repo}/forks", args=_REPO,
            options=(opt("organization", description="Organization login to fork into."),)),

    # collab
    command("collab", "list", "List collaborators", "GET",
            "/repos/{user}/{repo}/collaborators", args=_REPO, paginated=True),
    command("collab", "collaborator", "Check if a user is a collaborator", "GET",
            "/repos/{user}/{repo}/collaborators/{collab}", args=("user", "repo", "collab")),
    command("collab", "add", "Add a collaborator", "PUT",
            "/repos/{user}/{repo}/collaborators/{collab}", args=("user", "repo", "collab"),
            options=(opt("permission", description="Permission to grant: pull, push or admin."),)),
    command("collab", "remove", "Remove a collaborator", "DELETE",
            "/repos/{user}/{repo}/collaborators/{collab}", args=("user", "repo", "collab")),

    # hook
    command("hook", "list", "List hooks", "GET",
            "/repos/{user}/{repo}/hooks", args=_REPO, paginated=True),
    command("hook", "get", "Get a single hook", "GET",
            "/repos/{user}/{repo}/hooks/{id}", args=("user", "repo", "id:int")),
    command("hook", "create", "Create a hook", "POST",
            "/repos/{user}/{repo}/hooks", args=_REPO, options=_HOOK_OPTIONS),
    command("hook", "edit", "Edit a hook", "PATCH",
            "/repos/{user}/{repo}/hooks/{id}", args=("user", "repo", "id:int"),
            options=(
                *_HOOK_OPTIONS,
                opt("add_events", "array", "Events to add to the hook."),
                opt("remove_events", "array", "Events to remove from the hook."),
            )),
    command("hook", "test", "Test a push hook", "POST",
            "/repos/{user}/{repo}/hooks/{id}/tests", args=("user", "repo", "id:int")),
    command("hook", "ping", "Ping a hook", "POST",
            "/repos/{user}/{repo}/hooks/{id}/pings", args=("user", "repo", "id:int")),
    command("hook", "delete", "Delete a hook", "DELETE",
            "/repos/{user}/{repo}/hooks/{id}", args=("user", "repo", "id:int")),

    # key (deploy keys)
    command("key", "list", "List deploy keys", "GET",
            "/repos/{user}/{repo}/keys", args=_REPO, paginated=True),
    command("key", "get", "Get a deploy key", "GET",
            "/repos/{user}/{repo}/keys/{id}", args=("user", "repo", "id:int")),
    command("key", "create", "Create a deploy key", "POST",
            "/repos/{user}/{repo}/keys", args=_REPO,
            options=(
                opt("title", description="A name for the key."),
                opt("key", description="The contents of the public key."),
                opt("read_only", "bool", "Allow only read access."),
            )),
    command("key", "delete", "Delete a deploy key", "DELETE",
            "/repos/{user}/{repo}/keys/{id}", args=("user", "repo", "id:int")),

    # content
    command("content", "readme", "Get the README", "GET",
            "/repos/{user}/{repo}/readme", args=_REPO,
            options=(opt("ref", description="The name of the commit, branch or tag."),)),
    command("content", "get", "Get contents of a file or directory", "GET",
            "/repos/{user}/{repo}/contents/{path}", args=("user", "repo", "path"),
            options=(opt("ref", description="The name of the commit, branch or tag."),)),
    command("content", "create", "Create a file", "PUT",
            "/repos/{user}/{repo}/contents/{path}", args=("user", "repo", "path"),
            options=tuple(o for o in _CONTENT_WRITE if o.name != "path")),
    command("content", "update", "Update a file", "PUT",
            "/repos/{user}/{repo}/contents/{path}", args=("user", "repo", "path"),
            options=tuple(o for o in _CONTENT_WRITE if o.name != "path")),
    command("content", "delete", "Delete a file", "DELETE",
            "/repos/{user}/{repo}/contents/{path}", args=("user", "repo", "path"),
            options=(
                opt("message", description="The commit message."),
                opt("sha", description="The blob SHA of the file being removed."),
                opt("branch", description="The branch name."),
            )),

    # commit
    command("commit", "list", "List commits on a repository", "GET",
            "/repos/{user}/{repo}/commits", args=_REPO,
            options=(
                opt("sha", description="SHA or branch to start listing commits from."),
                opt("path", description="Only commits containing this file path."),
                opt("author", description="GitHub login or email address to filter by."),
                opt("since", description="Only commits after this ISO 8601 date."),
                opt("until", description="Only commits before this ISO 8601 date."),
            ),
            paginated=True),
    command("commit", "get", "Get a single commit", "GET",
            "/repos/{user}/{repo}/commits/{sha}", args=("user", "repo", "sha")),
    command("commit", "compare", "Compare two commits", "GET",
            "/repos/{user}/{repo}/compare/{base}...{head}", args=("user", "repo", "base", "head")),

    # download (deprecated upstream)
    command("download", "list", "List downloads for a repository", "GET",
            "/repos/{user}/{repo}/downloads", args=_REPO, paginated=True),
    command("download", "get", "Get a single download", "GET",
            "/repos/{user}/{repo}/downloads/{id}", args=("user", "repo", "id:int")),
    command("download", "create", "Create a new download resource", "POST",
            "/repos/{user}/{repo}/downloads", args=_REPO,
            options=(
                opt("name", description="Name of the file."),
                opt("size", "int", "Size of the file in bytes."),
                opt("description", description="Description of the file."),
                opt("content_type", description="Content type of the file."),
            ),
            hidden=True),
    command("download", "delete", "Delete a download", "DELETE",
            "/repos/{user}/{repo}/downloads/{id}", args=("user", "repo", "id:int")),

    # merge
    command("merge", "perform", "Perform a merge", "POST",
            "/repos/{user}/{repo}/merges", args=_REPO,
            options=(
                opt("base", description="The name of the base branch that the head will be merged into."),
                opt("head", description="The head to merge: a branch name or a commit SHA1."),
                opt("commit_message", description="Commit message to use for the merge commit."),
            )),

    # stat
    command("stat", "contributors", "Get contributors list with additions, deletions and commit counts",
            "GET", "/repos/{user}/{repo}/stats/contributors", args=_REPO),
    command("stat", "activity", "Get the last year of commit activity", "GET",
            "/repos/{user}/{repo}/stats/commit_activity", args=_REPO),
    command("stat", "frequency", "Get the number of additions and deletions per week", "GET",
            "/repos/{user}/{repo}/stats/code_frequency", args=_REPO),
    command("stat", "participation", "Get the weekly commit count", "GET",
            "/repos/{user}/{repo}/stats/participation", args=_REPO),
    command("stat", "card", "Get the number of commits per hour in each day", "GET",
            "/repos/{user}/{repo}/stats/punch_card", args=_REPO),

    # status
    command("status", "list", "List statuses for a specific ref", "GET",
            "/repos/{user}/{repo}/commits/{sha}/statuses", args=("user", "repo", "sha"),
            paginated=True),
    command("status", "create", "Create a status", "POST",
            "/repos/{user}/{repo}/statuses/{sha}", args=("user", "repo", "sha"),
            options=(
                opt("state", description="State of the status: pending, success, error or failure.",
                    banner="state"),
                opt("target", description="Target URL to associate with this status.",
                    banner="target", api_name="target_url"),
                opt("desc", description="Short description of the status.",
                    banner="description", api_name="description"),
                opt("context", description="A string label to differentiate this status."),
            )),
]
