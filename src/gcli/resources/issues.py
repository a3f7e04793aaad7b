"""Issue tracking commands: issues, labels, milestones, assignees and pull requests."""

from __future__ import annotations

from gcli.resources.base import command, opt

GROUPS = {
    "issue": "Leverage Issues API",
    "label": "Leverage Labels API",
    "milestone": "Leverage Milestones API",
    "assignee": "Leverage Assignees API",
    "pull": "Leverage Pull Requests API",
}

_REPO = ("user", "repo")
_ISSUE = ("user", "repo", "number:int")

_ISSUE_FILTERS = (
    opt("filter", description="Can be one of assigned, created, mentioned, subscribed, all."),
    opt("state", description="Can be one of open, closed, all."),
    opt("labels", description="Comma separated list of label names."),
    opt("sort", description="Can be one of created, updated, comments."),
    opt("direction", description="Can be one of asc or desc."),
    opt("since", description="Only issues updated at or after this ISO 8601 time."),
)

_ISSUE_FIELDS = (
    opt("title", description="The title of the issue."),
    opt("body", description="The contents of the issue."),
    opt("assignee", description="Login of the user to assign the issue to."),
    opt("milestone", "int", "Milestone number to associate this issue with."),
    opt("labels", "array", "Comma separated labels to associate with this issue."),
)

COMMANDS = [
    # issue
    command("issue", "list", "List issues assigned to the authenticated user", "GET",
            "/issues", options=_ISSUE_FILTERS, paginated=True),
    command("issue", "list_repo", "List issues for a repository", "GET",
            "/repos/{user}/{repo}/issues", args=_REPO,
            options=(
                *_ISSUE_FILTERS,
                opt("milestone", description="Milestone number, none or *."),
                opt("assignee", description="Login, none or *."),
                opt("creator", description="The user that created the issue."),
                opt("mentioned", description="A user mentioned in the issue."),
            ),
            paginated=True),
    command("issue", "list_org", "List issues for an organization", "GET",
            "/orgs/{org}/issues", args=("org",), options=_ISSUE_FILTERS, paginated=True),
    command("issue", "get", "Get a single issue", "GET",
            "/repos/{user}/{repo}/issues/{number}", args=_ISSUE),
    command("issue", "create", "Create an issue", "POST",
            "/repos/{user}/{repo}/issues", args=_REPO, options=_ISSUE_FIELDS),
    command("issue", "edit", "Edit an issue", "PATCH",
            "/repos/{user}/{repo}/issues/{number}", args=_ISSUE,
            options=(*_ISSUE_FIELDS, opt("state", description="State of the issue: open or closed."))),
    command("issue", "lock", "Lock an issue", "PUT",
            "/repos/{user}/{repo}/issues/{number}/lock", args=_ISSUE),
    command("issue", "unlock", "Unlock an issue", "DELETE",
            "/repos/{user}/{repo}/issues/{number}/lock", args=_ISSUE),
    command("issue", "comments", "List comments on an issue", "GET",
            "/repos/{user}/{repo}/issues/{number}/comments", args=_ISSUE, paginated=True),
    command("issue", "comment", "Create a comment on an issue", "POST",
            "/repos/{user}/{repo}/issues/{number}/comments", args=_ISSUE,
            options=(opt("body", description="The contents of the comment."),)),

    # label
    command("label", "list", "List labels for a repository", "GET",
            "/repos/{user}/{repo}/labels", args=_REPO, paginated=True),
    command("label", "get", "Get a single label", "GET",
            "/repos/{user}/{repo}/labels/{name}", args=("user", "repo", "name")),
    command("label", "create", "Create a label", "POST",
            "/repos/{user}/{repo}/labels", args=_REPO,
            options=(
                opt("name", description="The name of the label."),
                opt("color", description="A 6 character hex code, without the leading #."),
                opt("description", description="A short description of the label."),
            )),
    command("label", "update", "Update a label", "PATCH",
            "/repos/{user}/{repo}/labels/{label}", args=("user", "repo", "label"),
            options=(
                opt("name", description="The new name of the label."),
                opt("color", description="A 6 character hex code, without the leading #."),
            )),
    command("label", "delete", "Delete a label", "DELETE",
            "/repos/{user}/{repo}/labels/{name}", args=("user", "repo", "name")),
    command("label", "issue", "List labels on an issue", "GET",
            "/repos/{user}/{repo}/issues/{number}/labels", args=_ISSUE),
    command("label", "add", "Add labels to an issue", "POST",
            "/repos/{user}/{repo}/issues/{number}/labels", args=_ISSUE,
            options=(opt("labels", "array", "Comma separated label names to add."),)),
    command("label", "remove", "Remove a label from an issue", "DELETE",
            "/repos/{user}/{repo}/issues/{number}/labels/{name}",
            args=("user", "repo", "number:int", "name")),
    command("label", "replace", "Replace all labels for an issue", "PUT",
            "/repos/{user}/{repo}/issues/{number}/labels", args=_ISSUE,
            options=(opt("labels", "array", "Comma separated label names."),)),
    command("label", "milestone", "Get labels for every issue in a milestone", "GET",
            "/repos/{user}/{repo}/milestones/{number}/labels", args=_ISSUE),

    # milestone
    command("milestone", "list", "List milestones for a repository", "GET",
            "/repos/{user}/{repo}/milestones", args=_REPO,
            options=(
                opt("state", description="Can be one of open, closed, all."),
                opt("sort", description="Can be one of due_on or completeness."),
                opt("direction", description="Can be one of asc or desc."),
            ),
            paginated=True),
    command("milestone", "get", "Get a single milestone", "GET",
            "/repos/{user}/{repo}/milestones/{number}", args=_ISSUE),
    command("milestone", "create", "Create a milestone", "POST",
            "/repos/{user}/{repo}/milestones", args=_REPO,
            options=(
                opt("title", description="The title of the milestone."),
                opt("state", description="The state of the milestone: open or closed."),
                opt("description", description="A description of the milestone."),
                opt("due_on", description="The milestone due date as an ISO 8601 timestamp."),
            )),
    command("milestone", "update", "Update a milestone", "PATCH",
            "/repos/{user}/{repo}/milestones/{number}", args=_ISSUE,
            options=(
                opt("title", description="The title of the milestone."),
                opt("state", description="The state of the milestone: open or closed."),
                opt("description", description="A description of the milestone."),
                opt("due_on", description="The milestone due date as an ISO 8601 timestamp."),
            )),
    command("milestone", "delete", "Delete a milestone", "DELETE",
            "/repos/{user}/{repo}/milestones/{number}", args=_ISSUE),

    # assignee
    command("assignee", "list", "List assignees", "GET",
            "/repos/{user}/{repo}/assignees", args=_REPO, paginated=True),
    command("assignee", "check", "Check if a user can be assigned issues", "GET",
            "/repos/{user}/{repo}/assignees/{assignee}", args=("user", "repo", "assignee")),

    # pull
    command("pull", "list", "List pull requests", "GET",
            "/repos/{user}/{repo}/pulls", args=_REPO,
            options=(
                opt("state", description="Can be one of open, closed, all."),
                opt("head", description="Filter by head user and branch, as user:ref-name."),
                opt("base", description="Filter by base branch name."),
                opt("sort", description="Can be one of created, updated, popularity, long-running."),
                opt("direction", description="Can be one of asc or desc."),
            ),
            paginated=True),
    command("pull", "get", "Get a single pull request", "GET",
            "/repos/{user}/{repo}/pulls/{number}", args=_ISSUE),
    command("pull", "create", "Create a pull request", "POST",
            "/repos/{user}/{repo}/pulls", args=_REPO,
            options=(
                opt("title", description="The title of the pull request."),
                opt("body", description="The contents of the pull request."),
                opt("head", description="The branch where your changes are implemented."),
                opt("base", description="The branch you want the changes pulled into."),
                opt("issue", "int", "Issue number to convert into a pull request."),
            )),
    command("pull", "update", "Update a pull request", "PATCH",
            "/repos/{user}/{repo}/pulls/{number}", args=_ISSUE,
            options=(
                opt("title", description="The title of the pull request."),
                opt("body", description="The contents of the pull request."),
                opt("state", description="State of this pull request: open or closed."),
                opt("base", description="The branch you want the changes pulled into."),
            )),
    command("pull", "commits", "List commits on a pull request", "GET",
            "/repos/{user}/{repo}/pulls/{number}/commits", args=_ISSUE, paginated=True),
    command("pull", "files", "List pull request files", "GET",
            "/repos/{user}/{repo}/pulls/{number}/files", args=_ISSUE, paginated=True),
    command("pull", "merged", "Check if a pull request has been merged", "GET",
            "/repos/{user}/{repo}/pulls/{number}/merge", args=_ISSUE),
    command("pull", "merge", "Merge a pull request", "PUT",
            "/repos/{user}/{repo}/pulls/{number}/merge", args=_ISSUE,
            options=(
                opt("commit_message", description="Extra detail to append to the merge commit message."),
                opt("sha", description="SHA that the pull request head must match to allow merge."),
                opt("merge_method", description="Merge method: merge, squash or rebase."),
            )),
]
