"""Git data commands: blobs, references, tags and trees."""

from __future__ import annotations

from gcli.resources.base import command, opt

GROUPS = {
    "blob": "Leverage Blobs API",
    "ref": "Leverage References API",
    "tag": "Leverage Tags API",
    "tree": "Leverage Trees API",
}

COMMANDS = [
    # blob
    command("blob", "get", "Get a blob", "GET",
            "/repos/{user}/{repo}/git/blobs/{sha}", args=("user", "repo", "sha")),
    command("blob", "create", "Create a blob", "POST",
            "/repos/{user}/{repo}/git/blobs", args=("user", "repo"),
            options=(
                opt("content", description="The new blob's content."),
                opt("encoding", description="Content encoding: utf-8 or base64.",
                    default="utf-8", always=True),
            )),

    # ref
    command("ref", "list", "List all references", "GET",
            "/repos/{user}/{repo}/git/refs", args=("user", "repo"),
            options=(opt("ref", description="Restrict listing to a namespace, e.g. tags."),),
            paginated=True),
    command("ref", "get", "Get a reference", "GET",
            "/repos/{user}/{repo}/git/refs/{ref}", args=("user", "repo", "ref")),
    command("ref", "create", "Create a reference", "POST",
            "/repos/{user}/{repo}/git/refs", args=("user", "repo"),
            options=(
                opt("ref", description="The name of the fully qualified reference, e.g. refs/heads/master."),
                opt("sha", description="The SHA1 value to set this reference to."),
            )),
    command("ref", "update", "Update a reference", "PATCH",
            "/repos/{user}/{repo}/git/refs/{ref}", args=("user", "repo", "ref"),
            options=(
                opt("sha", description="The SHA1 value to set this reference to."),
                opt("force", "bool", "Force the update even if it is not a fast-forward.",
                    aliases=("f",), default=False, always=True),
            )),
    command("ref", "delete", "Delete a reference", "DELETE",
            "/repos/{user}/{repo}/git/refs/{ref}", args=("user", "repo", "ref")),

    # tag
    command("tag", "get", "Get a tag", "GET",
            "/repos/{user}/{repo}/git/tags/{sha}", args=("user", "repo", "sha")),
    command("tag", "create", "Create a tag object", "POST",
            "/repos/{user}/{repo}/git/tags", args=("user", "repo"),
            options=(
                opt("tag", description="The tag name."),
                opt("message", description="The tag message."),
                opt("object", description="The SHA of the git object this is tagging."),
                opt("type", description="The type of the object: commit, tree or blob."),
                opt("tagger", "hash", "Tagger as name:<name>,email:<email>,date:<iso8601>."),
            )),

    # tree
    command("tree", "get", "Get a tree", "GET",
            "/repos/{user}/{repo}/git/trees/{sha}", args=("user", "repo", "sha"),
            options=(opt("recursive", "bool", "Get the tree recursively."),)),
    command("tree", "create", "Create a tree", "POST",
            "/repos/{user}/{repo}/git/trees", args=("user", "repo"),
            options=(
                opt("base_tree", description="The SHA1 of the tree to build on."),
                opt("tree", "hash", "Tree entry as a JSON object."),
            )),
]
