"""pull command.

Local changes get in the way of a pull, so the user picks what to do with
them first. A stash taken here is offered back once the pull has finished.
"""

from __future__ import annotations

import click
from rich.markup import escape

from gitflow_core.errors import GitError

from gitflow_cli.commands.status import tracking_line
from gitflow_cli.context import AppContext
from gitflow_cli.output import cancelled, console, success, warn

_STASH_MESSAGE = "gitflow: auto-stash before pull"


@click.command("pull")
@click.argument("remote", default="origin")
@click.argument("branch", required=False)
@click.option("-r", "--rebase", is_flag=True, help="Rebase instead of merge.")
@click.pass_obj
def pull_cmd(app: AppContext, remote: str, branch: str | None, rebase: bool):
    """Pull changes from a remote."""
    repo = app.require_repository()
    status = repo.status()
    stashed = False

    local_changes = status.staged + status.modified + status.conflicted
    if local_changes:
        console.print("[yellow]You have local changes:[/yellow]")
        for path in local_changes:
            console.print(f"  {escape(path)}")

        action = app.prompter.choose(
            "What would you like to do? (stash, commit, discard, cancel)",
            ["stash", "commit", "discard", "cancel"],
            default="stash",
        )
        if action == "cancel":
            cancelled("Pull")
            return
        if action == "commit":
            warn("Commit your changes first: gitflow commit")
            return
        if action == "discard":
            if not app.prompter.confirm("Discard all local changes?", default=False):
                cancelled("Pull")
                return
            repo.reset("HEAD", mode="hard")
            success("Local changes discarded")
        else:
            repo.stash(_STASH_MESSAGE)
            stashed = True
            success("Changes stashed")

    try:
        repo.pull(remote, branch, rebase=rebase)
    except GitError:
        if stashed:
            warn("Your local changes are still stashed. Restore them with: git stash pop")
        raise

    success(f"Pulled from {remote}" + (" (rebase)" if rebase else ""))
    console.print(f"[dim]{escape(tracking_line(repo.status()))}[/dim]")

    if stashed and app.prompter.confirm("Restore stashed changes?", default=True):
        try:
            repo.stash_pop()
        except GitError:
            warn("Restoring the stash failed; the stash entry was kept (git stash list).")
            raise
        success("Stashed changes restored")
