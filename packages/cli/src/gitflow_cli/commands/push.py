"""push command."""

from __future__ import annotations

import click

from gitflow_cli.context import AppContext
from gitflow_cli.output import cancelled, info, success


@click.command("push")
@click.argument("remote", default="origin")
@click.argument("branch", required=False)
@click.option("-f", "--force", is_flag=True, help="Force push (asks for confirmation).")
@click.option("-u", "--set-upstream", is_flag=True, help="Set the upstream for the branch.")
@click.pass_obj
def push_cmd(app: AppContext, remote: str, branch: str | None, force: bool, set_upstream: bool):
    """Push the current (or given) branch to a remote."""
    repo = app.require_repository()
    branch = branch or repo.current_branch()

    if repo.remote_url(remote) is None:
        if not app.prompter.confirm(f"Remote '{remote}' not found. Would you like to add it?", default=True):
            cancelled("Push")
            return
        url = app.prompter.text("Remote URL")
        repo.add_remote(remote, url)
        success(f"Added remote {remote}")

    if force and not app.prompter.confirm(
        "Force push can overwrite remote changes. Are you sure?", default=False
    ):
        cancelled("Push")
        return

    repo.push(remote, branch, force=force, set_upstream=set_upstream)
    success(f"Pushed {branch} to {remote}")

    status = repo.status()
    if status.tracking and not status.ahead:
        info("Branch is up to date with remote")
