"""clone command."""

from __future__ import annotations

import click
from rich.markup import escape

from gitflow_core.gh.remote import expand_clone_url
from gitflow_core.git.repository import GitRepository, clone_dir_name

from gitflow_cli.context import AppContext
from gitflow_cli.output import cancelled, console, success


@click.command("clone")
@click.argument("url")
@click.option("-d", "--directory", default=None, help="Target directory.")
@click.option("-b", "--branch", default=None, help="Branch to check out.")
@click.option("--depth", type=int, default=None, help="Create a shallow clone with this many commits.")
@click.pass_obj
def clone_cmd(app: AppContext, url: str, directory: str | None, branch: str | None, depth: int | None):
    """Clone a repository. URL may be a full URL or owner/repo."""
    repo_url = expand_clone_url(url)
    target = app.repo.path / (directory or clone_dir_name(repo_url))

    if target.exists() and not app.prompter.confirm(
        f"Directory {target.name} already exists. Continue?", default=False
    ):
        cancelled("Clone")
        return

    cloned = GitRepository.clone(repo_url, target=target, branch=branch, depth=depth, cwd=app.repo.path)
    success(f"Cloned {repo_url}")
    console.print(f"[dim]Location: {escape(str(cloned.path))}[/dim]")
    console.print(f"[dim]Branch: {escape(cloned.current_branch())}[/dim]")
    console.print(f"\n[bold]Next:[/bold] cd {escape(target.name)}")
