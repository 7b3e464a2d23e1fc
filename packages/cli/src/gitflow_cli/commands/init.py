"""init command: create a local repository and, optionally, its GitHub twin."""

from __future__ import annotations

import click
from rich.markup import escape

from gitflow_cli.context import AppContext
from gitflow_cli.output import console, success, warn


@click.command("init")
@click.option("-n", "--name", default=None, help="Repository name (defaults to the directory name).")
@click.option("-d", "--description", default=None, help="Repository description.")
@click.option("-p", "--private", is_flag=True, help="Create a private GitHub repository.")
@click.option("-r", "--remote", is_flag=True, help="Also create the repository on GitHub.")
@click.option("--local/--no-local", default=True, show_default=True, help="Initialise a local repository.")
@click.pass_obj
def init_cmd(app: AppContext, name: str | None, description: str | None, private: bool, remote: bool, local: bool):
    """Initialise a new repository."""
    repo = app.repo

    if local:
        if repo.is_repository():
            warn("Git repository already exists here")
        else:
            repo.init(initial_branch=app.config.default_branch)
            success(f"Initialised git repository in {repo.path}")

    if not remote:
        if local:
            _print_next_steps(remote=False)
        return

    name = name or app.prompter.text("Repository name", default=repo.path.name)
    snapshot = app.github.create_repository(
        name,
        description=description,
        private=private,
        auto_init=not local,
    )
    success(f"Created GitHub repository {snapshot.full_name}")
    console.print(f"[dim]{escape(snapshot.url)}[/dim]")

    if local:
        if repo.remote_url("origin") is None:
            repo.add_remote("origin", f"{snapshot.url}.git")
            success("Added remote origin")
        else:
            warn("Remote origin already exists; left unchanged")

    _print_next_steps(remote=True)


def _print_next_steps(remote: bool) -> None:
    console.print("\n[bold]Next steps:[/bold]")
    console.print("  1. Add some files")
    console.print("  2. gitflow commit -a -m \"Initial commit\"")
    if remote:
        console.print("  3. gitflow push --set-upstream")
