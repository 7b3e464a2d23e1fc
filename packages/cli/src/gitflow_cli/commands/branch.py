"""branch command: list, create, delete or switch branches."""

from __future__ import annotations

import click
from rich.markup import escape
from rich.table import Table

from gitflow_core.errors import PreconditionError

from gitflow_cli.commands.status import tracking_line
from gitflow_cli.context import AppContext
from gitflow_cli.output import cancelled, console, success


@click.command("branch")
@click.argument("name", required=False)
@click.option("-c", "--create", is_flag=True, help="Create NAME and switch to it.")
@click.option("-d", "--delete", is_flag=True, help="Delete NAME.")
@click.option("-D", "--force-delete", is_flag=True, help="Delete NAME even if unmerged.")
@click.option("-v", "--verbose", is_flag=True, help="Show tracking information.")
@click.pass_obj
def branch_cmd(app: AppContext, name: str | None, create: bool, delete: bool, force_delete: bool, verbose: bool):
    """List branches, or create/delete/switch to NAME."""
    repo = app.require_repository()

    if (create or delete or force_delete) and not name:
        raise click.UsageError("A branch name is required for --create and --delete.")

    if create:
        previous = repo.current_branch()
        repo.create_branch(name, checkout=True)
        success(f"Created and switched to branch {name}")
        console.print(f"[dim]From: {escape(previous)}[/dim]")
        return

    if delete or force_delete:
        if name == repo.current_branch():
            raise PreconditionError(f"Cannot delete the current branch '{name}'. Switch to another branch first.")
        if not app.prompter.confirm(f"Delete branch '{name}'?", default=False):
            cancelled("Delete")
            return
        repo.delete_branch(name, force=force_delete)
        success(f"Deleted branch {name}")
        return

    if name:
        if not repo.branch_exists(name):
            available = ", ".join(b.name for b in repo.branches()) or "none"
            raise PreconditionError(f"Branch '{name}' not found. Available branches: {available}")
        repo.checkout(name)
        success(f"Switched to branch {name}")
        return

    branches = repo.branches(default=repo.default_branch(app.config.default_branch))
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("", width=2)
    table.add_column("Branch")
    table.add_column("Last commit", style="dim")
    for b in branches:
        label = f"[green]{escape(b.name)}[/green]" if b.is_current else escape(b.name)
        if b.is_default:
            label += " [dim](default)[/dim]"
        table.add_row("*" if b.is_current else "", label, escape(b.last_commit or ""))
    console.print(table)

    if verbose:
        console.print(f"[dim]{escape(tracking_line(repo.status()))}[/dim]")
