"""commit command: record staged changes, optionally with an AI-written message."""

from __future__ import annotations

import click
from rich.markup import escape

from gitflow_cli.context import AppContext
from gitflow_cli.output import console, success, warn


def propose_commit_message(app: AppContext, diff: str) -> str:
    """Generate a message for diff and let the user accept or replace it."""
    result = app.generator().commit_message(diff)
    console.print("\n[bold cyan]Suggested commit message:[/bold cyan]")
    console.print(f"  {escape(result.content)}\n")
    if app.prompter.confirm("Use this commit message?", default=True):
        return result.content
    return app.prompter.text("Commit message", default=result.content)


@click.command("commit")
@click.option("-m", "--message", default=None, help="Commit message.")
@click.option("-a", "--all", "stage_all", is_flag=True, help="Stage all changes before committing.")
@click.option("--amend", is_flag=True, help="Amend the previous commit.")
@click.option("--allow-empty", is_flag=True, help="Allow a commit with no changes.")
@click.option("--ai", "use_ai", is_flag=True, help="Generate the commit message from the diff.")
@click.pass_obj
def commit_cmd(app: AppContext, message: str | None, stage_all: bool, amend: bool, allow_empty: bool, use_ai: bool):
    """Create a commit.

    With --ai and no --message, the staged diff (plus unstaged changes when
    --all is given) is sent to the configured AI provider and the suggested
    message is shown for confirmation before anything is staged or committed.
    """
    repo = app.require_repository()

    if message is None and use_ai:
        diff = repo.diff(cached=True)
        if stage_all:
            diff += repo.diff()
        if not diff.strip():
            warn("No changes to commit")
            return
        message = propose_commit_message(app, diff)
    elif message is None and not amend:
        message = app.prompter.text("Commit message")

    if stage_all:
        repo.add_all()

    sha = repo.commit(message or "", allow_empty=allow_empty, amend=amend)
    success(f"Commit created: {sha[:7]}")
    if message:
        console.print(f"[dim]{escape(message)}[/dim]")
