"""ai commands: AI-assisted commit, code review and repository summary."""

from __future__ import annotations

import logging

import click
from rich.markup import escape
from rich.table import Table

from gitflow_core.errors import GitflowError

from gitflow_cli.commands.status import tracking_line
from gitflow_cli.context import AppContext
from gitflow_cli.output import cancelled, console, success, warn

logger = logging.getLogger(__name__)

_SUMMARY_COMMITS = 10


@click.group("ai", invoke_without_command=True)
@click.pass_context
def ai_cmd(ctx: click.Context):
    """AI-powered helpers (default: commit)."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(ai_commit_cmd)


@ai_cmd.command("commit")
@click.pass_obj
def ai_commit_cmd(app: AppContext):
    """Stage everything and commit with a generated message."""
    repo = app.require_repository()
    diff = repo.diff(cached=True) + repo.diff()
    if not diff.strip():
        warn("No changes to analyze")
        return

    result = app.generator().commit_message(diff)
    console.print("\n[bold cyan]Suggested commit message:[/bold cyan]")
    console.print(f"  {escape(result.content)}\n")

    if not app.prompter.confirm("Create commit with this message?", default=True):
        cancelled("Commit")
        return

    repo.add_all()
    sha = repo.commit(result.content)
    success(f"Commit created: {sha[:7]}")


@ai_cmd.command("review")
@click.option("-f", "--file", "path", default=None, help="Review changes to one file.")
@click.option("--diff", "working", is_flag=True, help="Review unstaged changes instead of staged ones.")
@click.pass_obj
def ai_review_cmd(app: AppContext, path: str | None, working: bool):
    """Review staged changes (or a file, or the working tree diff)."""
    repo = app.require_repository()

    if path:
        diff = repo.diff([path])
    elif working:
        diff = repo.diff()
    else:
        diff = repo.diff(cached=True)

    if not diff.strip():
        warn("No changes to review")
        return

    result = app.generator().review(diff)
    console.print("\n[bold cyan]Code review[/bold cyan]\n")
    console.print(escape(result.content))

    if result.suggestions:
        console.print("\n[bold]Suggestions:[/bold]")
        for i, suggestion in enumerate(result.suggestions, 1):
            console.print(f"  {i}. {escape(suggestion)}")


@ai_cmd.command("summary")
@click.pass_obj
def ai_summary_cmd(app: AppContext):
    """Summarise recent activity in the repository."""
    repo = app.require_repository()
    status = repo.status()
    commits = repo.log(limit=_SUMMARY_COMMITS)
    branches = repo.branches(default=repo.default_branch(app.config.default_branch))

    console.print("\n[bold cyan]Repository summary[/bold cyan]\n")
    console.print(f"[bold]Branch:[/bold] {escape(status.current)}  [dim]{escape(tracking_line(status))}[/dim]")
    console.print(f"[bold]Branches:[/bold] {len(branches)}")
    console.print(
        f"[bold]Changes:[/bold] {len(status.staged)} staged, {len(status.modified)} modified, "
        f"{len(status.conflicted)} conflicted, {len(status.untracked)} untracked"
    )

    if not commits:
        warn("No commits yet")
        return

    table = Table(title="Recent commits", show_header=True, header_style="bold cyan")
    table.add_column("SHA", width=8)
    table.add_column("Message", max_width=60)
    table.add_column("Author")
    table.add_column("Date", width=16)
    for c in commits:
        table.add_row(
            c.sha[:7],
            escape(c.summary),
            escape(c.author),
            c.date.strftime("%Y-%m-%d %H:%M") if c.date else "",
        )
    console.print(table)

    history = "\n".join(f"- {c.summary} ({c.author})" for c in commits)
    try:
        insights = app.generator().pr_description("Recent repository activity", history)
    except GitflowError as e:
        # Insights are optional.
        logger.debug("AI insights unavailable", exc_info=True)
        warn(f"AI insights unavailable: {e}")
        return

    console.print("\n[bold cyan]AI insights[/bold cyan]\n")
    console.print(escape(insights.content))
