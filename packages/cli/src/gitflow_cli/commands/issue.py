"""issue commands: list, create and show issues on the origin repository."""

from __future__ import annotations

import click
from rich.markup import escape
from rich.table import Table

from gitflow_core.gh.client import LIST_STATES

from gitflow_cli.context import AppContext
from gitflow_cli.output import console, success, warn


def _split_csv(value: str | None) -> list[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


@click.group("issue", invoke_without_command=True)
@click.pass_context
def issue_cmd(ctx: click.Context):
    """Manage issues (default: list)."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(issue_list_cmd)


def _issue_table(issues, title: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("#", style="bold", width=6)
    table.add_column("Title", max_width=50)
    table.add_column("Author")
    table.add_column("Labels", style="dim")
    table.add_column("State")
    for issue in issues:
        style = "green" if issue.state == "open" else "red"
        table.add_row(
            f"#{issue.number}",
            escape(issue.title),
            escape(issue.author),
            escape(", ".join(issue.labels)),
            f"[{style}]{issue.state}[/{style}]",
        )
    return table


def _select_issue(app: AppContext, owner: str, repo: str) -> int | None:
    issues = app.github.get_issues(owner, repo, state="open")
    if not issues:
        warn("No open issues found")
        return None
    console.print(_issue_table(issues, f"Open issues: {owner}/{repo}"))
    return int(app.prompter.choose("Issue number", [str(issue.number) for issue in issues]))


@issue_cmd.command("list")
@click.option("-s", "--state", type=click.Choice(LIST_STATES), default="open", show_default=True)
@click.option("--limit", default=30, show_default=True, help="Maximum number of issues to show.")
@click.pass_obj
def issue_list_cmd(app: AppContext, state: str, limit: int):
    """List issues. Pull requests are not included."""
    owner, repo = app.require_github_slug()
    issues = app.github.get_issues(owner, repo, state=state, limit=limit)
    if not issues:
        warn(f"No {state} issues found")
        return

    console.print(_issue_table(issues, f"Issues: {owner}/{repo}"))


@issue_cmd.command("create")
@click.option("-t", "--title", default=None, help="Issue title.")
@click.option("-b", "--body", default=None, help="Issue description.")
@click.option("-l", "--labels", default=None, help="Comma-separated labels.")
@click.option("-a", "--assignees", default=None, help="Comma-separated assignee logins.")
@click.option("--ai", "use_ai", is_flag=True, help="Generate the title from the description.")
@click.pass_obj
def issue_create_cmd(
    app: AppContext,
    title: str | None,
    body: str | None,
    labels: str | None,
    assignees: str | None,
    use_ai: bool,
):
    """Create an issue.

    With --ai and no --title, the description is written first and the title
    is generated from it.
    """
    owner, repo = app.require_github_slug()

    if title is None and use_ai:
        if body is None:
            body = app.prompter.text("Describe the issue")
        result = app.generator().issue_title(body)
        console.print(f"\n[bold cyan]Suggested title:[/bold cyan] {escape(result.content)}")
        if app.prompter.confirm("Use this title?", default=True):
            title = result.content
        else:
            title = app.prompter.text("Issue title")

    if title is None:
        title = app.prompter.text("Issue title")
    if body is None:
        body = app.prompter.text("Issue description", required=False)

    issue = app.github.create_issue(
        owner,
        repo,
        title,
        body,
        assignees=_split_csv(assignees),
        labels=_split_csv(labels),
    )
    success(f"Created issue #{issue.number}")
    console.print(escape(issue.url))


@issue_cmd.command("show")
@click.argument("number", type=int, required=False)
@click.option("-w", "--web", is_flag=True, help="Open the issue in a browser.")
@click.pass_obj
def issue_show_cmd(app: AppContext, number: int | None, web: bool):
    """Show one issue. Without NUMBER, pick one of the open issues."""
    owner, repo = app.require_github_slug()
    if number is None:
        number = _select_issue(app, owner, repo)
        if number is None:
            return

    issue = app.github.get_issue(owner, repo, number)

    style = "green" if issue.state == "open" else "red"
    console.print(f"\n[bold]#{issue.number} {escape(issue.title)}[/bold]  [{style}]{issue.state}[/{style}]")
    console.print(f"[dim]Opened by {escape(issue.author)}[/dim]")
    if issue.labels:
        console.print(f"Labels: {escape(', '.join(issue.labels))}")
    if issue.assignees:
        console.print(f"Assignees: {escape(', '.join(issue.assignees))}")
    if issue.body:
        console.print()
        console.print(escape(issue.body))
    console.print(f"\n{escape(issue.url)}")

    if web:
        click.launch(issue.url)
