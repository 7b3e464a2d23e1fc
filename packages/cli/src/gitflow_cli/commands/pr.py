"""pr commands: list, create, show and merge pull requests on the origin repository."""

from __future__ import annotations

import click
from rich.markup import escape
from rich.table import Table

from gitflow_core.errors import PreconditionError
from gitflow_core.gh.client import LIST_STATES, MERGE_METHODS
from gitflow_core.models import PullRequestRecord

from gitflow_cli.context import AppContext
from gitflow_cli.output import cancelled, console, success, warn
from gitflow_cli.params import merge_params, resolve_params

_STATE_STYLE = {"open": "green", "closed": "red", "merged": "magenta"}


def _pr_table(records: list[PullRequestRecord], title: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("#", style="bold", width=6)
    table.add_column("Title", max_width=50)
    table.add_column("Author")
    table.add_column("Branch")
    table.add_column("State")
    for pr in records:
        style = _STATE_STYLE.get(pr.state, "white")
        table.add_row(
            f"#{pr.number}",
            escape(pr.title),
            escape(pr.author),
            escape(f"{pr.head} → {pr.base}"),
            f"[{style}]{pr.state}[/{style}]",
        )
    return table


def _select_pr(app: AppContext, owner: str, repo: str) -> int | None:
    records = app.github.get_pull_requests(owner, repo, state="open")
    if not records:
        warn("No open pull requests found")
        return None
    console.print(_pr_table(records, f"Open pull requests: {owner}/{repo}"))
    return int(app.prompter.choose("Pull request number", [str(pr.number) for pr in records]))


@click.group("pr", invoke_without_command=True)
@click.pass_context
def pr_cmd(ctx: click.Context):
    """Manage pull requests (default: list)."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(pr_list_cmd)


@pr_cmd.command("list")
@click.option("-s", "--state", type=click.Choice(LIST_STATES), default="open", show_default=True)
@click.option("--limit", default=30, show_default=True, help="Maximum number of pull requests to show.")
@click.pass_obj
def pr_list_cmd(app: AppContext, state: str, limit: int):
    """List pull requests."""
    owner, repo = app.require_github_slug()
    records = app.github.get_pull_requests(owner, repo, state=state, limit=limit)
    if not records:
        warn(f"No {state} pull requests found")
        return
    console.print(_pr_table(records, f"Pull requests: {owner}/{repo}"))


@pr_cmd.command("create")
@click.option("-t", "--title", default=None, help="Pull request title.")
@click.option("-b", "--body", default=None, help="Pull request description.")
@click.option("-H", "--head", default=None, help="Branch with the changes (default: current branch).")
@click.option("-B", "--base", default=None, help="Branch to merge into (default: configured default_branch).")
@click.option("-d", "--draft", is_flag=True, help="Open as a draft.")
@click.option("--ai", "use_ai", is_flag=True, help="Generate the description from the diff.")
@click.option("--open/--no-open", "open_browser", default=None, help="Open the new pull request in a browser.")
@click.pass_obj
def pr_create_cmd(
    app: AppContext,
    title: str | None,
    body: str | None,
    head: str | None,
    base: str | None,
    draft: bool,
    use_ai: bool,
    open_browser: bool | None,
):
    """Create a pull request from HEAD into BASE."""
    owner, repo = app.require_github_slug()
    config = app.config

    params = merge_params(
        {"title": title, "head": head, "base": base, "open": open_browser},
        {"head": app.repo.current_branch(), "base": config.default_branch, "open": config.auto_open_pr},
    )
    if params["head"] == params["base"]:
        raise PreconditionError(
            f"Cannot create a pull request from '{params['head']}' into itself. "
            "Create a feature branch first: gitflow branch -c <name>"
        )

    params = resolve_params(params, {}, {"title": "Pull request title"}, app.prompter)

    if body is None and use_ai:
        body = _propose_description(app, params["title"], params["base"], params["head"])
        if body is None:
            return
    if body is None:
        body = app.prompter.text("Pull request description", required=False)

    pr = app.github.create_pull_request(
        owner, repo, params["title"], body, params["head"], params["base"], draft=draft
    )
    success(f"Created pull request #{pr.number}")
    console.print(f"[dim]{escape(pr.head)} → {escape(pr.base)}[/dim]")
    console.print(escape(pr.url))

    if params["open"]:
        click.launch(pr.url)


def _propose_description(app: AppContext, title: str, base: str, head: str) -> str | None:
    """Generate a description from the base...head diff; None when there is nothing to describe."""
    base_ref = base if app.repo.branch_exists(base) else f"origin/{base}"
    diff = app.repo.diff(revision=f"{base_ref}...{head}")
    if not diff.strip():
        warn(f"No changes between {base} and {head}")
        return None

    result = app.generator().pr_description(title, diff)
    console.print("\n[bold cyan]Suggested description:[/bold cyan]")
    console.print(escape(result.content))
    if app.prompter.confirm("\nUse this description?", default=True):
        return result.content
    return app.prompter.edit(result.content, editor=app.config.editor)


@pr_cmd.command("show")
@click.argument("number", type=int, required=False)
@click.option("-w", "--web", is_flag=True, help="Open the pull request in a browser.")
@click.pass_obj
def pr_show_cmd(app: AppContext, number: int | None, web: bool):
    """Show one pull request."""
    owner, repo = app.require_github_slug()
    if number is None:
        number = _select_pr(app, owner, repo)
        if number is None:
            return

    pr = app.github.get_pull_request(owner, repo, number)
    style = _STATE_STYLE.get(pr.state, "white")
    console.print(f"\n[bold]#{pr.number} {escape(pr.title)}[/bold]  [{style}]{pr.state}[/{style}]")
    console.print(f"[dim]{escape(pr.author)} wants to merge {escape(pr.head)} into {escape(pr.base)}[/dim]")
    if pr.additions is not None:
        console.print(f"[green]+{pr.additions}[/green] [red]-{pr.deletions or 0}[/red]")
    if pr.mergeable is not None:
        console.print("Mergeable: " + ("[green]yes[/green]" if pr.mergeable else "[red]no[/red]"))
    if pr.body:
        console.print()
        console.print(escape(pr.body))
    console.print(f"\n{escape(pr.url)}")

    if web:
        click.launch(pr.url)


@pr_cmd.command("merge")
@click.argument("number", type=int, required=False)
@click.option("-m", "--method", type=click.Choice(MERGE_METHODS), default=None, help="Merge method.")
@click.option("-y", "--yes", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_obj
def pr_merge_cmd(app: AppContext, number: int | None, method: str | None, yes: bool):
    """Merge a pull request."""
    owner, repo = app.require_github_slug()
    if number is None:
        number = _select_pr(app, owner, repo)
        if number is None:
            return

    if method is None:
        method = app.prompter.choose("Merge method", MERGE_METHODS, default="merge")

    if not yes and not app.prompter.confirm(f"Merge pull request #{number} ({method})?", default=False):
        cancelled("Merge")
        return

    sha = app.github.merge_pull_request(owner, repo, number, method=method)
    success(f"Merged pull request #{number}")
    console.print(f"[dim]Merge commit: {sha[:7]}[/dim]")
