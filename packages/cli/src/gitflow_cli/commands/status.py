"""status command: render the working tree status."""

from __future__ import annotations

import click
from rich.markup import escape
from rich.table import Table

from gitflow_core.models import WorkingTreeStatus

from gitflow_cli.context import AppContext
from gitflow_cli.output import console

_SECTIONS = (
    ("staged", "Staged", "green", "A"),
    ("modified", "Modified", "yellow", "M"),
    ("conflicted", "Conflicted", "red", "U"),
    ("untracked", "Untracked", "dim", "?"),
)


def tracking_line(status: WorkingTreeStatus) -> str:
    if not status.tracking:
        return "No upstream branch"
    parts = []
    if status.ahead:
        parts.append(f"{status.ahead} ahead")
    if status.behind:
        parts.append(f"{status.behind} behind")
    return f"{status.tracking} ({', '.join(parts)})" if parts else f"{status.tracking} (up to date)"


def render_status(status: WorkingTreeStatus) -> None:
    console.print(f"[bold]On branch[/bold] [cyan]{escape(status.current)}[/cyan]")
    console.print(f"[dim]{escape(tracking_line(status))}[/dim]")

    if status.is_clean and not status.untracked:
        console.print("\n[green]Working tree clean[/green]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("State", width=12)
    table.add_column("File")
    for attr, label, style, _ in _SECTIONS:
        for path in getattr(status, attr):
            table.add_row(f"[{style}]{label}[/{style}]", escape(path))
    console.print(table)


@click.command("status")
@click.option("-s", "--short", "short", is_flag=True, help="One line per changed file.")
@click.option("--porcelain", is_flag=True, help="Machine-readable output without colours.")
@click.pass_obj
def status_cmd(app: AppContext, short: bool, porcelain: bool):
    """Show the working tree status."""
    status = app.require_repository().status()

    if porcelain or short:
        if not porcelain:
            console.print(f"## {escape(status.current)}")
        for attr, _, style, code in _SECTIONS:
            for path in getattr(status, attr):
                if porcelain:
                    click.echo(f"{code} {path}")
                else:
                    console.print(f"[{style}]{code}[/{style}] {escape(path)}")
        return

    render_status(status)
