"""Shared console and message helpers."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from gitflow_core import hints
from gitflow_core.errors import GitError, GitflowError

console = Console()


def success(message: str) -> None:
    console.print(f"[green]✓[/green] {escape(message)}")


def info(message: str) -> None:
    console.print(f"[dim]{escape(message)}[/dim]")


def warn(message: str) -> None:
    console.print(f"[yellow]{escape(message)}[/yellow]")


def cancelled(what: str = "Operation") -> None:
    warn(f"{what} cancelled")


def report_error(exc: GitflowError) -> None:
    """Print the error and, for git failures, any advisory suggestions.

    Errors are printed even in quiet mode.
    """
    quiet, console.quiet = console.quiet, False
    try:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        if isinstance(exc, GitError):
            suggestions = hints.suggest(str(exc))
            if suggestions:
                console.print("\n[yellow]Suggestions:[/yellow]")
                for line in suggestions:
                    console.print(f"  • {escape(line)}")
    finally:
        console.quiet = quiet
