"""config commands: inspect and edit the persisted configuration file."""

from __future__ import annotations

import os

import click
from rich.markup import escape
from rich.table import Table

from gitflow_core.config import AI_PROVIDERS, SECRET_KEYS, mask_secret

from gitflow_cli.context import AppContext
from gitflow_cli.output import cancelled, console, success, warn


def _show_warnings(app: AppContext) -> None:
    for message in app.store.validate():
        warn(f"Warning: {message}")


@click.group("config", invoke_without_command=True)
@click.pass_context
def config_cmd(ctx: click.Context):
    """Manage configuration (default: list)."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(config_list_cmd)


@config_cmd.command("get")
@click.argument("key")
@click.pass_obj
def config_get_cmd(app: AppContext, key: str):
    """Print the stored (or default) value of KEY."""
    value = app.store.get(key)
    if value is None:
        warn(f"{key} is not set")
        return
    click.echo(value)


@config_cmd.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_obj
def config_set_cmd(app: AppContext, key: str, value: str):
    """Store VALUE under KEY. Numbers and true/false are converted."""
    stored = app.store.set(key, value)
    success(f"{key} set to {mask_secret(str(stored)) if key in SECRET_KEYS else stored}")
    _show_warnings(app)


@config_cmd.command("unset")
@click.argument("key")
@click.pass_obj
def config_unset_cmd(app: AppContext, key: str):
    """Remove KEY from the configuration file."""
    app.store.unset(key)
    success(f"{key} removed")


@config_cmd.command("list")
@click.pass_obj
def config_list_cmd(app: AppContext):
    """Show every setting, with secrets masked."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Key", style="bold")
    table.add_column("Value")
    for key, value in app.store.masked().items():
        table.add_row(key, "[dim]not set[/dim]" if value is None else escape(str(value)))
    console.print(table)
    console.print(f"[dim]Config file: {escape(str(app.store.path))}[/dim]")
    _show_warnings(app)


@config_cmd.command("reset")
@click.option("-y", "--yes", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_obj
def config_reset_cmd(app: AppContext, yes: bool):
    """Remove every stored setting."""
    if not yes and not app.prompter.confirm("Reset all configuration to defaults?", default=False):
        cancelled("Reset")
        return
    app.store.clear()
    success("Configuration reset")


@config_cmd.command("path")
@click.pass_obj
def config_path_cmd(app: AppContext):
    """Print the configuration file location."""
    click.echo(str(app.store.path))


@config_cmd.command("setup")
@click.pass_obj
def config_setup_cmd(app: AppContext):
    """Interactive setup wizard."""
    store, prompter = app.store, app.prompter
    console.print("\n[bold cyan]gitflow setup[/bold cyan]\n")

    token = prompter.text(
        "GitHub personal access token (leave empty to use GITHUB_TOKEN or gh auth)",
        required=False,
    )
    if token:
        store.set("github_token", token)

    provider = prompter.choose("AI provider", AI_PROVIDERS, default=str(store.get("ai_provider")))
    store.set("ai_provider", provider)

    if provider != "none":
        key = prompter.text(f"{provider} API key (leave empty to use the environment)", required=False)
        if key:
            store.set("ai_api_key", key)

    store.set("default_branch", prompter.text("Default branch", default=str(store.get("default_branch"))))
    store.set(
        "editor",
        prompter.text("Preferred editor", default=str(store.get("editor") or os.environ.get("EDITOR", "vi"))),
    )
    store.set(
        "auto_open_pr",
        prompter.confirm(
            "Open pull requests in the browser after creating them?",
            default=bool(store.get("auto_open_pr")),
        ),
    )

    success(f"Configuration saved to {store.path}")
    _show_warnings(app)

