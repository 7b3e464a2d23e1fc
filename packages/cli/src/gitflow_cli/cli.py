"""CLI entry point for gitflow.

Commands:
  init, clone, status, commit, push, pull, branch   local git workflow
  pr, issue                                         GitHub pull requests and issues
  config                                            persisted settings
  ai                                                AI-assisted commit, review and summary
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from gitflow_core.config import ConfigStore
from gitflow_core.errors import GitflowError

from gitflow_cli.commands.ai import ai_cmd
from gitflow_cli.commands.branch import branch_cmd
from gitflow_cli.commands.clone import clone_cmd
from gitflow_cli.commands.commit import commit_cmd
from gitflow_cli.commands.config import config_cmd
from gitflow_cli.commands.init import init_cmd
from gitflow_cli.commands.issue import issue_cmd
from gitflow_cli.commands.pr import pr_cmd
from gitflow_cli.commands.pull import pull_cmd
from gitflow_cli.commands.push import push_cmd
from gitflow_cli.commands.status import status_cmd
from gitflow_cli.context import AppContext
from gitflow_cli.logging_setup import setup_logging
from gitflow_cli.output import console, report_error

logger = logging.getLogger(__name__)


class GitflowGroup(click.Group):
    """Group that turns any GitflowError into a printed message and exit status 1."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except GitflowError as e:
            logger.debug("Command failed", exc_info=True)
            report_error(e)
            ctx.exit(1)


@click.group(cls=GitflowGroup)
@click.version_option(package_name="gitflow", prog_name="gitflow")
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="GITFLOW_CONFIG",
    help="Path to the configuration file. [default: ~/.gitflow/config.yml]",
)
@click.option("-v", "--verbose", count=True, help="Enable logging (-v INFO, -vv DEBUG).")
@click.option("-q", "--quiet", is_flag=True, help="Only print errors.")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, verbose: int, quiet: bool):
    """Git and GitHub workflow assistant with AI-generated text."""
    setup_logging(verbose)
    console.quiet = quiet

    if ctx.obj is None:
        ctx.obj = AppContext(store=ConfigStore(config_path))


main.add_command(init_cmd)
main.add_command(clone_cmd)
main.add_command(status_cmd)
main.add_command(commit_cmd)
main.add_command(push_cmd)
main.add_command(pull_cmd)
main.add_command(branch_cmd)
main.add_command(pr_cmd)
main.add_command(issue_cmd)
main.add_command(config_cmd)
main.add_command(ai_cmd)
