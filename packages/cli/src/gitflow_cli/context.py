"""Per-invocation state shared by every command.

The group callback builds one AppContext and stores it as the click ``obj``.
Tests pass a prepared AppContext instead, with fake factories and a
repository rooted in a temporary directory.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from functools import cached_property

from gitflow_core.auth import resolve_github_token
from gitflow_core.config import ConfigStore, EffectiveConfiguration
from gitflow_core.errors import PreconditionError
from gitflow_core.generation import get_generator
from gitflow_core.gh.client import GitHubClient
from gitflow_core.gh.remote import parse_repo_slug
from gitflow_core.git.repository import GitRepository
from gitflow_core.providers.base import BaseGenerator

from gitflow_cli.prompts import Prompter


@dataclass
class AppContext:
    store: ConfigStore
    repo: GitRepository = field(default_factory=GitRepository)
    prompter: Prompter = field(default_factory=Prompter)
    github_factory: Callable[[str | None], GitHubClient] = GitHubClient
    generator_factory: Callable[[EffectiveConfiguration], BaseGenerator] = get_generator
    token_resolver: Callable[[Mapping[str, str] | None], str | None] = resolve_github_token
    env: Mapping[str, str] | None = None

    @cached_property
    def config(self) -> EffectiveConfiguration:
        # The GitHub token fallback (env var or `gh auth token`) is left to github_token.
        return self.store.effective(env=self.env, token_resolver=None)

    @cached_property
    def github_token(self) -> str | None:
        return self.config.github_token or self.token_resolver(self.env)

    @cached_property
    def github(self) -> GitHubClient:
        # Construction is cheap; the PyGithub client is only built on first call.
        return self.github_factory(self.github_token)

    def generator(self) -> BaseGenerator:
        return self.generator_factory(self.config)

    def require_repository(self) -> GitRepository:
        if not self.repo.is_repository():
            raise PreconditionError("Not a git repository. Run `gitflow init` to create one.")
        return self.repo

    def require_github_slug(self, remote: str = "origin") -> tuple[str, str]:
        """(owner, repo) of the GitHub remote; raises PreconditionError otherwise."""
        self.require_repository()
        return parse_repo_slug(self.repo.remote_url(remote))
