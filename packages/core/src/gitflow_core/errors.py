"""Error taxonomy shared by the adapters and the CLI.

Every adapter failure surfaces as a GitflowError subclass so the CLI has one
place to print it and exit non-zero. Messages from git, GitHub and the model
backends are carried verbatim.
"""

from __future__ import annotations


class GitflowError(Exception):
    """Base class for every error the CLI reports to the user."""


class PreconditionError(GitflowError):
    """The command cannot run here: not a repository, no remote, bad remote URL."""


class ConfigurationError(GitflowError):
    """A required setting is missing or invalid. Raised before any network call."""


class GitError(GitflowError):
    """The git executable exited non-zero. The message is git's own output."""


class GitHubError(GitflowError):
    """The GitHub API rejected a request."""


class GenerationError(GitflowError):
    """The text-generation backend failed or returned nothing usable."""
