from __future__ import annotations

import re

from gitflow_core.errors import PreconditionError

GITHUB_HOST = "github.com"

# host[:/]owner/repo[.git] -- covers https://, git@host: and ssh://git@host/ remotes.
_SLUG_RE = re.compile(
    rf"{re.escape(GITHUB_HOST)}[:/](?P<owner>[^/:]+)/(?P<repo>[^/]+?)(?:\.git)?/?$"
)
_SHORTHAND_RE = re.compile(r"^(?P<owner>[A-Za-z0-9_.-]+)/(?P<repo>[A-Za-z0-9_.-]+)$")


def parse_repo_slug(url: str | None) -> tuple[str, str]:
    """Return (owner, repo) for a GitHub remote URL.

    Raises PreconditionError for anything that is not a GitHub remote, so
    callers can stop before making any API call.
    """
    if not url:
        raise PreconditionError("No remote repository configured")
    match = _SLUG_RE.search(url.strip())
    if not match:
        raise PreconditionError(f"Invalid GitHub repository URL: {url}")
    return match.group("owner"), match.group("repo")


def expand_clone_url(spec: str) -> str:
    """Turn an owner/repo shorthand into a clone URL; full URLs pass through."""
    if spec.startswith(("http://", "https://", "git@", "ssh://", "git://", "file://", "/", ".")):
        return spec
    match = _SHORTHAND_RE.match(spec)
    if not match:
        raise PreconditionError("Invalid repository format. Use owner/repo or full URL")
    repo = match.group("repo").removesuffix(".git")
    return f"https://{GITHUB_HOST}/{match.group('owner')}/{repo}.git"
