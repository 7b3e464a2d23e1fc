"""Best-effort suggestions printed after a failed git operation.

This is a substring heuristic over git's error text. It is advisory only:
callers print what it returns and never branch on it.
"""

from __future__ import annotations

_HINTS: list[tuple[tuple[str, ...], list[str]]] = [
    (
        ("reject", "non-fast-forward"),
        [
            "Pull latest changes first: gitflow pull",
            "Or force push if you want to overwrite: gitflow push --force",
        ],
    ),
    (
        ("authentication", "could not read username", "permission denied"),
        [
            "Check your GitHub token: gitflow config set github_token <token>",
            "Or use an SSH URL for the remote",
        ],
    ),
    (
        ("conflict",),
        [
            "Resolve conflicts in your files",
            "Stage the resolved files with git add <file>",
            "Run gitflow commit to complete the merge",
            "Or run git merge --abort to cancel",
        ],
    ),
    (
        ("could not read from remote", "does not appear to be a git repository"),
        [
            "Check the remote URL: git remote -v",
            "Make sure the repository exists and you have access to it",
        ],
    ),
]


def suggest(message: str) -> list[str]:
    """Return suggestions for the first matching pattern group, or []."""
    lowered = message.lower()
    for needles, suggestions in _HINTS:
        if any(needle in lowered for needle in needles):
            return list(suggestions)
    return []
