"""Normalized data model shared by the git, GitHub and generation adapters.

Every record is an immutable snapshot. Adapters build a fresh one per call;
nothing here is mutated after construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class RepositorySnapshot:
    name: str
    owner: str
    url: str
    private: bool
    description: str | None = None
    language: str | None = None
    stars: int = 0
    forks: int = 0

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class PullRequestRecord:
    number: int
    title: str
    body: str
    state: str  # "open" | "closed" | "merged"
    author: str
    base: str
    head: str
    url: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    mergeable: bool | None = None
    additions: int | None = None
    deletions: int | None = None


@dataclass(frozen=True)
class IssueRecord:
    number: int
    title: str
    body: str
    state: str  # "open" | "closed"
    author: str
    url: str
    assignees: list[str] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class CommitRecord:
    sha: str
    message: str
    author: str
    date: datetime | None = None
    files: list[str] | None = None
    additions: int | None = None
    deletions: int | None = None

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0]


@dataclass(frozen=True)
class BranchRecord:
    name: str
    protected: bool = False
    is_default: bool = False
    is_current: bool = False
    last_commit: str | None = None
    ahead: int | None = None
    behind: int | None = None


@dataclass(frozen=True)
class WorkingTreeStatus:
    """Snapshot of `git status`.

    A path appears in at most one of ``staged``, ``modified`` and
    ``conflicted``. ``current`` is the literal "HEAD" when detached.
    """

    current: str
    tracking: str | None = None
    staged: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)
    conflicted: list[str] = field(default_factory=list)
    untracked: list[str] = field(default_factory=list)
    ahead: int = 0
    behind: int = 0

    @property
    def is_clean(self) -> bool:
        return not (self.staged or self.modified or self.conflicted)

    @property
    def total_changes(self) -> int:
        return len(self.staged) + len(self.modified) + len(self.conflicted)


@dataclass(frozen=True)
class GenerationResult:
    content: str
    confidence: float | None = None
    suggestions: list[str] | None = None
