"""Thin wrapper over the git executable.

Every method maps to one or two git invocations. Failures raise GitError with
git's own message; nothing is retried or swallowed except where a method is
documented to answer a yes/no question (is_repository, branch_exists, ...).
"""

from __future__ import annotations

import logging
import subprocess
from datetime import datetime
from pathlib import Path

from gitflow_core.errors import GitError
from gitflow_core.models import BranchRecord, CommitRecord, WorkingTreeStatus

logger = logging.getLogger(__name__)

RESET_MODES = ("soft", "mixed", "hard")

# Record separator before each commit, unit separator between fields. The
# trailing %x1f marks where --name-only output begins.
_LOG_FORMAT = "%x1e%H%x1f%an%x1f%aI%x1f%B%x1f"


def _run_cmd(args: list[str], cwd: Path | None = None) -> str:
    logger.debug("Running: %s", " ".join(args))
    try:
        result = subprocess.run(
            args,
            cwd=str(cwd) if cwd else None,
            check=False,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError:
        raise GitError(f"{args[0]} executable not found on PATH")
    if result.returncode != 0:
        raise GitError(result.stderr.strip() or result.stdout.strip() or f"{' '.join(args[:2])} failed")
    return result.stdout


def parse_status(output: str) -> WorkingTreeStatus:
    """Parse `git status --porcelain=v2 --branch -z` output."""
    current = "HEAD"
    tracking: str | None = None
    ahead = behind = 0
    staged: list[str] = []
    modified: list[str] = []
    conflicted: list[str] = []
    untracked: list[str] = []

    entries = output.split("\0")
    i = 0
    while i < len(entries):
        entry = entries[i]
        i += 1
        if not entry:
            continue
        if entry.startswith("# branch.head "):
            head = entry[len("# branch.head ") :]
            current = "HEAD" if head == "(detached)" else head
        elif entry.startswith("# branch.upstream "):
            tracking = entry[len("# branch.upstream ") :]
        elif entry.startswith("# branch.ab "):
            raw_ahead, raw_behind = entry[len("# branch.ab ") :].split()
            ahead, behind = abs(int(raw_ahead)), abs(int(raw_behind))
        elif entry.startswith("1 "):
            fields = entry.split(" ", 8)
            _classify(fields[1], fields[8], staged, modified)
        elif entry.startswith("2 "):
            fields = entry.split(" ", 9)
            _classify(fields[1], fields[9], staged, modified)
            i += 1  # rename/copy entries are followed by the original path
        elif entry.startswith("u "):
            path = entry.split(" ", 10)[10]
            if path not in conflicted:
                conflicted.append(path)
        elif entry.startswith("? "):
            untracked.append(entry[2:])

    return WorkingTreeStatus(
        current=current,
        tracking=tracking,
        staged=staged,
        modified=modified,
        conflicted=conflicted,
        untracked=untracked,
        ahead=ahead,
        behind=behind,
    )


def _classify(xy: str, path: str, staged: list[str], modified: list[str]) -> None:
    # Index changes win: a path staged and then edited again is reported once.
    index_state, worktree_state = xy[0], xy[1]
    if index_state != ".":
        if path not in staged:
            staged.append(path)
    elif worktree_state != ".":
        if path not in modified:
            modified.append(path)


def _parse_track(track: str) -> tuple[int | None, int | None]:
    """Parse `%(upstream:track,nobracket)`: "ahead 1, behind 2", "gone" or ""."""
    if not track or track == "gone":
        return None, None
    ahead = behind = 0
    for part in track.split(","):
        word, _, count = part.strip().partition(" ")
        if word == "ahead":
            ahead = int(count)
        elif word == "behind":
            behind = int(count)
    return ahead, behind


def parse_log(output: str, with_files: bool = False) -> list[CommitRecord]:
    commits: list[CommitRecord] = []
    for chunk in output.split("\x1e"):
        if not chunk.strip():
            continue
        sha, author, date, body, rest = chunk.split("\x1f", 4)
        files = [line for line in rest.splitlines() if line.strip()] if with_files else None
        commits.append(
            CommitRecord(
                sha=sha.strip(),
                message=body.strip(),
                author=author,
                date=datetime.fromisoformat(date) if date else None,
                files=files,
            )
        )
    return commits


class GitRepository:
    """A working tree on disk, driven through the git executable."""

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path is not None else Path.cwd()

    def _git(self, args: list[str], strip: bool = True) -> str:
        out = _run_cmd(["git", "-C", str(self.path), *args])
        return out.strip() if strip else out

    # ------------------------------------------------------------------ #
    # Repository                                                           #
    # ------------------------------------------------------------------ #

    def is_repository(self) -> bool:
        """True inside a work tree or git dir. Never raises."""
        try:
            self._git(["rev-parse", "--git-dir"])
            return True
        except GitError:
            return False

    def has_commits(self) -> bool:
        try:
            self._git(["rev-parse", "--verify", "--quiet", "HEAD"])
            return True
        except GitError:
            return False

    def init(self, bare: bool = False, initial_branch: str | None = None) -> None:
        self.path.mkdir(parents=True, exist_ok=True)
        args = ["init"]
        if bare:
            args.append("--bare")
        if initial_branch:
            args += ["--initial-branch", initial_branch]
        self._git(args)

    @classmethod
    def clone(
        cls,
        url: str,
        target: str | Path | None = None,
        branch: str | None = None,
        depth: int | None = None,
        cwd: Path | None = None,
    ) -> GitRepository:
        """Clone url and return a GitRepository for the new working tree."""
        args = ["git", "clone"]
        if branch:
            args += ["--branch", branch]
        if depth:
            args += ["--depth", str(depth)]
        args.append(url)
        if target:
            args.append(str(target))
        _run_cmd(args, cwd=cwd)

        base = Path(cwd) if cwd else Path.cwd()
        dest = Path(target) if target else Path(clone_dir_name(url))
        return cls(dest if dest.is_absolute() else base / dest)

    # ------------------------------------------------------------------ #
    # Working tree                                                         #
    # ------------------------------------------------------------------ #

    def status(self) -> WorkingTreeStatus:
        out = self._git(["status", "--porcelain=v2", "--branch", "-z", "--untracked-files=all"], strip=False)
        return parse_status(out)

    def add(self, paths: list[str]) -> None:
        self._git(["add", "--", *paths])

    def add_all(self) -> None:
        self._git(["add", "--all"])

    def commit(self, message: str, allow_empty: bool = False, amend: bool = False) -> str:
        """Record a commit and return its hash."""
        args = ["commit"]
        if message:
            args += ["-m", message]
        elif amend:
            args.append("--no-edit")
        else:
            args += ["-m", ""]
        if allow_empty:
            args += ["--allow-empty", "--allow-empty-message"]
        if amend:
            args.append("--amend")
        self._git(args)
        return self._git(["rev-parse", "HEAD"])

    def diff(self, paths: list[str] | None = None, cached: bool = False, revision: str | None = None) -> str:
        """Return the raw diff text. An empty string means no differences.

        revision accepts anything git diff does, e.g. "main...feature".
        """
        args = ["diff"]
        if cached:
            args.append("--cached")
        if revision:
            args.append(revision)
        if paths:
            args += ["--", *paths]
        return self._git(args, strip=False)

    def reset(self, ref: str = "HEAD", mode: str = "mixed") -> None:
        if mode not in RESET_MODES:
            raise ValueError(f"Unknown reset mode: {mode!r}. Choose one of {', '.join(RESET_MODES)}.")
        self._git(["reset", f"--{mode}", ref])

    def revert(self, commit: str) -> None:
        self._git(["revert", "--no-edit", commit])

    # ------------------------------------------------------------------ #
    # Branches                                                             #
    # ------------------------------------------------------------------ #

    def current_branch(self) -> str:
        """Name of the checked-out branch, or "HEAD" when detached."""
        try:
            name = self._git(["symbolic-ref", "--short", "-q", "HEAD"])
        except GitError:
            return "HEAD"
        return name or "HEAD"

    def default_branch(self, fallback: str = "main") -> str:
        try:
            ref = self._git(["symbolic-ref", "refs/remotes/origin/HEAD"])
            return ref.rsplit("/", 1)[-1]
        except GitError:
            for candidate in (fallback, "main", "master"):
                if self.branch_exists(candidate):
                    return candidate
        return fallback

    def branch_exists(self, name: str) -> bool:
        try:
            self._git(["show-ref", "--verify", "--quiet", f"refs/heads/{name}"])
            return True
        except GitError:
            return False

    def branches(self, default: str | None = None) -> list[BranchRecord]:
        out = self._git(
            [
                "for-each-ref",
                "--format=%(refname:short)%00%(HEAD)%00%(objectname:short)%00%(upstream:track,nobracket)",
                "refs/heads",
            ]
        )
        default = default or self.default_branch()
        records: list[BranchRecord] = []
        for line in out.splitlines():
            if not line.strip():
                continue
            name, head, sha, track = line.split("\0")
            ahead, behind = _parse_track(track)
            records.append(
                BranchRecord(
                    name=name,
                    is_default=name == default,
                    is_current=head == "*",
                    last_commit=sha or None,
                    ahead=ahead,
                    behind=behind,
                )
            )
        return records

    def create_branch(self, name: str, checkout: bool = True, start_point: str | None = None) -> None:
        args = ["checkout", "-b", name] if checkout else ["branch", name]
        if start_point:
            args.append(start_point)
        self._git(args)

    def delete_branch(self, name: str, force: bool = False) -> None:
        self._git(["branch", "-D" if force else "-d", name])

    def checkout(self, name: str) -> None:
        self._git(["checkout", name])

    def merge(self, branch: str, no_commit: bool = False, squash: bool = False) -> None:
        args = ["merge"]
        if no_commit:
            args.append("--no-commit")
        if squash:
            args.append("--squash")
        args.append(branch)
        self._git(args)

    def abort_merge(self) -> None:
        self._git(["merge", "--abort"])

    # ------------------------------------------------------------------ #
    # History                                                              #
    # ------------------------------------------------------------------ #

    def log(
        self,
        limit: int | None = None,
        ref: str | None = None,
        since: str | None = None,
        until: str | None = None,
        with_files: bool = False,
    ) -> list[CommitRecord]:
        """Return commits newest first. An unborn branch has no history."""
        if not ref and not since and not self.has_commits():
            return []
        args = ["log", f"--format={_LOG_FORMAT}"]
        if with_files:
            args.append("--name-only")
        if limit:
            args.append(f"-n{limit}")
        if since and until:
            args.append(f"{since}..{until}")
        elif ref:
            args.append(ref)
        return parse_log(self._git(args, strip=False), with_files=with_files)

    # ------------------------------------------------------------------ #
    # Remotes                                                              #
    # ------------------------------------------------------------------ #

    def remotes(self) -> list[str]:
        return [line for line in self._git(["remote"]).splitlines() if line.strip()]

    def remote_url(self, remote: str = "origin") -> str | None:
        try:
            url = self._git(["remote", "get-url", remote])
        except GitError:
            return None
        return url or None

    def add_remote(self, name: str, url: str) -> None:
        self._git(["remote", "add", name, url])

    def remove_remote(self, name: str) -> None:
        self._git(["remote", "remove", name])

    def push(
        self,
        remote: str = "origin",
        branch: str | None = None,
        force: bool = False,
        set_upstream: bool = False,
    ) -> None:
        args = ["push"]
        if force:
            args.append("--force")
        if set_upstream:
            args.append("--set-upstream")
        args.append(remote)
        if branch:
            args.append(branch)
        self._git(args)

    def pull(self, remote: str = "origin", branch: str | None = None, rebase: bool = False) -> None:
        args = ["pull"]
        if rebase:
            args.append("--rebase")
        args.append(remote)
        if branch:
            args.append(branch)
        self._git(args)

    def fetch(self, remote: str | None = None, branch: str | None = None) -> None:
        args = ["fetch"]
        if remote:
            args.append(remote)
            if branch:
                args.append(branch)
        self._git(args)

    # ------------------------------------------------------------------ #
    # Stash                                                                #
    # ------------------------------------------------------------------ #

    def stash(self, message: str | None = None) -> str:
        args = ["stash", "push"]
        if message:
            args += ["-m", message]
        return self._git(args)

    def stash_pop(self) -> None:
        """Apply and drop the newest stash entry.

        When the entry does not apply cleanly git keeps it in the stash list
        and exits non-zero; the GitError carries git's conflict report.
        """
        self._git(["stash", "pop"])

    def stash_list(self) -> list[str]:
        out = self._git(["stash", "list", "--format=%gs"])
        return [line for line in out.splitlines() if line.strip()]


def clone_dir_name(url: str) -> str:
    """Directory name git picks for a clone of url."""
    name = url.rstrip("/").replace(":", "/").rsplit("/", 1)[-1]
    return name.removesuffix(".git")
