"""GitHub REST adapter built on PyGithub.

The authenticated PyGithub client is created lazily on the first call that
needs it and kept for the life of the process. Construction fails fast with a
ConfigurationError when no token is configured, before any network traffic.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from github import Auth, Github, GithubException

from gitflow_core.errors import ConfigurationError, GitHubError, PreconditionError
from gitflow_core.models import (
    BranchRecord,
    CommitRecord,
    IssueRecord,
    PullRequestRecord,
    RepositorySnapshot,
)

logger = logging.getLogger(__name__)

LIST_STATES = ("open", "closed", "all")
MERGE_METHODS = ("merge", "squash", "rebase")
DEFAULT_LIMIT = 30


def _default_client_factory(token: str) -> Github:
    return Github(auth=Auth.Token(token))


def describe_github_error(exc: GithubException) -> str:
    """Return GitHub's own message for an API failure, including field errors."""
    data = exc.data
    if isinstance(data, dict):
        message = data.get("message") or str(exc)
        details = []
        for err in data.get("errors") or []:
            if isinstance(err, dict):
                details.append(err.get("message") or " ".join(str(v) for v in err.values()))
            else:
                details.append(str(err))
        if details:
            message = f"{message} ({'; '.join(details)})"
        return message
    if data:
        return str(data)
    return str(exc)


@contextmanager
def _api_call(action: str) -> Iterator[None]:
    try:
        yield
    except GithubException as e:
        logger.debug("GitHub API error during %r: status=%s data=%s", action, e.status, e.data)
        raise GitHubError(f"Failed to {action}: {describe_github_error(e)}") from e


def _login(user: Any, fallback: str = "Unknown") -> str:
    return user.login if user is not None else fallback


def to_repository_snapshot(repo: Any) -> RepositorySnapshot:
    return RepositorySnapshot(
        name=repo.name,
        owner=repo.owner.login,
        url=repo.html_url,
        private=bool(repo.private),
        description=repo.description or None,
        language=repo.language or None,
        stars=repo.stargazers_count or 0,
        forks=repo.forks_count or 0,
    )


def to_pull_request_record(pr: Any, detailed: bool = False) -> PullRequestRecord:
    """Normalize a PyGithub PullRequest.

    List payloads omit line counts and mergeability; reading them would cost
    one extra request per PR, so they are only filled in when ``detailed``.
    """
    state = "merged" if pr.merged_at is not None else pr.state
    return PullRequestRecord(
        number=pr.number,
        title=pr.title,
        body=pr.body or "",
        state=state,
        author=_login(pr.user),
        base=pr.base.ref,
        head=pr.head.ref,
        url=pr.html_url,
        created_at=pr.created_at,
        updated_at=pr.updated_at,
        mergeable=pr.mergeable if detailed else None,
        additions=pr.additions if detailed else None,
        deletions=pr.deletions if detailed else None,
    )


def to_issue_record(issue: Any) -> IssueRecord:
    return IssueRecord(
        number=issue.number,
        title=issue.title,
        body=issue.body or "",
        state=issue.state,
        author=_login(issue.user),
        url=issue.html_url,
        assignees=[a.login for a in issue.assignees or []],
        labels=[label if isinstance(label, str) else label.name for label in issue.labels or []],
        created_at=issue.created_at,
        updated_at=issue.updated_at,
    )


def to_commit_record(commit: Any) -> CommitRecord:
    git_author = commit.commit.author
    if commit.author is not None:
        author = commit.author.login
    elif git_author is not None and git_author.name:
        author = git_author.name
    else:
        author = "Unknown"
    return CommitRecord(
        sha=commit.sha,
        message=commit.commit.message,
        author=author,
        date=git_author.date if git_author is not None else None,
    )


class GitHubClient:
    """Repository, pull request, issue, branch and commit operations."""

    def __init__(self, token: str | None, client_factory: Callable[[str], Any] | None = None):
        self._token = token
        self._client_factory = client_factory or _default_client_factory
        self._gh: Any = None

    @property
    def client(self) -> Any:
        if self._gh is None:
            if not self._token:
                raise ConfigurationError(
                    "GitHub token not configured. Run `gitflow config set github_token <token>` "
                    "or `gh auth login`."
                )
            logger.debug("Creating authenticated GitHub client.")
            self._gh = self._client_factory(self._token)
        return self._gh

    def _repo(self, owner: str, repo: str) -> Any:
        return self.client.get_repo(f"{owner}/{repo}", lazy=True)

    # ------------------------------------------------------------------ #
    # Repositories                                                         #
    # ------------------------------------------------------------------ #

    def authenticated_user(self) -> str:
        with _api_call("authenticate"):
            return self.client.get_user().login

    def get_repository(self, owner: str, repo: str) -> RepositorySnapshot:
        with _api_call("fetch repository"):
            return to_repository_snapshot(self.client.get_repo(f"{owner}/{repo}"))

    def create_repository(
        self,
        name: str,
        description: str | None = None,
        private: bool = False,
        auto_init: bool = False,
    ) -> RepositorySnapshot:
        kwargs: dict[str, Any] = {"private": private, "auto_init": auto_init}
        if description:
            kwargs["description"] = description
        with _api_call("create repository"):
            created = self.client.get_user().create_repo(name, **kwargs)
            logger.info("Created repository %s", created.full_name)
            return to_repository_snapshot(created)

    # ------------------------------------------------------------------ #
    # Pull requests                                                        #
    # ------------------------------------------------------------------ #

    def get_pull_requests(
        self, owner: str, repo: str, state: str = "open", limit: int = DEFAULT_LIMIT
    ) -> list[PullRequestRecord]:
        _check_state(state)
        with _api_call("fetch pull requests"):
            pulls = self._repo(owner, repo).get_pulls(state=state)
            return [to_pull_request_record(pr) for pr in pulls[:limit]]

    def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequestRecord:
        with _api_call(f"fetch pull request #{number}"):
            return to_pull_request_record(self._repo(owner, repo).get_pull(number), detailed=True)

    def create_pull_request(
        self,
        owner: str,
        repo: str,
        title: str,
        body: str,
        head: str,
        base: str,
        draft: bool = False,
    ) -> PullRequestRecord:
        if head == base:
            raise PreconditionError(f"Cannot create a pull request from '{head}' into itself")
        with _api_call("create pull request"):
            pr = self._repo(owner, repo).create_pull(base=base, head=head, title=title, body=body, draft=draft)
            logger.info("Created pull request #%d on %s/%s", pr.number, owner, repo)
            return to_pull_request_record(pr, detailed=True)

    def merge_pull_request(self, owner: str, repo: str, number: int, method: str = "merge") -> str:
        """Merge a pull request and return the merge commit SHA."""
        if method not in MERGE_METHODS:
            raise ValueError(f"Unknown merge method: {method!r}. Choose one of {', '.join(MERGE_METHODS)}.")
        with _api_call(f"merge pull request #{number}"):
            status = self._repo(owner, repo).get_pull(number).merge(merge_method=method)
        if not status.merged:
            raise GitHubError(f"Failed to merge pull request #{number}: {status.message}")
        return status.sha

    # ------------------------------------------------------------------ #
    # Issues                                                               #
    # ------------------------------------------------------------------ #

    def get_issues(self, owner: str, repo: str, state: str = "open", limit: int = DEFAULT_LIMIT) -> list[IssueRecord]:
        _check_state(state)
        with _api_call("fetch issues"):
            records: list[IssueRecord] = []
            for issue in self._repo(owner, repo).get_issues(state=state):
                # The issues endpoint also returns pull requests. html_url is in the
                # list payload; pull_request is not, and reading it costs a GET per issue.
                if "/pull/" in issue.html_url:
                    continue
                records.append(to_issue_record(issue))
                if len(records) >= limit:
                    break
            return records

    def get_issue(self, owner: str, repo: str, number: int) -> IssueRecord:
        with _api_call(f"fetch issue #{number}"):
            return to_issue_record(self._repo(owner, repo).get_issue(number))

    def create_issue(
        self,
        owner: str,
        repo: str,
        title: str,
        body: str = "",
        assignees: list[str] | None = None,
        labels: list[str] | None = None,
    ) -> IssueRecord:
        with _api_call("create issue"):
            issue = self._repo(owner, repo).create_issue(
                title=title,
                body=body,
                assignees=list(assignees or []),
                labels=list(labels or []),
            )
            logger.info("Created issue #%d on %s/%s", issue.number, owner, repo)
            return to_issue_record(issue)

    # ------------------------------------------------------------------ #
    # Branches and commits                                                 #
    # ------------------------------------------------------------------ #

    def get_branches(self, owner: str, repo: str) -> list[BranchRecord]:
        with _api_call("fetch branches"):
            gh_repo = self.client.get_repo(f"{owner}/{repo}")
            default = gh_repo.default_branch
            return [
                BranchRecord(
                    name=branch.name,
                    protected=bool(branch.protected),
                    is_default=branch.name == default,
                    last_commit=branch.commit.sha,
                )
                for branch in gh_repo.get_branches()
            ]

    def get_commits(
        self, owner: str, repo: str, branch: str | None = None, limit: int = DEFAULT_LIMIT
    ) -> list[CommitRecord]:
        with _api_call("fetch commits"):
            gh_repo = self._repo(owner, repo)
            commits = gh_repo.get_commits(sha=branch) if branch else gh_repo.get_commits()
            return [to_commit_record(c) for c in commits[:limit]]


def _check_state(state: str) -> None:
    if state not in LIST_STATES:
        raise ValueError(f"Unknown state: {state!r}. Choose one of {', '.join(LIST_STATES)}.")
