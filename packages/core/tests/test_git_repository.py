"""Tests for the git adapter against real temporary repositories."""

import shutil

import pytest

from gitflow_core.errors import GitError
from gitflow_core.git.repository import GitRepository, clone_dir_name

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


@pytest.fixture(autouse=True)
def isolated_git(monkeypatch, tmp_path):
    """Keep the user's git config out of the tests and give commits an identity."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    for prefix in ("GIT_AUTHOR", "GIT_COMMITTER"):
        monkeypatch.setenv(f"{prefix}_NAME", "Test User")
        monkeypatch.setenv(f"{prefix}_EMAIL", "test@example.com")


@pytest.fixture
def repo(tmp_path):
    r = GitRepository(tmp_path / "work")
    r.init(initial_branch="main")
    return r


def _commit_file(repo, name, content, message):
    (repo.path / name).write_text(content)
    repo.add([name])
    return repo.commit(message)


@pytest.fixture
def remote(tmp_path):
    bare = GitRepository(tmp_path / "remote.git")
    bare.init(bare=True, initial_branch="main")
    return bare


class TestRepository:
    def test_plain_directory_is_not_a_repository(self, tmp_path):
        assert GitRepository(tmp_path).is_repository() is False

    def test_init(self, repo):
        assert repo.is_repository()
        assert repo.has_commits() is False
        assert repo.current_branch() == "main"

    def test_empty_repository_has_no_log(self, repo):
        assert repo.log() == []

    def test_missing_remote_url_is_none(self, repo):
        assert repo.remote_url("origin") is None


class TestWorkingTree:
    def test_clean_after_commit(self, repo):
        _commit_file(repo, "a.txt", "one\n", "initial")
        status = repo.status()
        assert status.is_clean
        assert status.current == "main"

    def test_commit_returns_head_hash(self, repo):
        sha = _commit_file(repo, "a.txt", "one\n", "initial")
        assert len(sha) == 40
        assert repo.log(limit=1)[0].sha == sha

    def test_modified_then_staged_then_edited(self, repo):
        _commit_file(repo, "a.txt", "one\n", "initial")

        (repo.path / "a.txt").write_text("two\n")
        status = repo.status()
        assert status.modified == ["a.txt"] and status.staged == []

        repo.add(["a.txt"])
        status = repo.status()
        assert status.staged == ["a.txt"] and status.modified == []

        (repo.path / "a.txt").write_text("three\n")
        status = repo.status()
        assert status.staged == ["a.txt"]
        assert "a.txt" not in status.modified

    def test_untracked_files_are_separate(self, repo):
        _commit_file(repo, "a.txt", "one\n", "initial")
        (repo.path / "new.txt").write_text("x\n")
        status = repo.status()
        assert status.untracked == ["new.txt"]
        assert status.modified == [] and status.staged == []

    def test_new_staged_file_and_modified_unstaged_file(self, repo):
        _commit_file(repo, "a.txt", "one\n", "initial")
        (repo.path / "a.txt").write_text("two\n")
        (repo.path / "b.txt").write_text("new\n")
        repo.add(["b.txt"])

        status = repo.status()

        assert status.staged == ["b.txt"]
        assert status.modified == ["a.txt"]
        assert status.conflicted == []

    def test_diff_cached_and_unstaged(self, repo):
        _commit_file(repo, "a.txt", "one\n", "initial")
        (repo.path / "a.txt").write_text("one\nadded line\n")
        assert "+added line" in repo.diff()
        assert repo.diff(cached=True) == ""

        repo.add_all()
        assert "+added line" in repo.diff(cached=True)
        assert repo.diff() == ""

    def test_diff_between_branches(self, repo):
        _commit_file(repo, "a.txt", "one\n", "initial")
        repo.create_branch("feature")
        _commit_file(repo, "b.txt", "feature work\n", "feat: b")
        assert "+feature work" in repo.diff(revision="main...feature")

    def test_log_is_newest_first(self, repo):
        _commit_file(repo, "a.txt", "1\n", "first")
        _commit_file(repo, "a.txt", "2\n", "second\n\nwith body")
        commits = repo.log()
        assert [c.summary for c in commits] == ["second", "first"]
        assert commits[0].author == "Test User"
        assert commits[0].message == "second\n\nwith body"

    def test_log_with_files(self, repo):
        _commit_file(repo, "a.txt", "1\n", "first")
        assert repo.log(with_files=True)[0].files == ["a.txt"]

    def test_reset_rejects_unknown_mode(self, repo):
        with pytest.raises(ValueError):
            repo.reset(mode="sideways")

    def test_hard_reset_discards_changes(self, repo):
        _commit_file(repo, "a.txt", "one\n", "initial")
        (repo.path / "a.txt").write_text("changed\n")
        repo.reset("HEAD", mode="hard")
        assert repo.status().is_clean

    def test_commit_with_nothing_staged_fails(self, repo):
        _commit_file(repo, "a.txt", "one\n", "initial")
        with pytest.raises(GitError):
            repo.commit("nothing here")


class TestBranches:
    def test_create_switch_delete_round_trip(self, repo):
        _commit_file(repo, "a.txt", "one\n", "initial")

        repo.create_branch("feature/x")
        assert repo.current_branch() == "feature/x"
        assert repo.branch_exists("feature/x")

        repo.checkout("main")
        repo.delete_branch("feature/x")
        assert not repo.branch_exists("feature/x")
        assert repo.current_branch() == "main"

    def test_branches_flags_current_and_default(self, repo):
        _commit_file(repo, "a.txt", "one\n", "initial")
        repo.create_branch("feature", checkout=False)

        by_name = {b.name: b for b in repo.branches(default="main")}
        assert set(by_name) == {"main", "feature"}
        assert by_name["main"].is_current and by_name["main"].is_default
        assert not by_name["feature"].is_current

    def test_unmerged_branch_needs_force(self, repo):
        _commit_file(repo, "a.txt", "one\n", "initial")
        repo.create_branch("feature")
        _commit_file(repo, "b.txt", "b\n", "feature work")
        repo.checkout("main")

        with pytest.raises(GitError):
            repo.delete_branch("feature")
        repo.delete_branch("feature", force=True)
        assert not repo.branch_exists("feature")

    def test_merge(self, repo):
        _commit_file(repo, "a.txt", "one\n", "initial")
        repo.create_branch("feature")
        _commit_file(repo, "b.txt", "b\n", "feature work")
        repo.checkout("main")
        repo.merge("feature")
        assert (repo.path / "b.txt").exists()

    def test_checkout_missing_branch_fails(self, repo):
        _commit_file(repo, "a.txt", "one\n", "initial")
        with pytest.raises(GitError):
            repo.checkout("nope")


class TestStash:
    def test_stash_and_pop(self, repo):
        _commit_file(repo, "a.txt", "one\n", "initial")
        (repo.path / "a.txt").write_text("wip\n")

        repo.stash("wip")
        assert repo.status().is_clean
        assert repo.stash_list() == ["On main: wip"]

        repo.stash_pop()
        assert repo.status().modified == ["a.txt"]
        assert repo.stash_list() == []

    def test_conflicting_pop_keeps_the_entry(self, repo):
        _commit_file(repo, "a.txt", "base\n", "initial")
        (repo.path / "a.txt").write_text("stashed\n")
        repo.stash("wip")
        _commit_file(repo, "a.txt", "committed\n", "conflicting change")

        with pytest.raises(GitError):
            repo.stash_pop()
        assert len(repo.stash_list()) == 1


class TestRemotes:
    def test_push_pull_and_clone(self, repo, remote, tmp_path):
        _commit_file(repo, "a.txt", "one\n", "initial")
        repo.add_remote("origin", str(remote.path))
        assert repo.remotes() == ["origin"]
        assert repo.remote_url() == str(remote.path)

        repo.push("origin", "main", set_upstream=True)
        status = repo.status()
        assert status.tracking == "origin/main"
        assert status.ahead == 0

        other = GitRepository.clone(str(remote.path), target=tmp_path / "other", cwd=tmp_path)
        assert other.path == tmp_path / "other"
        assert other.current_branch() == "main"
        _commit_file(other, "b.txt", "b\n", "from the clone")
        other.push()

        repo.pull("origin", "main")
        assert repo.log(limit=1)[0].summary == "from the clone"

    def test_rejected_push_carries_git_message(self, repo, remote, tmp_path):
        _commit_file(repo, "a.txt", "one\n", "initial")
        repo.add_remote("origin", str(remote.path))
        repo.push("origin", "main", set_upstream=True)

        other = GitRepository.clone(str(remote.path), target=tmp_path / "other", cwd=tmp_path)
        _commit_file(other, "b.txt", "b\n", "remote change")
        other.push()

        _commit_file(repo, "c.txt", "c\n", "local change")
        with pytest.raises(GitError, match="rejected"):
            repo.push("origin", "main")

    def test_fetch_updates_behind_count(self, repo, remote, tmp_path):
        _commit_file(repo, "a.txt", "one\n", "initial")
        repo.add_remote("origin", str(remote.path))
        repo.push("origin", "main", set_upstream=True)

        other = GitRepository.clone(str(remote.path), target=tmp_path / "other", cwd=tmp_path)
        _commit_file(other, "b.txt", "b\n", "remote change")
        other.push()

        repo.fetch("origin")
        assert repo.status().behind == 1


def test_clone_dir_name():
    assert clone_dir_name("https://github.com/octo/hello.git") == "hello"
    assert clone_dir_name("git@github.com:octo/hello.git") == "hello"
    assert clone_dir_name("/srv/repos/project") == "project"
