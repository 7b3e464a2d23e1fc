"""Tests for GitHub remote URL parsing."""

import pytest

from gitflow_core.errors import PreconditionError
from gitflow_core.gh.remote import expand_clone_url, parse_repo_slug


class TestParseRepoSlug:
    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/octo/hello.git",
            "https://github.com/octo/hello",
            "https://github.com/octo/hello/",
            "git@github.com:octo/hello.git",
            "ssh://git@github.com/octo/hello.git",
        ],
    )
    def test_supported_forms(self, url):
        assert parse_repo_slug(url) == ("octo", "hello")

    def test_repo_name_with_dots(self):
        assert parse_repo_slug("https://github.com/octo/hello.world.git") == ("octo", "hello.world")

    def test_missing_remote(self):
        with pytest.raises(PreconditionError, match="No remote"):
            parse_repo_slug(None)

    def test_non_github_remote(self):
        with pytest.raises(PreconditionError, match="Invalid GitHub repository URL"):
            parse_repo_slug("https://gitlab.com/octo/hello.git")


class TestExpandCloneUrl:
    def test_shorthand(self):
        assert expand_clone_url("octo/hello") == "https://github.com/octo/hello.git"

    def test_full_url_unchanged(self):
        assert expand_clone_url("git@github.com:octo/hello.git") == "git@github.com:octo/hello.git"

    def test_local_path_unchanged(self):
        assert expand_clone_url("/tmp/repo") == "/tmp/repo"

    def test_garbage_rejected(self):
        with pytest.raises(PreconditionError):
            expand_clone_url("not a repo")
