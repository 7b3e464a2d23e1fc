"""Tests for porcelain v2 status and log parsing, without a git executable."""

from gitflow_core.git.repository import _parse_track, parse_log, parse_status


def _z(*entries):
    return "\0".join(entries) + "\0"


class TestParseStatus:
    def test_branch_headers(self):
        out = _z(
            "# branch.oid 1234567890abcdef",
            "# branch.head feature",
            "# branch.upstream origin/feature",
            "# branch.ab +2 -1",
        )
        status = parse_status(out)
        assert status.current == "feature"
        assert status.tracking == "origin/feature"
        assert (status.ahead, status.behind) == (2, 1)
        assert status.is_clean

    def test_detached_head(self):
        status = parse_status(_z("# branch.oid abc", "# branch.head (detached)"))
        assert status.current == "HEAD"
        assert status.tracking is None

    def test_staged_and_modified(self):
        out = _z(
            "# branch.head main",
            "1 M. N... 100644 100644 100644 aaa bbb staged.py",
            "1 .M N... 100644 100644 100644 aaa aaa edited.py",
        )
        status = parse_status(out)
        assert status.staged == ["staged.py"]
        assert status.modified == ["edited.py"]
        assert status.total_changes == 2

    def test_staged_then_edited_reported_once(self):
        status = parse_status(_z("# branch.head main", "1 MM N... 100644 100644 100644 aaa bbb both.py"))
        assert status.staged == ["both.py"]
        assert status.modified == []

    def test_paths_with_spaces(self):
        status = parse_status(_z("# branch.head main", "1 A. N... 000000 100644 100644 000 bbb my file.txt"))
        assert status.staged == ["my file.txt"]

    def test_rename_skips_original_path(self):
        out = _z(
            "# branch.head main",
            "2 R. N... 100644 100644 100644 aaa aaa R100 new.py",
            "old.py",
            "1 .M N... 100644 100644 100644 aaa aaa other.py",
        )
        status = parse_status(out)
        assert status.staged == ["new.py"]
        assert status.modified == ["other.py"]

    def test_conflicts_and_untracked(self):
        out = _z(
            "# branch.head main",
            "u UU N... 100644 100644 100644 100644 aaa bbb ccc clash.py",
            "? notes.txt",
        )
        status = parse_status(out)
        assert status.conflicted == ["clash.py"]
        assert status.untracked == ["notes.txt"]
        assert status.staged == [] and status.modified == []


class TestParseTrack:
    def test_ahead_and_behind(self):
        assert _parse_track("ahead 3, behind 1") == (3, 1)

    def test_ahead_only(self):
        assert _parse_track("ahead 2") == (2, 0)

    def test_no_upstream(self):
        assert _parse_track("") == (None, None)
        assert _parse_track("gone") == (None, None)


class TestParseLog:
    def test_parses_records(self):
        out = (
            "\x1eabc123\x1fAda\x1f2024-05-01T10:00:00+00:00\x1ffeat: add x\n\nbody text\n\x1f\n"
            "\x1edef456\x1fGrace\x1f2024-04-30T09:00:00+00:00\x1finitial\n\x1f\n"
        )
        commits = parse_log(out)
        assert [c.sha for c in commits] == ["abc123", "def456"]
        assert commits[0].summary == "feat: add x"
        assert commits[0].message == "feat: add x\n\nbody text"
        assert commits[0].author == "Ada"
        assert commits[0].date.year == 2024
        assert commits[0].files is None

    def test_name_only_files(self):
        out = "\x1eabc\x1fAda\x1f2024-05-01T10:00:00+00:00\x1fmsg\n\x1f\n\na.py\nb.py\n"
        assert parse_log(out, with_files=True)[0].files == ["a.py", "b.py"]
