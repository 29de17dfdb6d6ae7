"""Tests for autofixup.git.rebase module."""

from autofixup.git import (
    RebaseOutcome,
    get_rebase_head,
    is_rebase_in_progress,
    parse_conflicted_files,
)


class TestIsRebaseInProgress:
    """Tests for is_rebase_in_progress function."""

    def test_no_rebase(self, temp_dir):
        """Test a clean git directory."""
        assert not is_rebase_in_progress(temp_dir)

    def test_rebase_merge(self, temp_dir):
        """Test the interactive backend's state directory."""
        (temp_dir / "rebase-merge").mkdir()
        assert is_rebase_in_progress(temp_dir)

    def test_rebase_apply(self, temp_dir):
        """Test the apply backend's state directory."""
        (temp_dir / "rebase-apply").mkdir()
        assert is_rebase_in_progress(temp_dir)


class TestGetRebaseHead:
    """Tests for get_rebase_head function."""

    def test_reads_rebase_head(self, temp_dir):
        """Test reading REBASE_HEAD."""
        (temp_dir / "REBASE_HEAD").write_text("abc123\n")
        assert get_rebase_head(temp_dir) == "abc123"

    def test_falls_back_to_stopped_sha(self, temp_dir):
        """Test reading the stopped commit when REBASE_HEAD is missing."""
        (temp_dir / "rebase-merge").mkdir()
        (temp_dir / "rebase-merge" / "stopped-sha").write_text("def456\n")
        assert get_rebase_head(temp_dir) == "def456"

    def test_none_without_rebase(self, temp_dir):
        """Test that nothing is returned outside of a rebase."""
        assert get_rebase_head(temp_dir) is None


class TestParseConflictedFiles:
    """Tests for parse_conflicted_files function."""

    def test_unmerged_states(self):
        """Test that only unmerged entries are reported."""
        status = "UU a.txt\nM  b.txt\nAA c.txt\n?? d.txt\nDU e.txt\nDD f.txt\n"

        assert parse_conflicted_files(status) == ["a.txt", "c.txt", "e.txt", "f.txt"]

    def test_clean_status(self):
        """Test empty status."""
        assert parse_conflicted_files("") == []


class TestRebaseOutcome:
    """Tests for RebaseOutcome."""

    def test_conflicted(self):
        """Test that conflicted is the inverse of success."""
        assert not RebaseOutcome(success=True).conflicted
        assert RebaseOutcome(success=False, step_ref="abc").conflicted
