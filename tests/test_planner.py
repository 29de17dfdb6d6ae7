"""Tests for autofixup.fixup.planner module."""

import io
from unittest.mock import MagicMock, call

import pytest

from autofixup.fixup import (
    AttributionDecision,
    AttributionResolver,
    FixupPlanner,
    RunState,
    plan_transformations,
)


BASE = "a\nb\nc\nd\ne\n"


def _resolver_by_line(commits):
    """Resolver stand-in attributing by the 0-indexed first line of each hunk."""
    resolver = MagicMock(spec=AttributionResolver)

    def resolve(transformation, line_count=None):
        commit = commits.get(transformation.from_first_line)
        if commit is None:
            return AttributionDecision(transformation, reason="ambiguous")
        return AttributionDecision(transformation, commit=commit)

    resolver.resolve.side_effect = resolve
    return resolver


@pytest.fixture
def state():
    return RunState(initial_head="init", rebase_limit_ref="limit", stash_ref="stash", staged_commit="tmp")


@pytest.fixture
def backend(mock_backend):
    mock_backend.show.return_value = BASE
    mock_backend.index_mode.return_value = "100644"
    mock_backend.hash_object.side_effect = lambda content: f"blob{len(mock_backend.hash_object.call_args_list)}"
    mock_backend.commit_fixup.side_effect = lambda target: f"fixup-{target}"
    return mock_backend


class TestPlanTransformations:
    """Tests for plan_transformations function."""

    def test_passes_line_count(self):
        """Test that the committed line count reaches the resolver."""
        resolver = _resolver_by_line({0: "c1"})

        decisions = plan_transformations(resolver, "f", "@@ -1 +1 @@\n", "z\nb\nc\nd\ne\n", BASE)

        assert [d.commit for d in decisions] == ["c1"]
        assert resolver.resolve.call_args.args[1] == 5


class TestGenerateFixups:
    """Tests for FixupPlanner.generate_fixups."""

    def test_applies_hunks_bottom_up(self, backend, state):
        """Test that each fixup holds the hunks applied so far, lowest first."""
        backend.diff.return_value = "@@ -1 +1 @@\n-a\n+z\n@@ -5 +5 @@\n-e\n+y\n"
        state.staged_contents["f"] = "z\nb\nc\nd\ny\n"
        planner = FixupPlanner(backend, _resolver_by_line({0: "c1", 4: "c2"}), state)

        created = planner.generate_fixups("f")

        assert backend.hash_object.call_args_list == [
            call("a\nb\nc\nd\ny\n"),
            call("z\nb\nc\nd\ny\n"),
        ]
        assert backend.commit_fixup.call_args_list == [call("c2"), call("c1")]
        assert created == ["fixup-c2", "fixup-c1"]
        assert state.fixup_commits == ["fixup-c2", "fixup-c1"]

    def test_diffs_initial_head_against_snapshot(self, backend, state):
        """Test that hunks come from the temporary commit, not the index."""
        backend.diff.return_value = ""
        state.staged_contents["f"] = BASE
        planner = FixupPlanner(backend, _resolver_by_line({}), state)

        planner.generate_fixups("f")

        backend.diff.assert_called_once_with("f", refs=("init", "tmp"))
        backend.show.assert_called_with("init", "f")

    def test_unattributable_hunks_are_not_applied(self, backend, state):
        """Test that a hunk left staged never reaches a fixup."""
        backend.diff.return_value = "@@ -2 +2 @@\n-b\n+q\n@@ -4,0 +5 @@ d\n+x\n"
        state.staged_contents["f"] = "a\nq\nc\nd\nx\ne\n"
        planner = FixupPlanner(backend, _resolver_by_line({4: "c3"}), state)

        planner.generate_fixups("f")

        backend.hash_object.assert_called_once_with("a\nb\nc\nd\nx\ne\n")
        backend.commit_fixup.assert_called_once_with("c3")

    def test_index_updated_before_each_fixup(self, backend, state):
        """Test that the blob is staged with the file's mode."""
        backend.index_mode.return_value = "100755"
        backend.diff.return_value = "@@ -3 +3 @@\n-c\n+z\n"
        state.staged_contents["f"] = "a\nb\nz\nd\ne\n"
        planner = FixupPlanner(backend, _resolver_by_line({2: "c1"}), state)

        planner.generate_fixups("f")

        backend.update_index.assert_called_once_with("f", "100755", "blob1")

    def test_nothing_attributable(self, backend, state):
        """Test that no commit is made when every hunk stays staged."""
        backend.diff.return_value = "@@ -3 +3 @@\n-c\n+z\n"
        state.staged_contents["f"] = "a\nb\nz\nd\ne\n"
        output = io.StringIO()
        planner = FixupPlanner(backend, _resolver_by_line({}), state, output=output, debug=True)

        assert planner.generate_fixups("f") == []
        backend.commit_fixup.assert_not_called()
        assert "left staged" in output.getvalue()

    def test_debug_output(self, backend, state):
        """Test that each fixup is reported in debug mode."""
        backend.diff.return_value = "@@ -3 +3 @@\n-c\n+z\n"
        state.staged_contents["f"] = "a\nb\nz\nd\ne\n"
        output = io.StringIO()
        planner = FixupPlanner(backend, _resolver_by_line({2: "c1"}), state, output=output, debug=True)

        planner.generate_fixups("f")

        assert "f:3: fixup fixup-c1 -> c1" in output.getvalue()
