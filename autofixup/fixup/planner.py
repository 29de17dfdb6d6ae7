"""Fixup planning and execution for autofixup fixup module.

Contains:
- plan_transformations: Attribute every hunk of one file (read only)
- FixupPlanner: Create one fixup commit per attributable hunk of a file
"""

import sys
from typing import Optional, TextIO

from autofixup.fixup.attribution import AttributionResolver
from autofixup.fixup.models import AttributionDecision, RunState, split_lines
from autofixup.fixup.parser import parse_transformations
from autofixup.git.backend import GitBackend


def plan_transformations(
    resolver: AttributionResolver,
    path: str,
    diff_output: str,
    staged_content: str,
    base_content: str,
) -> list[AttributionDecision]:
    """Attribute every hunk of one file.

    Args:
        resolver: Resolver blaming the revision base_content was read from
        path: Path of the file
        diff_output: Zero-context diff from base_content to staged_content
        staged_content: Staged content of the file
        base_content: Content of the file at the blamed revision

    Returns:
        One AttributionDecision per hunk, in source order
    """
    line_count = len(split_lines(base_content))
    transformations = parse_transformations(diff_output, path, staged_content)
    return [resolver.resolve(t, line_count) for t in transformations]


class FixupPlanner:
    """Turns the staged change of a file into fixup commits."""

    def __init__(
        self,
        backend: GitBackend,
        resolver: AttributionResolver,
        state: RunState,
        output: Optional[TextIO] = None,
        debug: bool = False,
    ):
        self.backend = backend
        self.resolver = resolver
        self.state = state
        self.output = output or sys.stdout
        self.debug = debug

    def decisions_for(self, path: str) -> list[AttributionDecision]:
        """Attribute the hunks between the initial HEAD and the staged snapshot."""
        diff_output = self.backend.diff(
            path, refs=(self.state.initial_head, self.state.staged_commit)
        )
        return plan_transformations(
            self.resolver,
            path,
            diff_output,
            self.state.staged_contents[path],
            self.backend.show(self.state.initial_head, path),
        )

    def generate_fixups(self, path: str) -> list[str]:
        """Create a fixup commit for each attributable hunk of path.

        Hunks are applied bottom to top on the file as of the initial HEAD,
        so line numbers of the hunks still to apply never shift. Each
        intermediate snapshot goes straight into the index; the working
        tree is not touched.

        Args:
            path: A staged, modified file

        Returns:
            The fixup commits created, in creation order
        """
        decisions = [d for d in self.decisions_for(path) if d.attributable]
        if not decisions:
            if self.debug:
                print(f"  {path}: nothing attributable, left staged", file=self.output)
            return []

        current_lines = split_lines(self.backend.show(self.state.initial_head, path))
        mode = self.backend.index_mode(path)
        created = []

        for decision in reversed(decisions):
            transformation = decision.transformation
            edit = transformation.range_to_apply_edit()
            current_lines[edit.start:edit.stop] = list(transformation.into_lines or ())

            object_id = self.backend.hash_object("".join(current_lines))
            self.backend.update_index(path, mode, object_id)
            fixup_ref = self.backend.commit_fixup(decision.commit)

            self.state.fixup_commits.append(fixup_ref)
            created.append(fixup_ref)
            if self.debug:
                print(
                    f"  {path}:{edit.start + 1}: fixup {fixup_ref[:8]} -> {decision.commit[:8]}",
                    file=self.output,
                )

        return created
