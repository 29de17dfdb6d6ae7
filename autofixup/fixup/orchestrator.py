"""Run orchestration for autofixup fixup module.

Contains:
- TEMP_COMMIT_MESSAGE: Message of the commit holding the staged snapshot
- format_undo_message: Build the manual undo instructions
- RunOrchestrator: Fold staged hunks into history and restore the index
"""

import sys
from typing import Optional, TextIO

from autofixup.config import FixupConfig
from autofixup.fixup.attribution import AttributionResolver
from autofixup.fixup.models import RunState
from autofixup.fixup.planner import FixupPlanner
from autofixup.git.backend import GitBackend, WorktreeEntry
from autofixup.git.exceptions import NoStagedChangesError, RebaseConflictError


TEMP_COMMIT_MESSAGE = "autofixup: staged changes before run"


def format_undo_message(initial_head: str, stash_ref: str) -> str:
    """Build the manual undo instructions.

    Args:
        initial_head: HEAD before the run
        stash_ref: Dangling stash commit of the index and working tree

    Returns:
        A single line of shell commands restoring the pre-run state
    """
    message = f"To undo: git reset --hard {initial_head}"
    if stash_ref:
        message += f"; git stash apply --index {stash_ref}"
    return message


class RunOrchestrator:
    """Fold staged hunks into the commits that introduced the lines they touch.

    Constructing the orchestrator records HEAD, the rebase limit and a
    recovery stash, and prints how to undo the run. run() then:

    1. snapshots the staged contents and unstaged working-tree changes
    2. commits the whole index as a temporary commit
    3. hard resets back to the initial HEAD
    4. creates fixup commits for every attributable hunk
    5. rebases with --autosquash from the rebase limit, skipping any of our
       own fixups that conflict
    6. reapplies skipped fixups without committing
    7. restores the index from the temporary commit on top of the
       rewritten history, then the unstaged working-tree changes

    Only one run may touch a repository at a time.
    """

    def __init__(
        self,
        backend: GitBackend,
        config: Optional[FixupConfig] = None,
        output: Optional[TextIO] = None,
    ):
        self.backend = backend
        self.config = config or FixupConfig()
        self.output = output or sys.stdout

        initial_head = backend.rev_parse("HEAD")
        # merge-base keeps us from moving the branch past the limit
        rebase_limit_ref = backend.merge_base(self.config.rebase_limit, initial_head)
        self.state = RunState(
            initial_head=initial_head,
            rebase_limit_ref=rebase_limit_ref,
            stash_ref=backend.stash_create(),
        )

        self.print_how_to_undo()

    def print_how_to_undo(self) -> None:
        print(format_undo_message(self.state.initial_head, self.state.stash_ref), file=self.output)

    def _debug(self, message: str) -> None:
        if self.config.debug:
            print(message, file=self.output)

    def run(self) -> RunState:
        """Run the whole fixup sequence.

        Returns:
            The run state, including fixups created and fixups that failed

        Raises:
            NoStagedChangesError: If nothing is staged (nothing is modified)
            RebaseConflictError: If the rebase stops on a commit that is not
                one of our fixups; the rebase is left in progress
            GitError: If any git command fails
        """
        state = self.state
        backend = self.backend

        if not backend.staged_paths(None):
            raise NoStagedChangesError(
                "No staged changes found. Stage your changes first with: git add <files>"
            )
        state.staged_paths = backend.staged_paths("AM")
        modified_paths = set(backend.staged_paths("M"))

        try:
            state.staged_contents = {path: backend.show_index(path) for path in state.staged_paths}
            state.unstaged_contents = self._capture_unstaged()

            state.staged_commit = backend.commit(TEMP_COMMIT_MESSAGE)
            backend.reset(state.initial_head, "hard")

            planner = FixupPlanner(
                backend,
                AttributionResolver(
                    backend,
                    state.rebase_limit_ref,
                    policy=self.config.insert_checks,
                    blame_ref=state.initial_head,
                ),
                state,
                output=self.output,
                debug=self.config.debug,
            )
            for path in state.staged_paths:
                if path in modified_paths:
                    planner.generate_fixups(path)

            if state.fixup_commits:
                # The index moved with each fixup; bring the working tree along
                backend.reset("HEAD", "hard")
                self._rewrite()
                self._reapply_failed()

            state.final_head = backend.rev_parse("HEAD")
            backend.reset(state.staged_commit, "hard")
            backend.reset(state.final_head, "soft")
            self._restore_unstaged()

            self._debug(
                f"Folded {len(state.fixup_commits) - len(state.failed_fixups)} fixup(s), "
                f"{len(state.failed_fixups)} left staged after conflicts"
            )
        finally:
            self.print_how_to_undo()

        return state

    def _capture_unstaged(self) -> dict[str, Optional[WorktreeEntry]]:
        contents: dict[str, Optional[WorktreeEntry]] = {}
        for path, status in self.backend.unstaged_changes().items():
            if status == "D":
                contents[path] = None
            else:
                contents[path] = self.backend.read_worktree(path)
        return contents

    def _restore_unstaged(self) -> None:
        for path, entry in self.state.unstaged_contents.items():
            if entry is None:
                self.backend.remove_worktree(path)
            else:
                self.backend.write_worktree(path, entry)

    def _rewrite(self) -> None:
        """Autosquash the fixups, skipping our own fixups that conflict."""
        state = self.state
        outcome = self.backend.rebase(state.rebase_limit_ref)

        while outcome.conflicted:
            fixup_ref = self._own_fixup(outcome.step_ref)
            if fixup_ref is None:
                raise RebaseConflictError(
                    "Rebase stopped on a conflict outside of the generated fixups "
                    f"({', '.join(outcome.conflicted_files) or 'unknown files'}). "
                    "Resolve it and run 'git rebase --continue', or 'git rebase --abort'.",
                    conflicted_files=outcome.conflicted_files,
                    step_ref=outcome.step_ref,
                )

            self._debug(f"  Conflict folding fixup {fixup_ref[:8]}, skipping it")
            state.failed_fixups.append(fixup_ref)
            outcome = self.backend.rebase_skip()

    def _own_fixup(self, step_ref: Optional[str]) -> Optional[str]:
        """The fixup created by this run that step_ref names, if any."""
        if not step_ref:
            return None
        for ref in self.state.fixup_commits:
            if ref.startswith(step_ref):
                return ref
        return None

    def _reapply_failed(self) -> None:
        """Put skipped fixups back into the index without committing them."""
        failed = sorted(self.state.failed_fixups, key=self.state.fixup_commits.index)
        for ref in failed:
            if self.backend.cherry_pick(ref, no_commit=True):
                self._debug(f"  Reapplied fixup {ref[:8]} as a staged change")
            else:
                # Still recovered from the temporary commit below
                self._debug(f"  Could not reapply fixup {ref[:8]} cleanly")
