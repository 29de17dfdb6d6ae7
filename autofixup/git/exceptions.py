"""Git-related exception classes.

Contains all exception classes for Git operations:
- GitError: Base exception for git-related errors (backend execution faults)
- NoStagedChangesError: Raised when there are no staged changes
- RebaseConflictError: Raised when a history rewrite stops on a conflict
  that is not one of our own fixup commits
"""

from typing import Optional


class GitError(Exception):
    """Custom exception for git-related errors."""

    pass


class NoStagedChangesError(GitError):
    """Raised when there are no staged changes."""

    pass


class RebaseConflictError(GitError):
    """Raised when the rebase stops on a conflict we cannot resolve ourselves.

    The repository is left in the middle of the rebase so the conflict can be
    resolved with git's own tooling (or abandoned with ``git rebase --abort``).
    """

    def __init__(
        self,
        message: str,
        conflicted_files: Optional[list[str]] = None,
        step_ref: Optional[str] = None,
    ):
        super().__init__(message)
        self.conflicted_files = conflicted_files or []
        self.step_ref = step_ref
