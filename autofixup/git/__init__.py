"""Git backend module for autofixup.

This package wraps the git executable with:
- exceptions: GitError, NoStagedChangesError, RebaseConflictError
- runner: GitResult, run_git, _run_git_command, get_repo_root
- blame: BlameLine, parse_porcelain_blame
- rebase: RebaseOutcome, is_rebase_in_progress, get_rebase_head,
          parse_conflicted_files
- backend: GitBackend, WorktreeEntry, parse_raw_diff
"""

# Exceptions
from autofixup.git.exceptions import (
    GitError,
    NoStagedChangesError,
    RebaseConflictError,
)

# Runner utilities
from autofixup.git.runner import (
    GitResult,
    _run_git_command,
    get_repo_root,
    run_git,
)

# Blame parsing
from autofixup.git.blame import (
    BlameLine,
    parse_porcelain_blame,
)

# Rebase state utilities
from autofixup.git.rebase import (
    RebaseOutcome,
    get_rebase_head,
    is_rebase_in_progress,
    parse_conflicted_files,
)

# Backend
from autofixup.git.backend import (
    GitBackend,
    WorktreeEntry,
    parse_raw_diff,
)


__all__ = [
    # Exceptions
    "GitError",
    "NoStagedChangesError",
    "RebaseConflictError",
    # Runner
    "GitResult",
    "run_git",
    "_run_git_command",
    "get_repo_root",
    # Blame
    "BlameLine",
    "parse_porcelain_blame",
    # Rebase
    "RebaseOutcome",
    "is_rebase_in_progress",
    "get_rebase_head",
    "parse_conflicted_files",
    # Backend
    "GitBackend",
    "WorktreeEntry",
    "parse_raw_diff",
]
