"""Git rebase state detection utilities.

Contains functions for detecting and inspecting an interrupted rebase:
- RebaseOutcome: Result of starting or resuming a rebase
- is_rebase_in_progress: Check if a rebase is currently in progress
- get_rebase_head: Get the commit hash the rebase stopped on (REBASE_HEAD)
- parse_conflicted_files: Get files with unresolved conflicts from git status
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class RebaseOutcome:
    """Result of starting or resuming a rebase."""

    success: bool
    conflicted_files: list[str] = field(default_factory=list)
    step_ref: Optional[str] = None  # Commit being applied when the rebase stopped

    @property
    def conflicted(self) -> bool:
        return not self.success


def is_rebase_in_progress(git_dir: Path) -> bool:
    """Check if a rebase is currently in progress.

    A rebase is in progress when .git/rebase-merge (interactive and merge
    backends) or .git/rebase-apply (apply backend) exists.

    Args:
        git_dir: The repository's git directory.

    Returns:
        True if a rebase is in progress, False otherwise.
    """
    return (git_dir / "rebase-merge").exists() or (git_dir / "rebase-apply").exists()


def get_rebase_head(git_dir: Path) -> Optional[str]:
    """Get the commit hash the rebase stopped on (REBASE_HEAD).

    Falls back to rebase-merge/stopped-sha, which older versions of git
    may write in abbreviated form.

    Args:
        git_dir: The repository's git directory.

    Returns:
        The commit hash being applied, or None if no rebase stopped on one.
    """
    for candidate in (git_dir / "REBASE_HEAD", git_dir / "rebase-merge" / "stopped-sha"):
        if candidate.exists():
            value = candidate.read_text().strip()
            if value:
                return value
    return None


def parse_conflicted_files(status: str) -> list[str]:
    """Get list of files with unresolved conflicts.

    Args:
        status: Output of 'git status --porcelain=v1'.

    Returns:
        List of file paths with conflicts.
    """
    conflicted = []
    for line in status.split("\n"):
        if len(line) >= 3:
            xy = line[:2]
            # Unmerged states: UU, AA, DD, AU, UA, DU, UD
            if "U" in xy or xy in ("AA", "DD"):
                conflicted.append(line[3:])
    return conflicted
