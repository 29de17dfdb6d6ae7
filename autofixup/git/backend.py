"""Version-control backend used by the fixup engine.

Contains:
- WorktreeEntry: File content or symlink target captured from the working tree
- parse_raw_diff: Parse 'git diff --raw -z' into statuses, skipping submodules
- GitBackend: One method per git operation the engine needs, all run
  against a single repository root
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from autofixup.git.blame import BlameLine, parse_porcelain_blame
from autofixup.git.exceptions import GitError
from autofixup.git.rebase import (
    RebaseOutcome,
    get_rebase_head,
    is_rebase_in_progress,
    parse_conflicted_files,
)
from autofixup.git.runner import GitResult, get_repo_root, run_git


DEFAULT_FILE_MODE = "100644"
GITLINK_MODE = "160000"

# Keep the todo list as generated and never open an editor for messages
_NON_INTERACTIVE_EDITORS = {
    "GIT_SEQUENCE_EDITOR": "true",
    "GIT_EDITOR": "true",
}


@dataclass(frozen=True)
class WorktreeEntry:
    """A file's bytes or a symlink's target, as found in the working tree."""

    content: Optional[bytes] = None
    link_target: Optional[str] = None


def parse_raw_diff(output: str) -> dict[str, str]:
    """Parse 'git diff --raw -z --no-renames' into a map of path to status letter.

    Entries where either side is a submodule (gitlink) are skipped.

    Args:
        output: Raw NUL-separated output; each record is
            ":<src mode> <dst mode> <src sha> <dst sha> <status>" then the path

    Returns:
        Dictionary of path to status letter
    """
    fields = output.split("\0")
    changes: dict[str, str] = {}
    for i in range(0, len(fields) - 1, 2):
        meta = fields[i].lstrip(":").split()
        if len(meta) < 5:
            continue
        src_mode, dst_mode, status = meta[0], meta[1], meta[4]
        if GITLINK_MODE in (src_mode, dst_mode):
            continue
        changes[fields[i + 1]] = status[0]
    return changes


class GitBackend:
    """Thin wrapper around the git executable for one repository.

    Every call blocks until git exits. Blob contents are returned exactly as
    stored so they can be written back byte for byte.
    """

    def __init__(self, repo_root: Path):
        self.repo_root = Path(repo_root)
        self._git_dir: Optional[Path] = None

    @classmethod
    def discover(cls, cwd: Optional[Path] = None) -> "GitBackend":
        """Create a backend for the repository containing cwd."""
        return cls(get_repo_root(cwd))

    def _git(self, args: list[str], **kwargs) -> GitResult:
        return run_git(args, cwd=self.repo_root, **kwargs)

    def _out(self, args: list[str]) -> str:
        return self._git(args).stdout.strip()

    @property
    def git_dir(self) -> Path:
        if self._git_dir is None:
            self._git_dir = Path(self._out(["rev-parse", "--absolute-git-dir"]))
        return self._git_dir

    # Refs and history

    def rev_parse(self, ref: str) -> str:
        return self._out(["rev-parse", "--verify", f"{ref}^{{commit}}"])

    def merge_base(self, ref_a: str, ref_b: str) -> str:
        return self._out(["merge-base", ref_a, ref_b])

    def rev_list_count(self, ref: str) -> int:
        """Number of commits reachable from ref, itself included."""
        return int(self._out(["rev-list", "--count", ref]))

    def commit_timestamp(self, ref: str) -> int:
        return int(self._out(["log", "-1", "--format=%ct", ref]))

    def commit_subject(self, ref: str) -> str:
        return self._out(["log", "-1", "--format=%s", ref])

    def blame(self, path: str, first_line: int, last_line: int, ref: str) -> list[BlameLine]:
        """Attribute lines first_line..last_line (1-indexed, inclusive) of path at ref."""
        result = self._git(
            [
                # Root commits must always be reported as boundaries
                "-c", "blame.showRoot=false",
                "blame", "--porcelain", "-L", f"{first_line},{last_line}", ref, "--", path,
            ]
        )
        return parse_porcelain_blame(result.stdout)

    # Diffs and contents

    def diff(
        self,
        path: Optional[str] = None,
        staged: bool = False,
        context: int = 0,
        refs: tuple[str, ...] = (),
    ) -> str:
        """Unified diff, either of the index (staged) or between refs."""
        args = ["diff", "--no-color", "--no-ext-diff", "--no-renames", f"-U{context}"]
        if staged:
            args.append("--cached")
        args.extend(refs)
        if path is not None:
            args.extend(["--", path])
        return self._git(args).stdout

    def show(self, ref: str, path: str) -> str:
        """Content of path as of ref."""
        return self._git(["cat-file", "blob", f"{ref}:{path}"]).stdout

    def show_index(self, path: str) -> str:
        """Content of path as staged in the index."""
        return self._git(["cat-file", "blob", f":{path}"]).stdout

    def staged_paths(self, diff_filter: Optional[str] = "AM") -> list[str]:
        """Paths with staged changes, optionally restricted by git's --diff-filter letters."""
        args = ["diff", "--cached", "--name-only", "--no-renames", "-z"]
        if diff_filter:
            args.append(f"--diff-filter={diff_filter}")
        output = self._git(args).stdout
        return [path for path in output.split("\0") if path]

    def unstaged_changes(self) -> dict[str, str]:
        """Map of path to status letter for tracked files differing from the index.

        Submodules are left out; their checked-out commit is not ours to
        capture or restore.
        """
        output = self._git(["diff", "--raw", "--no-renames", "-z"]).stdout
        return parse_raw_diff(output)

    # Index and working tree

    def hash_object(self, content: str) -> str:
        """Write content to the object store as a blob and return its id."""
        return self._git(
            ["hash-object", "-w", "--no-filters", "--stdin"], input=content
        ).stdout.strip()

    def index_mode(self, path: str) -> str:
        """File mode of path in the index."""
        output = self._out(["ls-files", "-s", "--", path])
        if not output:
            return DEFAULT_FILE_MODE
        return output.split()[0]

    def update_index(self, path: str, mode: str, object_id: str) -> None:
        self._git(["update-index", "--cacheinfo", f"{mode},{object_id},{path}"])

    def read_worktree(self, path: str) -> WorktreeEntry:
        """Current working-tree state of path; symlinks are read, not followed."""
        target = self.repo_root / path
        if target.is_symlink():
            return WorktreeEntry(link_target=os.readlink(target))
        return WorktreeEntry(content=target.read_bytes())

    def write_worktree(self, path: str, entry: WorktreeEntry) -> None:
        """Put path back as entry describes, replacing whatever is there."""
        target = self.repo_root / path
        self.remove_worktree(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        if entry.link_target is not None:
            os.symlink(entry.link_target, target)
        else:
            target.write_bytes(entry.content or b"")

    def remove_worktree(self, path: str) -> None:
        target = self.repo_root / path
        # exists() is False for a dangling symlink
        if target.is_symlink() or target.is_file():
            target.unlink()

    # Mutations

    def stash_create(self) -> str:
        """Create a dangling stash commit of the index and working tree."""
        return self._out(["stash", "create"])

    def commit(self, message: str) -> str:
        self._git(["commit", "--no-verify", "--quiet", "-m", message])
        return self.rev_parse("HEAD")

    def commit_fixup(self, target: str) -> str:
        self._git(["commit", "--no-verify", "--quiet", "--fixup", target])
        return self.rev_parse("HEAD")

    def reset(self, ref: str, mode: str = "mixed") -> None:
        if mode not in ("soft", "mixed", "hard"):
            raise ValueError(f"Invalid reset mode: {mode}")
        self._git(["reset", f"--{mode}", "--quiet", ref])

    def rebase(self, onto: str) -> RebaseOutcome:
        """Interactive, autosquashing, autostashing rebase onto the given ref."""
        return self._run_rebase(["rebase", "-i", "--autosquash", "--autostash", onto])

    def rebase_skip(self) -> RebaseOutcome:
        return self._run_rebase(["rebase", "--skip"])

    def _run_rebase(self, args: list[str]) -> RebaseOutcome:
        env = os.environ.copy()
        env.update(_NON_INTERACTIVE_EDITORS)
        result = self._git(args, env=env, allow_no_match=True)
        if result.ok:
            return RebaseOutcome(success=True)

        if not is_rebase_in_progress(self.git_dir):
            raise GitError(
                f"Git command failed: git {' '.join(args)}\n{(result.stderr or result.stdout).strip()}"
            )
        return RebaseOutcome(
            success=False,
            conflicted_files=self.conflicted_files(),
            step_ref=get_rebase_head(self.git_dir),
        )

    def conflicted_files(self) -> list[str]:
        return parse_conflicted_files(self._git(["status", "--porcelain=v1"]).stdout)

    def cherry_pick(self, ref: str, no_commit: bool = True) -> bool:
        """Apply the change of ref on top of HEAD.

        Returns:
            True if it applied cleanly, False if it stopped on a conflict.
        """
        args = ["cherry-pick"]
        if no_commit:
            args.append("--no-commit")
        args.append(ref)
        return self._git(args, allow_no_match=True).ok
