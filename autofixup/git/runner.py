"""Git command runner and repository utilities.

Contains:
- GitResult: Raw output and exit status of a git invocation
- decode_output / encode_input: Byte-exact conversion of git's I/O
- run_git: Run a git command and classify its exit status
- _run_git_command: Run a git command and return its stripped output
- get_repo_root: Get the root directory of the current git repository
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from autofixup.git.exceptions import GitError


# git is run in bytes mode and decoded here, so line endings (\r\n, lone \r)
# and undecodable bytes survive a round trip unchanged
GIT_ENCODING = "utf-8"
GIT_ERRORS = "surrogateescape"


def decode_output(data: Optional[bytes]) -> str:
    """Decode git output without newline translation."""
    if not data:
        return ""
    return data.decode(GIT_ENCODING, GIT_ERRORS)


def encode_input(text: Optional[str]) -> Optional[bytes]:
    """Encode text for git's stdin; the inverse of decode_output."""
    if text is None:
        return None
    return text.encode(GIT_ENCODING, GIT_ERRORS)


@dataclass
class GitResult:
    """Raw output and exit status of a git invocation."""

    args: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        """True if git exited successfully."""
        return self.returncode == 0

    @property
    def no_match(self) -> bool:
        """True if git exited with status 1 and explained itself.

        Detection-style commands (a rebase stopping on a conflict, a grep
        finding nothing) report this way; it is not an execution fault.
        """
        return self.returncode == 1 and bool((self.stdout + self.stderr).strip())


def run_git(
    args: list[str],
    cwd: Optional[Path] = None,
    env: Optional[dict[str, str]] = None,
    input: Optional[str] = None,
    allow_no_match: bool = False,
) -> GitResult:
    """Run a git command and classify its exit status.

    Args:
        args: List of arguments to pass to git.
        cwd: Directory to run git in (defaults to the current directory).
        env: Full environment for the git process (optional).
        input: Text fed to git's stdin (optional).
        allow_no_match: Whether status 1 with diagnostic output is accepted.

    Returns:
        The GitResult, with stdout left exactly as git wrote it.

    Raises:
        GitError: If git is missing or the exit status is an execution fault.
    """
    try:
        completed = subprocess.run(
            ["git"] + args,
            capture_output=True,
            cwd=cwd,
            env=env,
            input=encode_input(input),
        )
    except FileNotFoundError:
        raise GitError("Git is not installed or not in PATH.")

    result = GitResult(
        args=args,
        returncode=completed.returncode,
        stdout=decode_output(completed.stdout),
        stderr=decode_output(completed.stderr),
    )
    if result.ok or (allow_no_match and result.no_match):
        return result

    raise GitError(
        f"Git command failed: git {' '.join(args)}\n{result.stderr.strip()}"
    )


def _run_git_command(args: list[str], cwd: Optional[Path] = None) -> str:
    """Run a git command and return its output.

    Args:
        args: List of arguments to pass to git.
        cwd: Directory to run git in (optional).

    Returns:
        The stdout of the git command, stripped.

    Raises:
        GitError: If the command fails.
    """
    return run_git(args, cwd=cwd).stdout.strip()


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Get the root directory of the current git repository.

    Returns:
        Path to the repository root.

    Raises:
        GitError: If not in a git repository.
    """
    try:
        root = _run_git_command(["rev-parse", "--show-toplevel"], cwd=cwd)
        return Path(root)
    except GitError:
        raise GitError("Not in a git repository. Please run this command from within a git repo.")
