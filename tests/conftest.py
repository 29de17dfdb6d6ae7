"""Shared test fixtures and configuration."""

import subprocess
import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from autofixup.git import GitBackend


FILE_NAME = "my_file.txt"


def short_to_content(short_form: str) -> str:
    """Turn "a b c" into "a\\nb\\nc\\n" ("a b c\\\\" leaves off the final newline)."""
    short_form = short_form.strip()
    if short_form.endswith("\\"):
        return "\n".join(short_form[:-1].split())
    if not short_form:
        return ""
    return "\n".join(short_form.split()) + "\n"


def content_to_short(content: str) -> str:
    """Inverse of short_to_content."""
    short_form = " ".join(content.split())
    if content and not content.endswith("\n"):
        short_form += "\\"
    return short_form


class GitRepo:
    """A throwaway git repository driven through the git executable."""

    def __init__(self, root: Path):
        self.root = root

    def git(self, *args: str) -> str:
        result = subprocess.run(
            ["git", *args],
            cwd=self.root,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout

    def write(self, content: str, name: str = FILE_NAME) -> None:
        (self.root / name).write_text(content)

    def read(self, name: str = FILE_NAME) -> str:
        return (self.root / name).read_text()

    def write_bytes(self, content: bytes, name: str = FILE_NAME) -> None:
        (self.root / name).write_bytes(content)

    def show_bytes(self, spec: str) -> bytes:
        """Blob content exactly as stored."""
        return subprocess.run(
            ["git", "cat-file", "blob", spec],
            cwd=self.root,
            capture_output=True,
            check=True,
        ).stdout

    def commit_short(self, short_form: str, message: str, name: str = FILE_NAME) -> str:
        self.write(short_to_content(short_form), name)
        self.git("add", name)
        self.git("commit", "-q", "-m", message)
        return self.head()

    def stage_short(self, short_form: str, name: str = FILE_NAME) -> None:
        self.write(short_to_content(short_form), name)
        self.git("add", name)

    def head(self) -> str:
        return self.git("rev-parse", "HEAD").strip()

    def root_commit(self) -> str:
        return self.git("rev-list", "--max-parents=0", "HEAD").strip()

    def show(self, spec: str) -> str:
        return self.git("cat-file", "blob", spec)

    def history(self, name: str = FILE_NAME) -> list[str]:
        """Short form of the file in every commit after the initial one, oldest first."""
        shas = self.git("rev-list", "--reverse", "HEAD").split()[1:]
        return [content_to_short(self.show(f"{sha}:{name}")) for sha in shas]

    def subjects(self) -> list[str]:
        return self.git("log", "--reverse", "--format=%s").splitlines()

    def staged_diff(self) -> str:
        return self.git("diff", "--cached")

    def unstaged_diff(self) -> str:
        return self.git("diff")


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def repo(tmp_path):
    """Create a git repository whose only commit is an empty root commit."""
    repo_dir = tmp_path / "test_repo"
    repo_dir.mkdir()

    git_repo = GitRepo(repo_dir)
    git_repo.git("init", "-q")
    git_repo.git("config", "user.email", "test@example.com")
    git_repo.git("config", "user.name", "Test User")
    git_repo.git("config", "commit.gpgsign", "false")
    git_repo.git("config", "core.autocrlf", "false")
    git_repo.git("config", "core.hooksPath", str(tmp_path / "no-hooks"))
    git_repo.git("commit", "-q", "--allow-empty", "-m", "Initial commit")

    return git_repo


@pytest.fixture
def backend(repo):
    """GitBackend for the temporary repository."""
    return GitBackend(repo.root)


@pytest.fixture
def mock_backend():
    """A GitBackend stand-in whose calls are recorded."""
    return MagicMock(spec=GitBackend)


@pytest.fixture
def mock_git_commands(mocker):
    """Mock subprocess.run for git commands."""
    mock_run = mocker.patch("subprocess.run")
    return mock_run
