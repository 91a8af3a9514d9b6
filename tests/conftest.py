"""Shared fixtures: throwaway git repositories with scripted history."""

import os
import shutil
import subprocess
from pathlib import Path

import pytest

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def _git(repo: Path, *args: str, env: dict | None = None) -> None:
    subprocess.run(["git", *args], cwd=repo, check=True, capture_output=True, env=env)


def commit_as(repo: Path, author: str, filename: str, content: str) -> None:
    """Write ``content`` to ``filename`` and commit it as ``author``."""
    (repo / filename).write_text(content)
    env = {
        **os.environ,
        "GIT_AUTHOR_NAME": author,
        "GIT_AUTHOR_EMAIL": "dev@example.com",
        "GIT_COMMITTER_NAME": author,
        "GIT_COMMITTER_EMAIL": "dev@example.com",
    }
    _git(repo, "add", filename, env=env)
    _git(repo, "-c", "commit.gpgsign=false", "commit", "-q", "-m", f"update {filename}", env=env)


@pytest.fixture
def make_git_repo():
    """Factory creating a git repo at a path with ``(author, filename, content)`` commits."""

    def _make(path: Path, commits: list[tuple[str, str, str]]) -> Path:
        path.mkdir(parents=True, exist_ok=True)
        _git(path, "init", "-q")
        for author, filename, content in commits:
            commit_as(path, author, filename, content)
        return path

    return _make
