from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator

from safe_commit_hook.models import STAGED_CHANGE_SET_ID, ChangeSet

logger = logging.getLogger(__name__)


class GitError(RuntimeError):
    pass


class ChangeSetSource(ABC):
    @abstractmethod
    def list_staged_files(self, repo_path: Path) -> list[str]:
        raise NotImplementedError

    @abstractmethod
    def list_commit_ids(self, repo_path: Path) -> list[str]:
        raise NotImplementedError

    @abstractmethod
    def list_files_in_commit(self, repo_path: Path, commit_id: str) -> list[str]:
        raise NotImplementedError


class GitChangeSetSource(ChangeSetSource):
    def __init__(self, git: str = "git"):
        self.git = git

    def list_staged_files(self, repo_path: Path) -> list[str]:
        return _paths(self._run(repo_path, ["diff", "--name-only", "--cached", "-z"]))

    def list_commit_ids(self, repo_path: Path) -> list[str]:
        if not self._has_commits(repo_path):
            return []
        return _lines(self._run(repo_path, ["log", "--pretty=format:%h"]))

    def list_files_in_commit(self, repo_path: Path, commit_id: str) -> list[str]:
        args = ["diff-tree", "--root", "--no-commit-id", "--name-only", "-r", "-z", commit_id]
        return _paths(self._run(repo_path, args))

    def _has_commits(self, repo_path: Path) -> bool:
        cmd = [self.git, "-C", str(repo_path), "rev-parse", "--verify", "--quiet", "HEAD"]
        try:
            process = subprocess.run(cmd, text=True, capture_output=True)
        except OSError as exc:
            raise GitError(f"Unable to run git: {exc}") from exc
        return process.returncode == 0

    def _run(self, repo_path: Path, args: list[str]) -> str:
        cmd = [self.git, "-C", str(repo_path), *args]
        logger.debug("running %s", " ".join(cmd))
        try:
            process = subprocess.run(cmd, encoding="utf-8", errors="surrogateescape", capture_output=True)
        except OSError as exc:
            raise GitError(f"Unable to run git: {exc}") from exc
        if process.returncode != 0:
            stderr = (process.stderr or "").strip()
            stdout = (process.stdout or "").strip()
            message = stderr or stdout or "unknown git error"
            raise GitError(f"Git command failed: {' '.join(cmd)}\n{message[:500]}")
        return process.stdout


def iter_change_sets(
    source: ChangeSetSource,
    repo_path: Path,
    *,
    check_all_commits: bool = False,
) -> Iterator[ChangeSet]:
    """Yield every commit (newest first) when asked to, then the staged files."""
    if check_all_commits:
        for commit_id in source.list_commit_ids(repo_path):
            paths = source.list_files_in_commit(repo_path, commit_id)
            yield ChangeSet(id=commit_id, paths=tuple(paths))
    yield ChangeSet(id=STAGED_CHANGE_SET_ID, paths=tuple(source.list_staged_files(repo_path)))


def _lines(output: str) -> list[str]:
    return [line for line in output.splitlines() if line.strip()]


def _paths(output: str) -> list[str]:
    # NUL-separated output is never quoted or octal-escaped
    return [path for path in output.split("\0") if path]
