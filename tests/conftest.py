from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path

import pytest

from safe_commit_hook.git import ChangeSetSource

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")

GIT_IDENTITY = [
    "-c",
    "user.name=safe-commit-hook tests",
    "-c",
    "user.email=tests@example.com",
    "-c",
    "commit.gpgsign=false",
]


class FakeChangeSetSource(ChangeSetSource):
    def __init__(self, staged: list[str] | None = None, commits: dict[str, list[str]] | None = None):
        self.staged = list(staged or [])
        self.commits = dict(commits or {})

    def list_staged_files(self, repo_path: Path) -> list[str]:
        return list(self.staged)

    def list_commit_ids(self, repo_path: Path) -> list[str]:
        return list(self.commits)

    def list_files_in_commit(self, repo_path: Path, commit_id: str) -> list[str]:
        return list(self.commits[commit_id])


def git(repo: Path, *args: str) -> str:
    process = subprocess.run(
        ["git", *GIT_IDENTITY, "-C", str(repo), *args],
        text=True,
        capture_output=True,
        check=True,
    )
    return process.stdout


def create_unstaged_file(repo: Path, name: str, content: str = "") -> Path:
    path = repo / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def create_staged_file(repo: Path, name: str, content: str = "") -> Path:
    path = create_unstaged_file(repo, name, content)
    git(repo, "add", name)
    return path


def commit_file(repo: Path, name: str) -> None:
    create_staged_file(repo, name, content=name)
    git(repo, "commit", "-m", f"add {name}")


def write_rules(path: Path, rules: list[dict]) -> Path:
    path.write_text(json.dumps(rules), encoding="utf-8")
    return path


def rule(part: str, pattern: str, caption: str, type: str = "regex") -> dict:
    return {
        "part": part,
        "type": type,
        "pattern": pattern,
        "caption": caption,
        "description": f"{caption} test rule",
    }


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    repo = tmp_path / "fake_git"
    repo.mkdir()
    git(repo, "init", "--quiet")
    return repo


@pytest.fixture
def repo_dir(tmp_path: Path) -> Path:
    repo = tmp_path / "work"
    repo.mkdir()
    return repo


@pytest.fixture
def empty_rules(tmp_path: Path) -> Path:
    return write_rules(tmp_path / "empty.json", [])


@pytest.fixture
def rsa_rules(tmp_path: Path) -> Path:
    return write_rules(tmp_path / "rsa.json", [rule("filename", r"\A.*_rsa\Z", "Private SSH key")])


@pytest.fixture
def everything_rules(tmp_path: Path) -> Path:
    return write_rules(tmp_path / "everything.json", [rule("filename", ".*", "Detected literally everything!")])


@pytest.fixture
def pem_rules(tmp_path: Path) -> Path:
    return write_rules(
        tmp_path / "pem_extension.json",
        [rule("extension", "pem", "Potential cryptographic private key", type="match")],
    )


@pytest.fixture
def path_rules(tmp_path: Path) -> Path:
    return write_rules(
        tmp_path / "path.json",
        [rule("path", r"\A\.?gem/credentials\Z", "Rubygems credentials file")],
    )
