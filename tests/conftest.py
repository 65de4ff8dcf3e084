"""Shared fixtures: throwaway repositories wired to a local bare remote."""

import subprocess
from pathlib import Path
from typing import List

import pytest

from gitwork.errors import UserCancelled
from gitwork.workflow import Session


def git(args: List[str], cwd: Path) -> str:
    """Run git in a test repository; fail the test if it fails."""
    result = subprocess.run(
        ["git"] + args, cwd=cwd, capture_output=True, text=True, check=True
    )
    return result.stdout.strip()


def commit_file(repo: Path, name: str, content: str, message: str) -> str:
    (repo / name).write_text(content)
    git(["add", name], repo)
    git(["commit", "-m", message, "--quiet"], repo)
    return git(["rev-parse", "HEAD"], repo)


def commit_count(repo: Path, ref: str = "HEAD") -> int:
    return int(git(["rev-list", "--count", ref], repo))


def remote_sha(bare: Path, branch: str) -> str:
    """Commit a branch points at in the bare remote, '' if it does not exist."""
    result = subprocess.run(
        ["git", "rev-parse", "--verify", "--quiet", f"refs/heads/{branch}"],
        cwd=bare, capture_output=True, text=True,
    )
    return result.stdout.strip()


class ScriptedInput:
    """Stands in for input(): replays answers, then behaves like end of input."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.prompts = []

    def __call__(self, prompt: str = "") -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise UserCancelled()
        return self.answers.pop(0)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep git and gitwork away from the real user's config."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GITWORK_HOME", str(home / ".gitwork"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@test.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@test.com")
    monkeypatch.setenv("GIT_TERMINAL_PROMPT", "0")
    return home


@pytest.fixture
def bare_remote(tmp_path) -> Path:
    bare = tmp_path / "remote.git"
    subprocess.run(["git", "init", "--bare", "--quiet", str(bare)], check=True)
    git(["symbolic-ref", "HEAD", "refs/heads/main"], bare)
    return bare


@pytest.fixture
def repo(tmp_path, bare_remote) -> Path:
    """Working repository on 'main', one commit, pushed to remote 'origin'."""
    work = tmp_path / "work"
    work.mkdir()
    git(["init", "--quiet"], work)
    git(["symbolic-ref", "HEAD", "refs/heads/main"], work)
    commit_file(work, "README.md", "hello\n", "Initial")
    git(["remote", "add", "origin", str(bare_remote)], work)
    git(["push", "--quiet", "origin", "main"], work)
    git(["fetch", "--quiet", "origin"], work)
    return work


@pytest.fixture
def other_clone(tmp_path, repo, bare_remote) -> Path:
    """A second clone of the remote, used to publish changes 'from elsewhere'."""
    other = tmp_path / "other"
    subprocess.run(
        ["git", "clone", "--quiet", str(bare_remote), str(other)],
        check=True, capture_output=True,
    )
    return other


@pytest.fixture
def make_session():
    def _make(repo_path: Path, answers=(), remote: str = "origin", **config) -> Session:
        return Session(repo_path, remote, config, ScriptedInput(answers))
    return _make


def make_conflict(repo: Path, name: str = "README.md"):
    """Leave repo mid-merge with an unresolved conflict in name."""
    git(["checkout", "--quiet", "-b", "side"], repo)
    commit_file(repo, name, "side version\n", "Side change")
    git(["checkout", "--quiet", "main"], repo)
    commit_file(repo, name, "main version\n", "Main change")
    subprocess.run(
        ["git", "merge", "side"], cwd=repo, capture_output=True, text=True
    )
