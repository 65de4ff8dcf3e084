#!/usr/bin/env python3
"""
guard - Pre-flight checks run before any workflow touches a branch.

Order matters: conflicts are checked before the tree is auto-committed,
otherwise conflict markers would be committed into history.
"""

from pathlib import Path
from typing import List, TYPE_CHECKING

from gitwork import console
from gitwork.errors import ConflictsError, GitCommandError, NotARepositoryError
from gitwork.gitops import (
    commit,
    conflicted_paths,
    get_toplevel,
    is_inside_work_tree,
    stage_all,
    working_tree_status,
)

if TYPE_CHECKING:
    from gitwork.workflow import Session


def require_inside_repository(path: Path) -> Path:
    """Return the repository top level, or raise NotARepositoryError."""
    if not is_inside_work_tree(path):
        raise NotARepositoryError(f"gitwork must be run inside a git repository: {path}")
    return get_toplevel(path)


def check_conflicts(repo_path: Path) -> List[str]:
    """Raise ConflictsError listing unmerged paths; return [] when there are none."""
    paths = conflicted_paths(repo_path)
    if paths:
        raise ConflictsError(paths)
    return []


def ensure_clean_tree(repo_path: Path, message: str) -> str:
    """
    Commit every pending change (tracked, untracked, staged) with message.

    Returns:
        "committed" if a commit was made, "clean" if there was nothing to do.
    """
    if not working_tree_status(repo_path):
        return "clean"

    console.warning("Uncommitted changes detected. Staging and committing them now...")
    added = stage_all(repo_path)
    if added.returncode != 0:
        raise GitCommandError(["add", "-A"], added.returncode, added.stderr)

    result = commit(repo_path, message)
    if result.returncode != 0:
        # A branch switch must not happen on a dirty tree
        raise GitCommandError(["commit", "-m", message], result.returncode,
                              result.stderr or result.stdout)

    console.info("Changes committed.")
    return "committed"


def run_preflight(session: "Session") -> str:
    """Conflict check, then clean-tree check. Returns ensure_clean_tree's result."""
    check_conflicts(session.repo_path)
    return ensure_clean_tree(session.repo_path, session.config["auto_save_message"])
