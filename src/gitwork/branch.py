#!/usr/bin/env python3
"""
branch - Branch name validation and the branch-level steps of the workflows.
"""

import re
from pathlib import Path
from typing import List, Optional

from gitwork import console
from gitwork.errors import GitCommandError, InvalidBranchNameError
from gitwork.gitops import get_current_branch, list_remote_branches, push

BRANCH_NAME_RE = re.compile(r'^[a-zA-Z0-9._/-]+$')


def is_valid_branch_name(name: str) -> bool:
    return isinstance(name, str) and bool(BRANCH_NAME_RE.fullmatch(name))


def validate_branch_name(name: str) -> str:
    """
    Accept only letters, digits, '.', '_', '/' and '-'.

    Rejecting everything else keeps user input from being read by git as an
    option (e.g. '--force') or a revision expression.
    """
    if not is_valid_branch_name(name):
        raise InvalidBranchNameError(name)
    return name


def show_remote_branches(repo_path: Path, remote: str) -> List[str]:
    branches = list_remote_branches(repo_path, remote)
    console.info("Available branches:")
    if branches:
        for name in branches:
            print(f"  {name}")
    else:
        print("  (none)")
    return branches


def push_current_branch(repo_path: Path, remote: str, strict: bool = False,
                        expected: Optional[str] = None) -> str:
    """
    Push whatever branch is checked out to the same name on remote.

    With expected set, refuse to push unless HEAD is on that branch.
    """
    branch = get_current_branch(repo_path)
    if branch is None:
        raise GitCommandError(["rev-parse", "--abbrev-ref", "HEAD"], 1,
                              "HEAD is detached; nothing to push")
    if expected is not None and branch != expected:
        raise GitCommandError(["push", remote, expected], 1,
                              f"HEAD is on '{branch}', not '{expected}'; refusing to push")

    if push(repo_path, remote, branch, strict):
        console.success(f"Pushed changes to branch '{branch}'.")
    return branch
