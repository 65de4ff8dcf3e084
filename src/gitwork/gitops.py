#!/usr/bin/env python3
"""
gitops - Git command plumbing shared by every gitwork workflow.

Two ways to run git:
- run_git(): returns the CompletedProcess, caller inspects it
- run_step(): a workflow step. Failures are reported as warnings and the
  flow carries on, unless strict is set, in which case GitCommandError
  is raised.
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from gitwork import console
from gitwork.errors import GitCommandError

logger = logging.getLogger("gitwork.gitops")


def run_git(args: List[str], cwd: Path = None, check: bool = False) -> subprocess.CompletedProcess:
    """Run git command and return the result. No timeout: git may block."""
    logger.debug("git %s (cwd=%s)", " ".join(args), cwd)
    result = subprocess.run(
        ["git"] + args,
        capture_output=True,
        text=True,
        check=False,
        cwd=cwd,
        encoding='utf-8',
        errors='replace'
    )
    logger.debug("exit %s", result.returncode)
    if result.returncode != 0 and result.stderr.strip():
        logger.debug("stderr: %s", result.stderr.strip())

    if check and result.returncode != 0:
        raise GitCommandError(args, result.returncode, result.stderr)

    return result


def run_step(args: List[str], cwd: Path, description: str, strict: bool = False) -> bool:
    """
    Run a best-effort workflow step.

    Returns:
        True if git succeeded. On failure prints a warning and returns False,
        or raises GitCommandError when strict.
    """
    result = run_git(args, cwd=cwd)
    if result.returncode == 0:
        return True

    if strict:
        raise GitCommandError(args, result.returncode, result.stderr)

    detail = result.stderr.strip().splitlines()
    reason = detail[-1] if detail else f"exit {result.returncode}"
    console.warning(f"Could not {description}: {reason}")
    return False


def is_inside_work_tree(path: Path) -> bool:
    result = run_git(["rev-parse", "--is-inside-work-tree"], cwd=path)
    return result.returncode == 0 and result.stdout.strip() == "true"


def get_toplevel(path: Path) -> Path:
    result = run_git(["rev-parse", "--show-toplevel"], cwd=path, check=True)
    return Path(result.stdout.strip())


def get_current_branch(repo_path: Path) -> Optional[str]:
    """Get the name of the current branch, None on detached HEAD."""
    result = run_git(["rev-parse", "--abbrev-ref", "HEAD"], cwd=repo_path)
    if result.returncode != 0:
        return None
    name = result.stdout.strip()
    if name.startswith("heads/"):
        name = name[len("heads/"):]
    if name == "HEAD":
        return None
    return name


def list_remotes(repo_path: Path) -> List[str]:
    """Configured remotes, in the order git reports them."""
    result = run_git(["remote"], cwd=repo_path)
    if result.returncode != 0:
        return []
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


def list_remote_branches(repo_path: Path, remote: str) -> List[str]:
    """
    Remote-tracking branches of one remote, without the '<remote>/' prefix.

    The symbolic '<remote>/HEAD' entry is dropped. Sorted and de-duplicated.
    """
    result = run_git(
        ["for-each-ref", "--format=%(refname:short)", f"refs/remotes/{remote}/"],
        cwd=repo_path,
    )
    if result.returncode != 0:
        return []

    prefix = f"{remote}/"
    branches = set()
    for line in result.stdout.splitlines():
        name = line.strip()
        if name.startswith(prefix):
            name = name[len(prefix):]
        if name and name != "HEAD" and name != remote:
            branches.add(name)
    return sorted(branches)


def working_tree_status(repo_path: Path) -> List[str]:
    """Porcelain status lines; empty when the tree is clean."""
    result = run_git(["status", "--porcelain"], cwd=repo_path, check=True)
    return [line for line in result.stdout.splitlines() if line.strip()]


def conflicted_paths(repo_path: Path) -> List[str]:
    result = run_git(["diff", "--name-only", "--diff-filter=U"], cwd=repo_path, check=True)
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


def local_branch_exists(repo_path: Path, branch: str) -> bool:
    result = run_git(["show-ref", "--verify", "--quiet", f"refs/heads/{branch}"], cwd=repo_path)
    return result.returncode == 0


def stage_all(repo_path: Path) -> subprocess.CompletedProcess:
    return run_git(["add", "-A"], cwd=repo_path)


def commit(repo_path: Path, message: str) -> subprocess.CompletedProcess:
    return run_git(["commit", "-m", message, "--quiet"], cwd=repo_path)


# Branch names go to fetch/pull/push as full refs so they never parse as options.

def fetch(repo_path: Path, remote: str, branch: str, strict: bool = False) -> bool:
    return run_step(
        ["fetch", remote, f"refs/heads/{branch}"],
        repo_path,
        f"fetch {remote}/{branch}",
        strict,
    )


def fetch_remote(repo_path: Path, remote: str, strict: bool = False) -> bool:
    """Refresh every remote-tracking branch of remote."""
    return run_step(["fetch", remote], repo_path, f"fetch {remote}", strict)


def checkout(repo_path: Path, branch: str, start_point: Optional[str] = None, strict: bool = False) -> bool:
    """
    Check out branch, or create it with -b from start_point.

    The trailing '--' stops git from reading the name as a path, so a
    branch called 'README.md' never turns into a file checkout.
    """
    if start_point is None:
        args = ["checkout", branch, "--"]
        description = f"check out '{branch}'"
    else:
        args = ["checkout", "-b", branch, start_point, "--"]
        description = f"create '{branch}' from '{start_point}'"
    return run_step(args, repo_path, description, strict)


def checkout_or_track(repo_path: Path, branch: str, remote: str, strict: bool = False) -> bool:
    """
    Check out a local branch, or create it from its remote equivalent.

    Returns True only when HEAD ends up on branch.
    """
    if local_branch_exists(repo_path, branch):
        ok = checkout(repo_path, branch, strict=strict)
    else:
        ok = checkout(repo_path, branch, f"{remote}/{branch}", strict)
    if not ok:
        return False

    current = get_current_branch(repo_path)
    if current == branch:
        return True
    if strict:
        raise GitCommandError(["checkout", branch], 1,
                              f"HEAD is on '{current or 'detached HEAD'}', not '{branch}'")
    console.warning(f"Could not check out '{branch}': HEAD is on '{current}'")
    return False


def pull(repo_path: Path, remote: str, branch: str, strict: bool = False) -> bool:
    """Fetch and merge remote/branch into the current branch."""
    return run_step(
        ["pull", "--no-rebase", remote, f"refs/heads/{branch}", "--quiet"],
        repo_path,
        f"pull {remote}/{branch}",
        strict,
    )


def push(repo_path: Path, remote: str, branch: str, strict: bool = False) -> bool:
    return run_step(
        ["push", remote, f"refs/heads/{branch}", "--quiet"],
        repo_path,
        f"push '{branch}' to {remote}",
        strict,
    )
