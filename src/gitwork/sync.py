#!/usr/bin/env python3
"""
sync - Bring the local trunk branch up to date with the selected remote.
"""

from typing import TYPE_CHECKING

from gitwork import console
from gitwork.gitops import checkout_or_track, fetch, pull

if TYPE_CHECKING:
    from gitwork.workflow import Session


def sync_trunk(session: "Session") -> bool:
    """
    Fetch the trunk, check it out (creating it from <remote>/<trunk> if it
    does not exist locally) and pull it.

    Steps are best-effort: a failure is reported and the next step still runs,
    unless session.strict is set. Merge conflicts from the pull are left for
    the next pre-flight check.

    Returns:
        True if every step succeeded.
    """
    repo, remote, trunk = session.repo_path, session.remote, session.trunk
    strict = session.strict

    console.info(f"Fetching the latest {trunk} branch...")
    ok = fetch(repo, remote, trunk, strict)
    ok = checkout_or_track(repo, trunk, remote, strict) and ok
    ok = pull(repo, remote, trunk, strict) and ok

    if ok:
        console.info(f"Branch '{trunk}' updated.")
    else:
        console.warning(f"{trunk} may not match {remote}/{trunk}.")
    return ok
