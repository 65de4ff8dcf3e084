#!/usr/bin/env python3
"""
remotes - Pick the one remote a gitwork session talks to.
"""

from pathlib import Path
from typing import Optional

from gitwork import console
from gitwork.console import InputFunc, safe_input
from gitwork.errors import NoRemotesError, SelectionError
from gitwork.gitops import list_remotes


def select_remote(
    repo_path: Path,
    input_func: InputFunc = safe_input,
    max_attempts: Optional[int] = None,
    preferred: Optional[str] = None,
) -> str:
    """
    Resolve exactly one remote.

    - preferred given: must be a configured remote
    - one remote: used without asking
    - several: numbered prompt, repeated on bad input (see console.choose)

    Raises:
        NoRemotesError: repository has no remotes
        SelectionError: preferred is unknown, or max_attempts ran out
    """
    remotes = list_remotes(repo_path)

    if not remotes:
        raise NoRemotesError(
            "No remotes configured. Add one with: git remote add origin <url>"
        )

    if preferred is not None:
        if preferred not in remotes:
            raise SelectionError(
                f"Remote '{preferred}' is not configured. Available: {', '.join(remotes)}"
            )
        console.success(f"Selected remote: {preferred}")
        return preferred

    if len(remotes) == 1:
        console.info(f"Using the only remote detected: {remotes[0]}")
        return remotes[0]

    console.info("Multiple remotes detected. Please select a remote:")
    index = console.choose("Select a remote: ", remotes, input_func, max_attempts)
    console.success(f"Selected remote: {remotes[index]}")
    return remotes[index]
