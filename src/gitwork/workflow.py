#!/usr/bin/env python3
"""
workflow - The three guarded gitwork flows.

Each flow runs to completion or aborts; there is no rollback.

    new branch     guard -> sync trunk -> name -> validate -> create -> push
    update branch  guard -> sync trunk -> fetch -> name -> validate -> checkout/track -> pull -> push
    push to trunk  guard -> checkout trunk -> pull -> confirm -> commit -> push

Session carries everything a flow needs, so guard and sync never reach for
globals.
"""

import logging
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from gitwork import console
from gitwork.branch import push_current_branch, show_remote_branches, validate_branch_name
from gitwork.config import DEFAULTS, get_max_attempts
from gitwork.console import InputFunc, safe_input
from gitwork.gitops import checkout, checkout_or_track, fetch_remote, pull, push
from gitwork.guard import ensure_clean_tree, run_preflight
from gitwork.sync import sync_trunk

logger = logging.getLogger("gitwork.workflow")


class State(Enum):
    IDLE = "idle"
    GUARDING = "guarding"
    SYNCING = "syncing"
    AWAITING_INPUT = "awaiting-input"
    VALIDATING = "validating"
    EXECUTING = "executing"
    DONE = "done"
    ABORTED = "aborted"


class Session:
    """One gitwork run: repository, chosen remote, settings and flow state."""

    def __init__(
        self,
        repo_path: Path,
        remote: str,
        config: Optional[Dict[str, Any]] = None,
        input_func: InputFunc = safe_input,
    ):
        self.repo_path = Path(repo_path)
        self._remote = remote
        self.config = dict(DEFAULTS)
        if config:
            self.config.update(config)
        self.input_func = input_func
        self.state = State.IDLE
        self.history: List[State] = [State.IDLE]

    @property
    def remote(self) -> str:
        """Selected once per session; read-only."""
        return self._remote

    @property
    def trunk(self) -> str:
        return self.config["trunk_branch"]

    @property
    def strict(self) -> bool:
        return bool(self.config.get("strict"))

    @property
    def max_attempts(self) -> Optional[int]:
        return get_max_attempts(self.config)

    def transition(self, state: State):
        logger.debug("%s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def ask(self, prompt: str) -> str:
        self.transition(State.AWAITING_INPUT)
        return self.input_func(console.paint(prompt, console.Colors.CYAN)).strip()

    @contextmanager
    def running(self, action: str) -> Iterator["Session"]:
        """Track one flow: IDLE -> ... -> DONE/ABORTED -> IDLE. Errors propagate."""
        logger.info("action started: %s (remote=%s)", action, self.remote)
        try:
            yield self
        except BaseException:
            self.transition(State.ABORTED)
            logger.info("action aborted: %s", action)
            raise
        if self.state != State.ABORTED:
            self.transition(State.DONE)
            logger.info("action done: %s", action)
        self.transition(State.IDLE)


def create_new_branch(session: Session) -> str:
    """Create a branch from the freshly synced trunk and push it. Returns its name."""
    with session.running("new-branch"):
        session.transition(State.GUARDING)
        run_preflight(session)

        session.transition(State.SYNCING)
        sync_trunk(session)

        name = session.ask("Enter the name for the new branch: ")
        session.transition(State.VALIDATING)
        validate_branch_name(name)

        session.transition(State.EXECUTING)
        # Must succeed: the push below publishes whatever is checked out
        checkout(session.repo_path, name, session.trunk, strict=True)
        console.success(f"New branch '{name}' created based on {session.trunk}.")
        push_current_branch(session.repo_path, session.remote, session.strict, expected=name)
        return name


def update_existing_branch(session: Session) -> str:
    """Refresh a branch from the remote and push it back. Returns its name."""
    with session.running("update-branch"):
        session.transition(State.GUARDING)
        run_preflight(session)

        session.transition(State.SYNCING)
        sync_trunk(session)
        fetch_remote(session.repo_path, session.remote, session.strict)
        show_remote_branches(session.repo_path, session.remote)

        name = session.ask("Enter the name of the branch you want to update: ")
        session.transition(State.VALIDATING)
        validate_branch_name(name)

        session.transition(State.EXECUTING)
        checkout_or_track(session.repo_path, name, session.remote, strict=True)
        if pull(session.repo_path, session.remote, name, session.strict):
            console.success(f"Updated branch '{name}' with the latest changes.")
        push_current_branch(session.repo_path, session.remote, session.strict, expected=name)
        return name


def push_directly_to_trunk(session: Session) -> bool:
    """
    Commit everything on the trunk and push it, after a y/n confirmation.

    Returns:
        True if the push went ahead, False if the user declined.
    """
    repo, remote, trunk = session.repo_path, session.remote, session.trunk

    with session.running("push-to-trunk"):
        session.transition(State.GUARDING)
        run_preflight(session)

        session.transition(State.EXECUTING)
        checkout_or_track(repo, trunk, remote, strict=True)
        pull(repo, remote, trunk, session.strict)

        console.warning(f"You are about to push changes directly to {trunk}.")
        session.transition(State.AWAITING_INPUT)
        if not console.confirm("Do you want to continue? (y/n): ", session.input_func):
            console.info(f"Aborted direct push to {trunk}.")
            session.transition(State.ABORTED)
            return False

        session.transition(State.EXECUTING)
        # Fails loudly if git cannot commit (e.g. no user identity)
        if ensure_clean_tree(repo, session.config["direct_push_message"]) == "clean":
            console.info("Nothing new to commit; pushing existing commits.")
        if push(repo, remote, trunk, session.strict):
            console.success(f"Changes pushed to {trunk}.")
        return True
