#!/usr/bin/env python3
"""
errors - Exception types raised by gitwork.

Library code raises these; only the CLI turns them into messages and exit codes.
"""

from typing import List, Optional, Sequence


class GitworkError(Exception):
    """Fatal precondition failure. Terminates the program with exit_code."""

    exit_code = 1

    def __init__(self, message: str = "", hint: Optional[str] = None):
        super().__init__(message)
        self.hint = hint


class NotARepositoryError(GitworkError):
    """Raised when the working directory is not inside a git work tree."""


class TransportError(GitworkError):
    """Raised when the SSH key or agent cannot be made ready."""


class NoRemotesError(GitworkError):
    """Raised when the repository has no remote configured."""


class SelectionError(GitworkError):
    """Raised when an interactive choice cannot be resolved."""


class ConflictsError(GitworkError):
    """Raised when the work tree has unresolved merge conflicts."""

    def __init__(self, paths: Sequence[str]):
        self.paths: List[str] = list(paths)
        super().__init__(
            "Unresolved merge conflicts detected in the following files:\n"
            + "\n".join(f"  {p}" for p in self.paths),
            hint="Please resolve the conflicts and try again.",
        )


class InvalidBranchNameError(GitworkError):
    """Raised for branch names outside [a-zA-Z0-9._/-]."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Invalid branch name '{name}'. "
            "Use only alphanumeric characters, '.', '_', '/', and '-'."
        )


class GitCommandError(GitworkError):
    """Raised when a git command that must succeed exits non-zero."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = ""):
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = stderr.strip()
        message = f"git {' '.join(self.args_list)} failed (exit {returncode})"
        if self.stderr:
            message += f": {self.stderr}"
        super().__init__(message)


class ConfigError(GitworkError):
    """Raised when a configuration value has the wrong type or form."""


class UserCancelled(Exception):
    """Raised on Ctrl+C or end of input at any prompt. Clean exit."""

    exit_code = 0
