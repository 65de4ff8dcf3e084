#!/usr/bin/env python3
"""
transport - Make sure git can reach the remote over SSH.

Handles:
- Checking the configured SSH key exists
- Starting ssh-agent when none is reachable
- Adding the key to the agent, skipping that when it is already loaded

A started agent outlives gitwork; it is not cleaned up.
"""

import logging
import os
import re
import subprocess
from pathlib import Path
from typing import Dict, List, Optional

from gitwork import console
from gitwork.errors import TransportError

logger = logging.getLogger("gitwork.transport")

AGENT_VAR_RE = re.compile(r'^(SSH_AUTH_SOCK|SSH_AGENT_PID)=([^;]+);')


def run_command(args: List[str]) -> subprocess.CompletedProcess:
    """Run a command and return result."""
    logger.debug("run %s", " ".join(args))
    return subprocess.run(
        args,
        capture_output=True,
        text=True,
        check=False
    )


def agent_is_reachable() -> bool:
    """
    True when SSH_AUTH_SOCK points at a live agent.

    ssh-add -l exits 0 (keys listed) or 1 (agent has no identities) when it
    can talk to the agent, and 2 when it cannot.
    """
    if not os.environ.get("SSH_AUTH_SOCK"):
        return False
    try:
        result = run_command(["ssh-add", "-l"])
    except FileNotFoundError:
        return False
    return result.returncode in (0, 1)


def parse_agent_output(output: str) -> Dict[str, str]:
    """Pull the environment assignments out of `ssh-agent -s` output."""
    env = {}
    for line in output.splitlines():
        match = AGENT_VAR_RE.match(line.strip())
        if match:
            env[match.group(1)] = match.group(2)
    return env


def start_agent() -> Dict[str, str]:
    """Start ssh-agent and export its variables into this process's environment."""
    console.info("Starting the SSH agent...")
    try:
        result = run_command(["ssh-agent", "-s"])
    except FileNotFoundError:
        raise TransportError("ssh-agent is not installed or not on PATH.")

    env = parse_agent_output(result.stdout)
    if result.returncode != 0 or "SSH_AUTH_SOCK" not in env:
        raise TransportError(f"Failed to start the SSH agent: {result.stderr.strip()}")

    os.environ.update(env)
    logger.debug("agent started: %s", env)
    return env


def key_fingerprint(key_path: Path) -> Optional[str]:
    """Fingerprint of the key (e.g. 'SHA256:...'), None if ssh-keygen cannot read it."""
    try:
        result = run_command(["ssh-keygen", "-lf", str(key_path)])
    except FileNotFoundError:
        return None
    if result.returncode != 0:
        return None
    # "256 SHA256:abc... comment (ED25519)"
    parts = result.stdout.split()
    return parts[1] if len(parts) >= 2 else None


def key_is_loaded(key_path: Path) -> bool:
    fingerprint = key_fingerprint(key_path)
    if not fingerprint:
        return False
    result = run_command(["ssh-add", "-l"])
    return result.returncode == 0 and fingerprint in result.stdout


def add_key(key_path: Path):
    console.info("Adding the SSH key to the agent...")
    try:
        result = run_command(["ssh-add", str(key_path)])
    except FileNotFoundError:
        raise TransportError("ssh-add is not installed or not on PATH.")
    if result.returncode != 0:
        raise TransportError(f"Failed to add SSH key to the agent: {result.stderr.strip()}")
    console.success("SSH key added to the agent.")


def ensure_ready(key_path: Path) -> str:
    """
    Make the SSH key available through an agent.

    Args:
        key_path: Private key git should authenticate with

    Returns:
        "already-loaded" if the agent already held the key, "loaded" otherwise.

    Raises:
        TransportError: key missing, agent cannot start, or ssh-add fails
    """
    key_path = Path(key_path).expanduser()
    if not key_path.is_file():
        raise TransportError(
            f"No SSH key found at {key_path}.",
            hint=(f"Please create an SSH key for your remote and place it at {key_path}, "
                  "or point gitwork at it with: gitwork config --set ssh_key_path PATH"),
        )
    console.info(f"SSH key found: {key_path}")

    if not agent_is_reachable():
        start_agent()
    elif key_is_loaded(key_path):
        console.info("SSH key already loaded in the agent.")
        return "already-loaded"

    add_key(key_path)
    return "loaded"
