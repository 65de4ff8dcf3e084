#!/usr/bin/env python3
"""
config - Configuration management for gitwork.

Handles user preferences like the SSH key location, trunk branch name and
the fixed commit messages used by the workflows.
"""

import json
import os
from pathlib import Path
from typing import Dict, Any, Optional

from gitwork.branch import validate_branch_name
from gitwork.errors import ConfigError

DEFAULTS: Dict[str, Any] = {
    "ssh_key_path": "~/.ssh/id_ed25519",
    "trunk_branch": "main",
    "auto_save_message": "Auto-save changes before switching branches",
    "direct_push_message": "Direct update to main",
    "strict": False,
    "max_prompt_attempts": None,  # None = ask until the answer is valid
    "color": True,
    "log_file": None,  # None = <config dir>/gitwork.log
}

# Taken verbatim from the command line, never JSON-decoded
STRING_KEYS = ("ssh_key_path", "trunk_branch", "auto_save_message", "direct_push_message")


def get_config_dir() -> Path:
    """Get the gitwork configuration directory ($GITWORK_HOME or ~/.gitwork)."""
    override = os.environ.get("GITWORK_HOME")
    config_dir = Path(override) if override else Path.home() / ".gitwork"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_file() -> Path:
    """Get the path to the configuration file."""
    return get_config_dir() / "config.json"


def load_config() -> Dict[str, Any]:
    """Load configuration from file, filling in defaults for missing keys."""
    config = dict(DEFAULTS)
    config_file = get_config_file()

    if not config_file.exists():
        return config

    try:
        with open(config_file, 'r') as f:
            stored = json.load(f)
    except (OSError, ValueError) as e:
        # Unreadable file: keep going with defaults
        print(f"Warning: could not read {config_file} ({e}); using defaults")
        return config

    if isinstance(stored, dict):
        config.update({k: v for k, v in stored.items() if k in DEFAULTS})
    return config


def save_config(config: Dict[str, Any]):
    """Save configuration to file."""
    config_file = get_config_file()
    with open(config_file, 'w') as f:
        json.dump(config, f, indent=2)


def parse_value(raw: str) -> Any:
    """Decode a CLI value as JSON ('true', '3', 'null'), else keep the string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def check_option(key: str, value: Any):
    """Raise ConfigError (or InvalidBranchNameError) if value does not fit key."""
    if key == "trunk_branch":
        if not isinstance(value, str):
            raise ConfigError(f"trunk_branch must be a branch name, not {value!r}")
        validate_branch_name(value)
    elif key == "max_prompt_attempts":
        if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 1):
            raise ConfigError(
                f"max_prompt_attempts must be a positive whole number or null, not {value!r}",
                hint="Example: gitwork config --set max_prompt_attempts 3",
            )
    elif key in ("strict", "color"):
        if not isinstance(value, bool):
            raise ConfigError(f"{key} must be true or false, not {value!r}")
    elif key == "log_file":
        if value is not None and not (isinstance(value, str) and value.strip()):
            raise ConfigError(f"log_file must be a path or null, not {value!r}")
    elif key in STRING_KEYS:
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f"{key} must be a non-empty string")


def check_config(config: Dict[str, Any]):
    """Validate every known key, e.g. after command-line overrides."""
    for key in DEFAULTS:
        check_option(key, config.get(key))


def set_option(key: str, raw_value: str) -> Dict[str, Any]:
    """Set one configuration key and persist it."""
    if key not in DEFAULTS:
        raise KeyError(f"Unknown setting '{key}'. Known: {', '.join(sorted(DEFAULTS))}")

    value = raw_value if key in STRING_KEYS else parse_value(raw_value)
    check_option(key, value)

    config = load_config()
    config[key] = value
    save_config(config)
    print(f"{key} set to: {config[key]!r}")
    return config


def resolve_key_path(config: Dict[str, Any]) -> Path:
    return Path(str(config["ssh_key_path"])).expanduser()


def resolve_log_file(config: Dict[str, Any]) -> Path:
    if config.get("log_file"):
        return Path(str(config["log_file"])).expanduser()
    return get_config_dir() / "gitwork.log"


def get_max_attempts(config: Dict[str, Any]) -> Optional[int]:
    value = config.get("max_prompt_attempts")
    if value is None:
        return None
    try:
        return max(1, int(value))
    except (TypeError, ValueError):
        raise ConfigError(
            f"max_prompt_attempts must be a whole number or null, not {value!r}",
            hint="Fix it with: gitwork config --set max_prompt_attempts 3",
        )


def show_config():
    """Display current configuration."""
    config = load_config()

    print("\n" + "=" * 60)
    print("GITWORK CONFIGURATION")
    print("=" * 60)
    print(f"Config file: {get_config_file()}")
    print()
    print("Settings:")
    print(f"  SSH key:             {config['ssh_key_path']}")
    print(f"  Trunk branch:        {config['trunk_branch']}")
    print(f"  Auto-save message:   {config['auto_save_message']}")
    print(f"  Direct push message: {config['direct_push_message']}")
    print(f"  Strict mode:         {config['strict']}")
    attempts = config['max_prompt_attempts']
    print(f"  Prompt attempts:     {attempts if attempts is not None else 'unlimited'}")
    print(f"  Color:               {config['color']}")
    print(f"  Log file:            {resolve_log_file(config)}")
    print()
    print("To modify settings:")
    print("  gitwork config --set trunk_branch develop")
    print(f"  Or edit: {get_config_file()}")
    print()
