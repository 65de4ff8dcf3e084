#!/usr/bin/env python3
"""
console - Terminal output and prompts for gitwork.

Four message categories, each with its own marker and color:
  [INFO]     cyan
  [WARNING]  yellow
  [ERROR]    red (written to stderr)
  [SUCCESS]  green

Every message is mirrored to the 'gitwork' logger so the log file records
what the user saw.
"""

import logging
import os
import sys
from typing import Callable, Optional, Sequence

from gitwork.errors import SelectionError, UserCancelled

logger = logging.getLogger("gitwork.console")

InputFunc = Callable[[str], str]


# ANSI color codes
class Colors:
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'

    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    CYAN = '\033[36m'


_color_enabled = "NO_COLOR" not in os.environ


def set_color(enabled: bool):
    """Turn ANSI colors on or off for all later output."""
    global _color_enabled
    _color_enabled = enabled and "NO_COLOR" not in os.environ


def paint(text: str, color: str) -> str:
    if not _color_enabled:
        return text
    return f"{color}{text}{Colors.RESET}"


def info(message: str):
    logger.info(message)
    print(paint(f"[INFO] {message}", Colors.CYAN))


def warning(message: str):
    logger.warning(message)
    print(paint(f"[WARNING] {message}", Colors.YELLOW))


def error(message: str):
    logger.error(message)
    print(paint(f"[ERROR] {message}", Colors.RED), file=sys.stderr)


def success(message: str):
    logger.info("SUCCESS: %s", message)
    print(paint(f"[SUCCESS] {message}", Colors.GREEN))


def safe_input(prompt: str = "") -> str:
    """
    Drop-in replacement for input() that raises UserCancelled on Ctrl+C
    or end of input instead of a traceback.
    """
    try:
        return input(prompt)
    except (KeyboardInterrupt, EOFError):
        print()
        raise UserCancelled()


def choose(
    prompt: str,
    options: Sequence[str],
    input_func: InputFunc = safe_input,
    max_attempts: Optional[int] = None,
    show_options: bool = True,
) -> int:
    """
    Ask the user to pick one of options by number.

    Blank, non-numeric and out-of-range answers print an error and ask again.
    With max_attempts=None the prompt repeats until a valid answer arrives;
    otherwise SelectionError is raised once the attempts are used up.

    Returns:
        Zero-based index into options.
    """
    if not options:
        raise SelectionError("Nothing to choose from")

    if show_options:
        for i, option in enumerate(options, 1):
            print(f"  {i}) {option}")

    attempts = 0
    while max_attempts is None or attempts < max_attempts:
        attempts += 1
        raw = input_func(paint(prompt, Colors.CYAN)).strip()
        if raw.isascii() and raw.isdigit() and 1 <= int(raw) <= len(options):
            return int(raw) - 1
        error("Invalid selection. Please try again.")

    raise SelectionError(f"No valid selection after {max_attempts} attempts")


def confirm(prompt: str, input_func: InputFunc = safe_input) -> bool:
    """Yes/no question. Only 'y' or 'yes' count as yes."""
    answer = input_func(paint(prompt, Colors.YELLOW)).strip().lower()
    return answer in ("y", "yes")
