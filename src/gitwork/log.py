#!/usr/bin/env python3
"""
log - File logging for gitwork operations.

Every git command, its exit code and stderr go to the log file at DEBUG;
console messages are mirrored at their own level.
"""

import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict

from gitwork.config import resolve_log_file

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _writable_log_file(preferred: Path) -> Path:
    """Use the preferred path if its directory is writable, else the temp dir."""
    log_dir = preferred.parent
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        pass
    if log_dir.exists() and os.access(log_dir, os.W_OK):
        return preferred
    return Path(tempfile.gettempdir()) / preferred.name


def setup_logging(config: Dict[str, Any], verbose: bool = False) -> Path:
    """
    Attach handlers to the 'gitwork' logger.

    Returns the log file path in use.
    """
    logger = logging.getLogger("gitwork")
    logger.setLevel(logging.DEBUG)
    # Repeated calls (tests, re-entry) must not stack handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    log_file = _writable_log_file(resolve_log_file(config))
    fh = logging.FileHandler(log_file)
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(formatter)
    logger.addHandler(fh)

    if verbose:
        sh = logging.StreamHandler(sys.stderr)
        sh.setLevel(logging.DEBUG)
        sh.setFormatter(formatter)
        logger.addHandler(sh)

    logger.propagate = False
    return log_file
