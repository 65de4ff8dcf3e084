"""
gitwork - Guided git workflows from an interactive menu.

Workflows included:
- new branch: sync trunk, create a branch from it and push
- update branch: sync trunk, refresh an existing branch and push it back
- push to trunk: commit and push straight to the trunk after confirmation
"""

import logging

__version__ = "0.1.0"
__author__ = "1minds3t"
__email__ = "1minds3t@proton.me"
__all__ = ["cli", "config", "guard", "remotes", "sync", "transport", "workflow"]

# Silent until the CLI attaches handlers (see gitwork.log)
logging.getLogger("gitwork").addHandler(logging.NullHandler())
