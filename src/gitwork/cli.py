#!/usr/bin/env python3
"""
gitwork - Guided git workflows CLI

Main entry point: checks the repository, readies SSH, picks a remote and then
loops over a menu of workflows until the user exits.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from gitwork import __version__, console, workflow
from gitwork.config import (
    check_config,
    get_max_attempts,
    load_config,
    resolve_key_path,
    set_option,
    show_config,
)
from gitwork.console import Colors, InputFunc, safe_input
from gitwork.errors import GitworkError, UserCancelled
from gitwork.guard import require_inside_repository
from gitwork.log import setup_logging
from gitwork.remotes import select_remote
from gitwork.transport import ensure_ready

logger = logging.getLogger("gitwork.cli")

MENU_OPTIONS = [
    "Create and push to a new branch",
    "Update an existing branch",
    "Push changes directly to {trunk}",
    "Exit",
]


def show_menu(session: workflow.Session) -> List[str]:
    """Print the banner and return the option labels."""
    options = [o.format(trunk=session.trunk) for o in MENU_OPTIONS]
    line = console.paint("-" * 56, Colors.CYAN)
    print()
    print(console.paint("Git Workflow Helper", Colors.GREEN))
    print(line)
    print(f"Repository: {session.repo_path}")
    print(f"Remote:     {session.remote}")
    print(line)
    for i, option in enumerate(options, 1):
        print(console.paint(f"  {i}) {option}", Colors.CYAN))
    print(line)
    return options


def run_menu(session: workflow.Session) -> int:
    """
    Offer the workflows until the user picks Exit.

    One action per iteration. Fatal errors propagate to the caller.

    Returns:
        0 when the user exits.
    """
    actions = {
        0: workflow.create_new_branch,
        1: workflow.update_existing_branch,
        2: workflow.push_directly_to_trunk,
    }

    while True:
        options = show_menu(session)
        choice = console.choose(
            "Please select an option: ",
            options,
            session.input_func,
            session.max_attempts,
            show_options=False,
        )
        if choice == len(options) - 1:
            console.info("Exiting gitwork. Goodbye!")
            return 0
        actions[choice](session)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitwork",
        description="gitwork - Guided git workflows from an interactive menu",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gitwork                          # Interactive menu in current directory
  gitwork -r ~/myproject           # Interactive menu in a specific repo
  gitwork --remote upstream        # Skip the remote prompt
  gitwork --strict                 # Stop on any failed fetch/pull/push
  gitwork config                   # Show configuration
  gitwork config --set trunk_branch develop
        """
    )

    parser.add_argument(
        '-r', '--repo',
        type=str,
        default=None,
        help='Path to git repository (default: current directory)'
    )
    parser.add_argument(
        '--remote',
        type=str,
        default=None,
        help='Remote to use instead of prompting'
    )
    parser.add_argument(
        '--key',
        type=str,
        default=None,
        help='SSH private key to load (default: from config)'
    )
    parser.add_argument(
        '--trunk',
        type=str,
        default=None,
        help='Trunk branch name (default: from config, usually main)'
    )
    parser.add_argument(
        '--strict',
        action='store_true',
        help='Abort when fetch, pull or push fails instead of carrying on'
    )
    parser.add_argument(
        '--no-color',
        action='store_true',
        help='Disable colored output'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Also write the debug log to stderr'
    )
    parser.add_argument(
        '-v', '--version',
        action='version',
        version=f'gitwork {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    config_parser = subparsers.add_parser(
        'config',
        help='View or edit configuration'
    )
    config_parser.add_argument(
        '--show',
        action='store_true',
        help='Show current configuration'
    )
    config_parser.add_argument(
        '--set',
        nargs=2,
        metavar=('KEY', 'VALUE'),
        help='Set a configuration value'
    )
    return parser


def run(args: argparse.Namespace, input_func: InputFunc = safe_input) -> int:
    """Start-up sequence and menu loop. Raises GitworkError on fatal failures."""
    config = load_config()
    if args.key:
        config["ssh_key_path"] = args.key
    if args.trunk:
        config["trunk_branch"] = args.trunk
    if args.strict:
        config["strict"] = True
    # Before any git command sees the trunk name or the retry limit
    check_config(config)

    console.set_color(bool(config.get("color", True)) and not args.no_color)
    log_file = setup_logging(config, verbose=args.verbose)
    logger.debug("gitwork %s started, logging to %s", __version__, log_file)

    start = Path(args.repo).resolve() if args.repo else Path.cwd()
    repo_path = require_inside_repository(start)

    ensure_ready(resolve_key_path(config))

    remote = select_remote(
        repo_path,
        input_func=input_func,
        max_attempts=get_max_attempts(config),
        preferred=args.remote,
    )
    session = workflow.Session(repo_path, remote, config, input_func)
    return run_menu(session)


def main(argv: Optional[List[str]] = None, input_func: InputFunc = safe_input) -> int:
    """Main entry point for gitwork CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == 'config':
        if args.set:
            try:
                set_option(args.set[0], args.set[1])
            except KeyError as e:
                console.error(str(e.args[0]))
                return 1
            except GitworkError as e:
                console.error(str(e))
                if e.hint:
                    console.warning(e.hint)
                return e.exit_code
        else:
            show_config()
        return 0

    try:
        code = run(args, input_func)
    except UserCancelled:
        console.info("Cancelled. Goodbye!")
        code = UserCancelled.exit_code
    except GitworkError as e:
        console.error(str(e))
        if e.hint:
            console.warning(e.hint)
        logger.debug("fatal: %r", e)
        code = e.exit_code

    return code


if __name__ == "__main__":
    sys.exit(main())
