"""Command-line argument parsing for git-stacks."""

import argparse
from typing import List, Optional

from git_stacks.__version__ import __version__
from git_stacks.constants import DEFAULT_DEBOUNCE_MS, DEFAULT_REMOTE


def parse_args(argv: Optional[List[str]] = None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Show a git repository as stacks of branches built on top of trunk",
    )
    parser.add_argument(
        "path", nargs="?", default=".", help="Path to the git repository (default: current directory)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--version", action="version", version=f"git-stacks {__version__}")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument(
        "--trunk", metavar="BRANCH", help="Trunk branch name (default: auto-detect)"
    )
    parser.add_argument(
        "--remote", default=DEFAULT_REMOTE, help=f"Remote used for trunk detection (default: {DEFAULT_REMOTE})"
    )
    parser.add_argument(
        "--full-trunk",
        action="store_true",
        help="Show the whole trunk history instead of starting at the oldest commit with branches",
    )
    parser.add_argument(
        "--stage", nargs="+", metavar="PATH", help="Stage the given paths before showing stacks"
    )
    parser.add_argument(
        "--unstage", nargs="+", metavar="PATH", help="Unstage the given paths before showing stacks"
    )
    parser.add_argument(
        "--interactive", action="store_true", help="Launch interactive TUI mode (default for TTY)"
    )
    parser.add_argument(
        "--no-interactive",
        action="store_true",
        help="Force non-interactive CLI mode (for scripts/automation)",
    )
    parser.add_argument(
        "--no-watch", action="store_true", help="Do not refresh the TUI on repository changes"
    )
    parser.add_argument(
        "--debounce-ms",
        type=int,
        default=DEFAULT_DEBOUNCE_MS,
        metavar="MS",
        help=f"Quiet period before a repository change triggers a refresh (default: {DEFAULT_DEBOUNCE_MS})",
    )

    return parser.parse_args(argv)
