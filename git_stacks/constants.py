"""Shared constants for git-stacks."""

from typing import List


# Conventional trunk names, in order of preference
TRUNK_CANDIDATES: List[str] = ["main", "master", "develop"]

DEFAULT_REMOTE = "origin"

# Quiescence window for filesystem change notifications
DEFAULT_DEBOUNCE_MS = 100

# Symbolic refs that never represent a real branch
SYMBOLIC_BRANCH_NAMES = ("HEAD",)

SHORT_SHA_LENGTH = 7
NO_MESSAGE_LABEL = "(no message)"


# Symbol constants
SYMBOL_CURRENT_BRANCH = " *"
SYMBOL_TRUNK = "◆"
SYMBOL_COMMIT = "○"
SYMBOL_CURRENT_COMMIT = "●"
SYMBOL_SPINOFF = "↳"


class TipStyleType:
    """Style types for branch tips."""

    TRUNK = "trunk"
    CURRENT = "current"
    REMOTE = "remote"
    LOCAL = "local"


# CLI colors (Rich color names)
CLI_COLORS = {
    TipStyleType.TRUNK: "cyan",
    TipStyleType.CURRENT: "green",
    TipStyleType.REMOTE: "magenta",
    TipStyleType.LOCAL: "yellow",
}


LEGEND_TEXT = """
Legend:
◆ = Trunk stack          ↳ = Spinoff stack
* = Current branch       ○ = Commit
● = Checked out commit (HEAD)

Colors:
Cyan = Trunk branch      Green = Current branch
Yellow = Local branch    Magenta = Remote branch
"""
