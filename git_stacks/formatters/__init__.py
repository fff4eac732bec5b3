"""Formatting utilities for git-stacks.

This package provides formatting functions for displaying stacks,
organized into logical modules:
- date: Commit timestamp formatting
- stack: Commit, branch tip and stack tree formatting
- status: Working tree status formatting
"""

# Date formatters
from .date import format_timestamp

# Stack formatters
from .stack import (
    format_short_sha,
    format_tip,
    format_tips,
    format_commit_label,
    format_stack_title,
    get_tip_style_type,
    build_stack_tree,
)

# Status formatters
from .status import format_working_tree, format_change_counts

__all__ = [
    # Date
    "format_timestamp",
    # Stack
    "format_short_sha",
    "format_tip",
    "format_tips",
    "format_commit_label",
    "format_stack_title",
    "get_tip_style_type",
    "build_stack_tree",
    # Status
    "format_working_tree",
    "format_change_counts",
]
