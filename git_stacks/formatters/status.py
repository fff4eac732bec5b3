"""Working tree status formatting utilities."""

from typing import List

from git_stacks.models.repo import WorkingTreeStatus
from .stack import format_short_sha


def format_change_counts(status: WorkingTreeStatus) -> str:
    """
    Summarize uncommitted changes as letter counts.

    Args:
        status: Working tree status

    Returns:
        String like "S2 M1 U3", or "clean"
    """
    counts = [
        ("S", status.staged),
        ("M", status.modified),
        ("D", status.deleted),
        ("U", status.not_added),
        ("C", status.conflicted),
    ]
    parts = [f"{letter}{len(paths)}" for letter, paths in counts if paths]
    return " ".join(parts) if parts else "clean"


def format_working_tree(status: WorkingTreeStatus) -> List[str]:
    """Format the working tree status as display lines."""
    branch = status.current_branch or "(detached)"
    tracking = status.tracking or "(no upstream)"
    head = format_short_sha(status.current_commit_sha) if status.current_commit_sha else "(no commits)"
    lines = [
        f"Branch   : {branch}",
        f"HEAD     : {head}",
        f"Tracking : {tracking}{' [detached]' if status.detached else ''}",
        f"Rebasing : {'yes' if status.is_rebasing else 'no'}",
        f"Changes  : {format_change_counts(status)}",
    ]
    return lines
