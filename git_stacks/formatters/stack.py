"""Commit, branch tip and stack tree formatting utilities."""

from typing import Optional, Sequence

from rich.text import Text
from rich.tree import Tree

from git_stacks.constants import (
    CLI_COLORS,
    SHORT_SHA_LENGTH,
    SYMBOL_COMMIT,
    SYMBOL_CURRENT_BRANCH,
    SYMBOL_CURRENT_COMMIT,
    SYMBOL_SPINOFF,
    SYMBOL_TRUNK,
    TipStyleType,
)
from git_stacks.models.stack import BranchTip, Stack, StackCommit
from .date import format_timestamp


def format_short_sha(sha: str) -> str:
    """Abbreviate a commit sha."""
    return sha[:SHORT_SHA_LENGTH]


def get_tip_style_type(tip: BranchTip) -> str:
    """
    Determine the style type of a branch tip.

    Args:
        tip: Branch tip to style

    Returns:
        One of the TipStyleType values
    """
    if tip.is_current:
        return TipStyleType.CURRENT
    if tip.is_trunk:
        return TipStyleType.TRUNK
    if tip.is_remote:
        return TipStyleType.REMOTE
    return TipStyleType.LOCAL


def format_tip(tip: BranchTip) -> Text:
    """Format a branch tip as colored text, marking the current branch."""
    label = tip.name + (SYMBOL_CURRENT_BRANCH if tip.is_current else "")
    return Text(label, style=CLI_COLORS.get(get_tip_style_type(tip)) or "")


def format_tips(tips: Sequence[BranchTip]) -> Text:
    """Format all branch tips of a commit as "(a, b)", or empty text."""
    if not tips:
        return Text()
    text = Text("(")
    for i, tip in enumerate(tips):
        if i:
            text.append(", ")
        text.append_text(format_tip(tip))
    text.append(")")
    return text


def format_commit_label(commit: StackCommit, show_time: bool = True) -> Text:
    """
    Format a commit node as "○ abc1234 summary (branches) date".

    The checked out commit is drawn with a filled marker.

    Args:
        commit: Stack commit to format
        show_time: Whether to append the commit timestamp

    Returns:
        Rich text label
    """
    text = Text()
    if commit.is_current:
        text.append(f"{SYMBOL_CURRENT_COMMIT} ", style="bold green")
    else:
        text.append(f"{SYMBOL_COMMIT} ")
    text.append(format_short_sha(commit.sha), style="dim")
    text.append(f" {commit.name}")
    if commit.branches:
        text.append(" ")
        text.append_text(format_tips(commit.branches))
    if show_time:
        text.append(f"  {format_timestamp(commit.timestamp_ms)}", style="dim")
    return text


def format_stack_title(stack: Stack, number: Optional[int] = None) -> Text:
    """Title for a stack: trunk, numbered top-level stack, or spinoff."""
    if stack.is_trunk:
        return Text(f"{SYMBOL_TRUNK} trunk", style="bold cyan")
    label = f"{SYMBOL_SPINOFF} spinoff" if number is None else f"{SYMBOL_SPINOFF} stack {number}"
    return Text(label, style="bold")


def build_stack_tree(stacks: Sequence[Stack], show_time: bool = True) -> Tree:
    """
    Render stacks as a rich Tree, newest commit first within each stack.

    Spinoffs are nested under the commit they diverge from.

    Args:
        stacks: Top-level stacks, trunk first
        show_time: Whether to show commit timestamps

    Returns:
        Rich Tree ready for printing
    """
    root = Tree(Text("Stacks", style="bold"))
    if not stacks:
        root.add(Text("(no stacks)", style="dim"))
        return root

    # Explicit work-list keeps deep spinoff chains off the call stack
    pending = [(root, stack, number) for number, stack in reversed(list(enumerate(stacks, 1)))]
    while pending:
        parent, stack, number = pending.pop()
        branch = parent.add(format_stack_title(stack, number))
        for commit in reversed(stack.commits):
            node = branch.add(format_commit_label(commit, show_time))
            for spinoff in reversed(commit.spinoffs):
                pending.append((node, spinoff, None))
    return root
