"""Data models for git-stacks."""

from .repo import Branch, Commit, Repo, WorkingTreeStatus
from .stack import BranchTip, Stack, StackCommit

__all__ = [
    "Branch",
    "BranchTip",
    "Commit",
    "Repo",
    "Stack",
    "StackCommit",
    "WorkingTreeStatus",
]
