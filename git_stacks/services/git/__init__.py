"""Git backend for git-stacks."""

from .backend import GitBackend, parse_porcelain_status

__all__ = [
    "GitBackend",
    "parse_porcelain_status",
]
