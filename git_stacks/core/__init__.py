"""Core functionality for git-stacks.

- snapshot: commit linking and the per-snapshot lookup index
- trunk_resolver: trunk name and head selection
- stack_builder: snapshot to stack tree transformation
- stack_keeper: orchestration of backend, services and presentation
"""

from .stack_builder import build_stacks, build_trunk_stack
from .trunk_resolver import mark_trunk, resolve_trunk, resolve_trunk_head_sha
from .stack_keeper import StackKeeper, StackState

__all__ = [
    "StackKeeper",
    "StackState",
    "build_stacks",
    "build_trunk_stack",
    "mark_trunk",
    "resolve_trunk",
    "resolve_trunk_head_sha",
]
