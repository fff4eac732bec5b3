"""Trunk branch detection and selection.

All functions are pure and never raise: an unresolvable trunk is reported as
``None`` (name) or ``""`` (head sha), which callers treat as "no trunk known".
"""

from dataclasses import replace
from typing import List, Optional, Sequence

from git_stacks.constants import TRUNK_CANDIDATES
from git_stacks.models.repo import Branch, Commit
from git_stacks.logging_config import get_logger

logger = get_logger(__name__)


def resolve_trunk(
    branches: Sequence[Branch],
    remote_default: Optional[str] = None,
    preferred: Optional[str] = None,
    candidates: Sequence[str] = TRUNK_CANDIDATES,
) -> Optional[str]:
    """Pick the trunk branch name.

    Priority:
    1. ``preferred`` (configured override), if a branch with that name exists
    2. ``remote_default``, the branch behind the remote's symbolic HEAD
    3. The first of ``candidates`` present among the branches
    4. The first branch in the list

    Remote refs are compared by their local name, so ``origin/main`` counts as
    ``main``.

    Args:
        branches: Known local and remote branches
        remote_default: Branch name inferred from ``refs/remotes/<remote>/HEAD``
        preferred: Explicitly configured trunk name
        candidates: Conventional trunk names in order of preference

    Returns:
        Trunk branch name, or None when there are no branches
    """
    if not branches:
        return None

    names = [branch.local_name for branch in branches]

    if preferred:
        if preferred in names:
            logger.debug(f"Using configured trunk branch: {preferred}")
            return preferred
        logger.warning(f"Configured trunk branch '{preferred}' does not exist, ignoring")

    if remote_default:
        logger.debug(f"Inferred trunk branch from remote HEAD: {remote_default}")
        return remote_default

    for name in candidates:
        if name in names:
            logger.debug(f"Using conventional trunk branch: {name}")
            return name

    logger.debug(f"No conventional trunk branch found, falling back to {names[0]}")
    return names[0]


def mark_trunk(branches: Sequence[Branch], trunk_name: Optional[str]) -> List[Branch]:
    """Return copies of ``branches`` with ``is_trunk`` set for every incarnation of the trunk."""
    return [
        replace(branch, is_trunk=bool(trunk_name) and branch.local_name == trunk_name)
        for branch in branches
    ]


def resolve_trunk_head_sha(
    branches: Sequence[Branch],
    commits: Optional[Sequence[Commit]] = None,
    remote_name: Optional[str] = None,
) -> str:
    """Get the head sha of the most recent trunk incarnation.

    When both the local and the remote trunk exist, the one whose head commit
    is strictly newer wins. Ties, missing commits and placeholder timestamps
    go to the remote, which is the durable source of truth for stacked diffs.

    Args:
        branches: Branches with ``is_trunk`` already marked
        commits: Snapshot commits used for timestamp lookup
        remote_name: Remote whose copy of trunk is compared against the local one.
            Falls back to the first remote trunk when that remote has none.

    Returns:
        Head sha, or "" when no trunk branch is known
    """
    local_trunk = next((b for b in branches if b.is_trunk and not b.is_remote), None)
    remote_trunks = [b for b in branches if b.is_trunk and b.is_remote]
    remote_trunk = next(
        (b for b in remote_trunks if remote_name and b.ref == f"{remote_name}/{b.local_name}"),
        remote_trunks[0] if remote_trunks else None,
    )

    if local_trunk is None and remote_trunk is None:
        return ""
    if remote_trunk is None:
        return local_trunk.head_sha
    if local_trunk is None:
        return remote_trunk.head_sha

    if commits:
        times = {commit.sha: commit.time_ms for commit in commits}
        local_time = times.get(local_trunk.head_sha, 0)
        remote_time = times.get(remote_trunk.head_sha, 0)
        if local_time > 0 and remote_time > 0 and local_time > remote_time:
            logger.debug(f"Local {local_trunk.ref} is newer than {remote_trunk.ref}")
            return local_trunk.head_sha

    return remote_trunk.head_sha or local_trunk.head_sha
