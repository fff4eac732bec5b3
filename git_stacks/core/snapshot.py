"""Assembly of snapshot commits and the lookup index shared by the core algorithms."""

from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from git_stacks.models.repo import Branch, Commit
from git_stacks.logging_config import get_logger

logger = get_logger(__name__)


def link_commits(records: Iterable[Commit]) -> List[Commit]:
    """Build the commit list with ``children_sha`` computed from parent links.

    Records are deduplicated by sha (first one wins) and keep their discovery
    order. A parent that is not part of the set (history boundary, shallow
    clone) is left dangling.

    Args:
        records: Commits as read from the backend; ``children_sha`` is ignored

    Returns:
        New Commit objects with ``children_sha`` populated
    """
    ordered: Dict[str, Commit] = {}
    for record in records:
        if record.sha and record.sha not in ordered:
            ordered[record.sha] = record

    children: Dict[str, List[str]] = {sha: [] for sha in ordered}
    dangling = 0
    for sha, commit in ordered.items():
        parent_sha = commit.parent_sha
        if not parent_sha:
            continue
        if parent_sha in children:
            children[parent_sha].append(sha)
        else:
            dangling += 1

    if dangling:
        logger.debug(f"{dangling} commit(s) reference a parent outside the snapshot")

    return [
        replace(commit, children_sha=tuple(children[sha]))
        for sha, commit in ordered.items()
    ]


class CommitIndex:
    """Lookups by sha over one snapshot, built once and reused by every walk."""

    def __init__(self, commits: Sequence[Commit], branches: Sequence[Branch] = ()):
        self.commits: Dict[str, Commit] = {}
        for commit in commits:
            self.commits.setdefault(commit.sha, commit)

        self.branches_by_head: Dict[str, List[Branch]] = {}
        for branch in branches:
            if branch.head_sha:
                self.branches_by_head.setdefault(branch.head_sha, []).append(branch)

    def __contains__(self, sha: str) -> bool:
        return sha in self.commits

    def __len__(self) -> int:
        return len(self.commits)

    def get(self, sha: str) -> Optional[Commit]:
        return self.commits.get(sha)

    def children(self, sha: str) -> Tuple[str, ...]:
        """Children of ``sha`` that are present in the snapshot."""
        commit = self.commits.get(sha)
        if commit is None:
            return ()
        return tuple(child for child in commit.children_sha if child in self.commits)

    def branches_at(self, sha: str) -> List[Branch]:
        return self.branches_by_head.get(sha, [])

    def lineage(self, head_sha: str) -> List[str]:
        """Shas from the root to ``head_sha``, oldest first.

        Walks ``parent_sha`` backwards and stops at the first sha already seen,
        so a cyclic parent chain yields a truncated lineage.
        """
        shas: List[str] = []
        visited = set()
        current = head_sha
        while current and current in self.commits and current not in visited:
            visited.add(current)
            shas.append(current)
            current = self.commits[current].parent_sha
        if current in visited:
            logger.warning(f"Cycle in parent links at {current[:7]}, truncating lineage")
        shas.reverse()
        return shas
