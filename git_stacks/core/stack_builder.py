"""Build the stack tree from a repository snapshot.

The trunk stack is the lineage from the root commit to the trunk head. Every
other line of development hangs off the commit it diverges from as a spinoff
stack whose first entry is that divergence commit. Commits inside a stack are
ordered oldest first. Unless disabled, trunk history below the oldest commit
with a branch or spinoff is dropped.

Spinoffs at the same commit are ordered by the smallest branch ref whose tip
lies in the spinoff's subtree; lines without any branch come last, by sha.
"""

from collections import deque
from typing import Deque, Dict, List, Optional, Sequence, Tuple

from git_stacks.constants import NO_MESSAGE_LABEL
from git_stacks.core.snapshot import CommitIndex
from git_stacks.core.trunk_resolver import resolve_trunk_head_sha
from git_stacks.models.repo import Branch, Repo
from git_stacks.models.stack import BranchTip, Stack, StackCommit
from git_stacks.logging_config import get_logger

logger = get_logger(__name__)

# (stack being filled, first sha of its line, commit node the stack hangs off)
_Job = Tuple[Stack, str, Optional[StackCommit]]


def build_stacks(
    repo: Repo, remote_name: Optional[str] = None, declutter_trunk: bool = True
) -> List[Stack]:
    """Build all top-level stacks for a snapshot.

    Args:
        repo: Snapshot to build from
        remote_name: Remote whose trunk copy competes with the local trunk
        declutter_trunk: Drop trunk history below the oldest commit that has
            a branch or a spinoff

    Returns:
        The trunk stack first, then one stack per history that is not
        connected to trunk. Empty when the snapshot has no commits or the
        trunk head is unknown.
    """
    if not repo.commits:
        logger.debug("Snapshot has no commits, nothing to build")
        return []

    trunk_head = resolve_trunk_head_sha(repo.branches, repo.commits, remote_name)
    index = CommitIndex(repo.commits, repo.branches)
    if not trunk_head or trunk_head not in index:
        logger.info("No trunk head in snapshot, nothing to build")
        return []

    wts = repo.working_tree_status
    builder = StackBuilder(index, wts.current_branch, wts.current_commit_sha)
    stacks = builder.build(trunk_head, repo.branches)
    if declutter_trunk:
        trim_trunk(stacks[0])
    return stacks


def build_trunk_stack(repo: Repo, **options) -> Optional[Stack]:
    """Build the single stack rooted at trunk, or None."""
    stacks = build_stacks(repo, **options)
    return stacks[0] if stacks else None


def trim_trunk(trunk: Stack) -> None:
    """Drop trunk commits older than the oldest one with a branch or spinoff.

    The trunk head is always kept.
    """
    if not trunk.is_trunk or not trunk.commits:
        return
    keep_from = next(
        (i for i, commit in enumerate(trunk.commits) if commit.branches or commit.spinoffs),
        len(trunk.commits) - 1,
    )
    if keep_from:
        logger.debug(f"Hiding {keep_from} trunk commit(s) without branches")
        del trunk.commits[:keep_from]


def format_commit_name(message: str) -> str:
    """Human readable name for a commit: its summary line."""
    summary = message.split("\n", 1)[0].strip()
    return summary or NO_MESSAGE_LABEL


def compute_subtree_labels(index: CommitIndex) -> Dict[str, str]:
    """Map every sha to the smallest branch ref tipping it or any descendant.

    Shas whose subtree holds no branch map to "". Children already on the
    current path are skipped, so cyclic child links terminate.
    """
    labels: Dict[str, str] = {}
    seen = set()
    for start in index.commits:
        if start in seen:
            continue
        pending: List[Tuple[str, bool]] = [(start, False)]
        while pending:
            sha, expanded = pending.pop()
            if expanded:
                candidates = [branch.ref for branch in index.branches_at(sha)]
                candidates.extend(
                    labels[child] for child in index.children(sha) if labels.get(child)
                )
                labels[sha] = min(candidates) if candidates else ""
                continue
            if sha in seen:
                continue
            seen.add(sha)
            pending.append((sha, True))
            for child in index.children(sha):
                if child not in seen:
                    pending.append((child, False))
    return labels


class StackBuilder:
    """Single-use builder holding the state of one build."""

    def __init__(self, index: CommitIndex, current_branch: str = "", current_commit_sha: str = ""):
        self.index = index
        self.current_branch = current_branch
        self.current_commit_sha = current_commit_sha
        self.labels = compute_subtree_labels(index)
        # sha -> the node that owns it; anchors at the start of spinoffs are copies
        self.owners: Dict[str, StackCommit] = {}
        self.jobs: Deque[_Job] = deque()

    def build(self, trunk_head: str, branches: Sequence[Branch] = ()) -> List[Stack]:
        trunk = self._build_trunk(trunk_head)
        self._drain()
        stacks = [trunk]
        stacks.extend(self._build_disconnected(branches))
        return stacks

    def _build_trunk(self, trunk_head: str) -> Stack:
        trunk = Stack(is_trunk=True)
        for sha in self.index.lineage(trunk_head):
            trunk.commits.append(self._own(sha))

        for node in trunk.commits:
            trunk_refs = [b for b in self.index.branches_at(node.sha) if b.is_trunk]
            node.branches.extend(self._tips(trunk_refs))
            resident = [b for b in self.index.branches_at(node.sha) if not b.is_trunk]
            self._queue_spinoffs(node, self._free_children(node.sha), resident)

        logger.debug(f"Trunk stack has {len(trunk.commits)} commit(s)")
        return trunk

    def _build_disconnected(self, branches: Sequence[Branch]) -> List[Stack]:
        stacks = []
        for branch in sorted(branches, key=lambda b: (b.is_remote, b.ref)):
            head = branch.head_sha
            if not head or head not in self.index or head in self.owners:
                continue
            lineage = self.index.lineage(head)
            start = head
            for sha in reversed(lineage):
                if sha in self.owners:
                    break
                start = sha
            logger.info(f"Branch {branch.ref} is not connected to trunk, adding top-level stack")
            stack = Stack(is_trunk=False)
            self.jobs.append((stack, start, None))
            self._drain()
            if stack.commits:
                stacks.append(stack)
        return stacks

    def _drain(self) -> None:
        while self.jobs:
            stack, start, parent = self.jobs.popleft()
            self._fill(stack, start)
            if parent is not None and len(stack.commits) <= 1:
                # Line was claimed by another stack before this job ran
                parent.spinoffs.remove(stack)

    def _fill(self, stack: Stack, start: str) -> None:
        current = start
        # Owned shas end the walk, which also stops cycles in child links
        while current and current in self.index and current not in self.owners:
            node = self._own(current)
            node.branches.extend(self._tips(self.index.branches_at(current)))
            stack.commits.append(node)

            children = sorted(self._free_children(current), key=self._child_key)
            if not children:
                break
            continuation, siblings = children[0], children[1:]
            self._queue_spinoffs(node, siblings, [])
            current = continuation

    def _queue_spinoffs(
        self, node: StackCommit, children: Sequence[str], resident: Sequence[Branch]
    ) -> None:
        """Hang one spinoff per diverging child off ``node``.

        Branches in ``resident`` point at ``node`` itself without commits of
        their own; together they get a spinoff holding just the anchor.
        """
        entries: List[Tuple[Tuple[bool, str, str], Optional[str]]] = [
            (self._child_key(child), child) for child in children
        ]
        if resident:
            label = min(branch.ref for branch in resident)
            entries.append(((False, label, ""), None))

        for _, child in sorted(entries, key=lambda entry: entry[0]):
            stack = Stack(commits=[self._anchor(node)], is_trunk=False)
            node.spinoffs.append(stack)
            if child is None:
                stack.commits[0].branches.extend(self._tips(resident))
            else:
                self.jobs.append((stack, child, node))

    def _free_children(self, sha: str) -> List[str]:
        return [child for child in self.index.children(sha) if child not in self.owners]

    def _child_key(self, sha: str) -> Tuple[bool, str, str]:
        label = self.labels.get(sha, "")
        return (label == "", label, sha)

    def _own(self, sha: str) -> StackCommit:
        node = self._new_node(sha)
        self.owners[sha] = node
        return node

    def _anchor(self, node: StackCommit) -> StackCommit:
        return StackCommit(
            sha=node.sha, name=node.name, timestamp_ms=node.timestamp_ms, is_current=node.is_current
        )

    def _new_node(self, sha: str) -> StackCommit:
        commit = self.index.get(sha)
        return StackCommit(
            sha=sha,
            name=format_commit_name(commit.message),
            timestamp_ms=commit.time_ms or 0,
            is_current=bool(self.current_commit_sha) and sha == self.current_commit_sha,
        )

    def _tips(self, branches: Sequence[Branch]) -> List[BranchTip]:
        ordered = sorted(branches, key=lambda b: (not b.is_trunk, b.is_remote, b.ref))
        return [
            BranchTip(
                name=branch.ref,
                is_current=bool(self.current_branch) and branch.ref == self.current_branch,
                is_remote=branch.is_remote,
                is_trunk=branch.is_trunk,
            )
            for branch in ordered
        ]
