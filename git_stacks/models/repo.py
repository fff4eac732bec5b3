"""Repository snapshot models"""
from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class Commit:
    """A single commit as read from git."""
    sha: str
    message: str = ""
    time_ms: int = 0  # 0 for placeholder commits
    parent_sha: str = ""  # Empty for root commits
    children_sha: Tuple[str, ...] = ()

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0].strip()


@dataclass(frozen=True)
class Branch:
    """A local or remote-tracking branch and the commit it points at."""
    ref: str  # Display name, e.g. "main" or "origin/main"
    head_sha: str = ""
    is_remote: bool = False
    is_trunk: bool = False

    @property
    def local_name(self) -> str:
        """Branch name without the remote prefix ("origin/main" -> "main")."""
        if not self.is_remote:
            return self.ref
        _, _, name = self.ref.partition("/")
        return name or self.ref


@dataclass(frozen=True)
class WorkingTreeStatus:
    """Uncommitted state of the working tree."""
    current_branch: str = ""
    current_commit_sha: str = ""
    tracking: Optional[str] = None  # Upstream of current_branch, e.g. "origin/main"
    detached: bool = False
    is_rebasing: bool = False
    staged: Tuple[str, ...] = ()
    modified: Tuple[str, ...] = ()
    created: Tuple[str, ...] = ()
    deleted: Tuple[str, ...] = ()
    renamed: Tuple[str, ...] = ()
    not_added: Tuple[str, ...] = ()  # Untracked
    conflicted: Tuple[str, ...] = ()

    @property
    def all_changed_files(self) -> Tuple[str, ...]:
        """Sorted union of every path that differs from a clean state."""
        paths = set()
        for group in (self.staged, self.modified, self.created, self.deleted,
                      self.renamed, self.not_added, self.conflicted):
            paths.update(group)
        return tuple(sorted(paths))

    @property
    def is_clean(self) -> bool:
        return not self.all_changed_files


@dataclass(frozen=True)
class Repo:
    """Immutable point-in-time snapshot of a repository."""
    path: str
    commits: Tuple[Commit, ...] = ()
    branches: Tuple[Branch, ...] = ()
    working_tree_status: WorkingTreeStatus = field(default_factory=WorkingTreeStatus)

    @property
    def trunk_branches(self) -> Tuple[Branch, ...]:
        return tuple(branch for branch in self.branches if branch.is_trunk)
