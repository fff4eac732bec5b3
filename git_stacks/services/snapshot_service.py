"""Service that reads a repository snapshot through the git backend"""

from typing import Dict, List, Optional, Sequence, Union, TYPE_CHECKING

from git_stacks.core.snapshot import link_commits
from git_stacks.core.trunk_resolver import mark_trunk, resolve_trunk
from git_stacks.exceptions import GitOperationError
from git_stacks.models.repo import Branch, Commit, Repo
from git_stacks.services.git.backend import GitBackend
from git_stacks.logging_config import get_logger

if TYPE_CHECKING:
    from git_stacks.config import Config

logger = get_logger(__name__)


class SnapshotService:
    """Builds immutable Repo snapshots. Nothing is cached between calls."""

    def __init__(self, backend: GitBackend, config: Union["Config", dict]):
        """Initialize the service.

        Args:
            backend: Git backend used for every read
            config: Configuration dictionary or Config object
        """
        self.backend = backend
        self.config = config
        self.remote_name = config.get("remote_name", "origin")
        self.trunk_branch = config.get("trunk_branch")
        self.trunk_candidates = config.get("trunk_candidates", ["main", "master", "develop"])

    def build_snapshot(self) -> Repo:
        """Read branches, commits and working tree status into a new Repo."""
        raw_branches = self.backend.list_branches()
        trunk_name = self.resolve_trunk_name(raw_branches)
        branches = mark_trunk(raw_branches, trunk_name)
        commits = self.collect_commits(branches)
        status = self.backend.working_tree_status(branches)

        logger.info(
            f"Snapshot: {len(branches)} branches, {len(commits)} commits, trunk={trunk_name}"
        )
        return Repo(
            path=self.backend.repo_path,
            commits=tuple(commits),
            branches=tuple(branches),
            working_tree_status=status,
        )

    def resolve_trunk_name(self, branches: Sequence[Branch]) -> Optional[str]:
        """Resolve the trunk name, using the remote's default branch when available."""
        return resolve_trunk(
            branches,
            remote_default=self.remote_default_branch(),
            preferred=self.trunk_branch,
            candidates=self.trunk_candidates,
        )

    def remote_default_branch(self) -> Optional[str]:
        """Branch behind the remote's symbolic HEAD, or None when there is no such pointer."""
        try:
            return self.backend.remote_default_branch(self.remote_name) or None
        except GitOperationError as e:
            logger.debug(f"No default branch signal from {self.remote_name}: {e}")
            return None

    def collect_commits(self, branches: Sequence[Branch]) -> List[Commit]:
        """Log every branch head and link the commits into a DAG.

        Each walk stops at the first commit already collected, since its
        first-parent ancestry has been read by an earlier walk.
        """
        records: Dict[str, Commit] = {}
        for branch in branches:
            if not branch.head_sha:
                logger.debug(f"Skipping {branch.ref}: head could not be read")
                continue
            full_ref = f"refs/remotes/{branch.ref}" if branch.is_remote else f"refs/heads/{branch.ref}"
            try:
                for commit in self.backend.log(full_ref):
                    if commit.sha in records:
                        break
                    records[commit.sha] = commit
            except GitOperationError as e:
                # Shallow clones and broken refs cannot be traversed
                logger.warning(f"Cannot read history of {branch.ref}: {e}")
        return link_commits(records.values())
