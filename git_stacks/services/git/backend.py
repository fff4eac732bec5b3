"""GitPython backend: the only place that talks to git."""

import os
from typing import Iterator, List, Optional, Sequence

import git

from git_stacks.constants import DEFAULT_REMOTE, SYMBOLIC_BRANCH_NAMES
from git_stacks.exceptions import GitOperationError, RefNotFoundError, RepositoryNotFoundError
from git_stacks.models.repo import Branch, Commit, WorkingTreeStatus
from git_stacks.logging_config import get_logger

logger = get_logger(__name__)

# XY porcelain codes that mean an unmerged path
CONFLICT_CODES = {"DD", "AU", "UD", "UA", "DU", "AA", "UU"}


class GitBackend:
    """Thin wrapper over GitPython exposing the operations git-stacks needs."""

    def __init__(self, repo_path: str):
        """Initialize the backend.

        Args:
            repo_path: Path to the git repository (string path, not repo object)
        """
        self.repo_path = repo_path
        logger.debug(f"Git backend initialized for {repo_path}")

    def _get_repo(self) -> git.Repo:
        """Get a fresh git.Repo instance.

        GitPython repos are lightweight - they don't clone, just open the
        existing repo - so each call gets its own instance for thread safety.
        """
        try:
            return git.Repo(self.repo_path)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise RepositoryNotFoundError(self.repo_path, str(e)) from e

    def validate(self) -> None:
        """Raise RepositoryNotFoundError unless repo_path is a git repository."""
        self._get_repo()

    def list_branches(self, remote_name: Optional[str] = None) -> List[Branch]:
        """List local branches followed by remote-tracking branches.

        Symbolic refs such as ``origin/HEAD`` are skipped. A branch whose head
        cannot be read is kept with an empty ``head_sha``.

        Args:
            remote_name: Only list remote branches of this remote (None = all remotes)
        """
        repo = self._get_repo()
        branches = []
        for head in repo.heads:
            branches.append(Branch(ref=head.name, head_sha=self._head_sha(head), is_remote=False))

        for remote in repo.remotes:
            if remote_name and remote.name != remote_name:
                continue
            try:
                refs = list(remote.refs)
            except (AssertionError, ValueError, git.exc.GitCommandError) as e:
                # GitPython asserts when a remote has no refs yet
                logger.debug(f"Cannot read refs of remote {remote.name}: {e}")
                continue
            for ref in refs:
                if ref.remote_head in SYMBOLIC_BRANCH_NAMES:
                    continue
                branches.append(Branch(ref=ref.name, head_sha=self._head_sha(ref), is_remote=True))

        logger.debug(f"Found {len(branches)} branches")
        return branches

    def _head_sha(self, ref) -> str:
        try:
            return ref.commit.hexsha
        except (ValueError, git.exc.GitCommandError) as e:
            logger.debug(f"Cannot resolve head of {ref.name}: {e}")
            return ""

    def log(self, ref: str) -> Iterator[Commit]:
        """Yield the first-parent history of ``ref``, newest first.

        Only first parents are followed, matching the single-parent model.
        ``children_sha`` is left empty for the snapshot builder to fill in.
        """
        repo = self._get_repo()
        try:
            for commit in repo.iter_commits(ref, first_parent=True):
                message = commit.message
                if isinstance(message, bytes):
                    message = message.decode("utf-8", errors="ignore")
                yield Commit(
                    sha=commit.hexsha,
                    message=message.strip(),
                    time_ms=int(commit.authored_date) * 1000,
                    parent_sha=commit.parents[0].hexsha if commit.parents else "",
                )
        except git.exc.GitCommandError as e:
            raise GitOperationError("log", ref, str(e).strip()) from e

    def resolve_ref(self, ref: str) -> str:
        """Resolve ``ref`` to a commit sha.

        Raises:
            RefNotFoundError: The ref does not name a commit
        """
        repo = self._get_repo()
        try:
            return repo.git.rev_parse("--verify", "--quiet", f"{ref}^{{commit}}").strip()
        except git.exc.GitCommandError as e:
            raise RefNotFoundError(ref) from e

    def has_head(self) -> bool:
        """Whether HEAD resolves to a commit (False before the initial commit).

        Raises:
            GitOperationError: HEAD exists but does not resolve to a commit
        """
        try:
            self.resolve_ref("HEAD")
            return True
        except RefNotFoundError:
            pass

        repo = self._get_repo()
        try:
            branch_ref = repo.git.symbolic_ref("--quiet", "HEAD").strip()
        except git.exc.GitCommandError as e:
            # Detached HEAD naming a missing commit
            raise GitOperationError("has_head", "HEAD", "HEAD does not name a commit") from e

        try:
            # Plain --verify only reads the ref, it does not look the object up
            target = repo.git.rev_parse("--verify", "--quiet", branch_ref).strip()
        except git.exc.GitCommandError:
            # Unborn branch
            return False
        raise GitOperationError("has_head", branch_ref, f"points at {target}, which is not a commit")

    def remote_default_branch(self, remote_name: str = DEFAULT_REMOTE) -> str:
        """Branch name behind ``refs/remotes/<remote>/HEAD``.

        Raises:
            RefNotFoundError: The remote has no symbolic HEAD
        """
        repo = self._get_repo()
        symbolic = f"refs/remotes/{remote_name}/HEAD"
        try:
            target = repo.git.symbolic_ref("--quiet", symbolic).strip()
        except git.exc.GitCommandError as e:
            raise RefNotFoundError(symbolic) from e
        prefix = f"refs/remotes/{remote_name}/"
        if not target.startswith(prefix):
            raise RefNotFoundError(symbolic)
        return target[len(prefix):]

    def working_tree_status(self, branches: Sequence[Branch] = ()) -> WorkingTreeStatus:
        """Read the current branch, HEAD and uncommitted changes.

        Args:
            branches: Known branches, used to guess the upstream when none is configured
        """
        repo = self._get_repo()

        try:
            current_branch = repo.active_branch.name
            detached = False
        except TypeError:
            # Detached HEAD
            current_branch = ""
            detached = True

        try:
            current_sha = repo.head.commit.hexsha
        except ValueError:
            # No commits yet
            current_sha = ""

        tracking = None
        if current_branch and current_sha:
            tracking_ref = repo.active_branch.tracking_branch()
            if tracking_ref is not None:
                tracking = tracking_ref.name
        if tracking is None and current_branch:
            match = next(
                (b for b in branches if b.is_remote and b.local_name == current_branch), None
            )
            tracking = match.ref if match else None

        git_dir = repo.git_dir
        is_rebasing = any(
            os.path.isdir(os.path.join(git_dir, name)) for name in ("rebase-merge", "rebase-apply")
        )

        # --no-optional-locks keeps status from rewriting .git/index, which the watcher sees
        with repo.git.custom_environment(GIT_OPTIONAL_LOCKS="0"):
            porcelain = repo.git.status("--porcelain", "--untracked-files=all")

        return parse_porcelain_status(
            porcelain,
            current_branch=current_branch,
            current_commit_sha=current_sha,
            tracking=tracking,
            detached=detached,
            is_rebasing=is_rebasing,
        )

    def add(self, paths: Sequence[str]) -> None:
        """Stage ``paths`` (including deletions)."""
        self._index_command("add", "add", "--", *paths)

    def reset_index(self, paths: Sequence[str]) -> None:
        """Reset the index entries of ``paths`` to match HEAD."""
        self._index_command("reset_index", "reset", "--quiet", "HEAD", "--", *paths)

    def remove_from_index(self, paths: Sequence[str]) -> None:
        """Remove ``paths`` from the index, leaving the working tree alone."""
        self._index_command("remove", "rm", "--cached", "--quiet", "-r", "--", *paths)

    def _index_command(self, operation: str, command: str, *args: str) -> None:
        repo = self._get_repo()
        try:
            getattr(repo.git, command)(*args)
        except git.exc.GitCommandError as e:
            raise GitOperationError(operation, message=str(e).strip()) from e


def _unquote(path: str) -> str:
    """Undo git's C-style quoting of paths with special characters."""
    if len(path) >= 2 and path[0] == '"' and path[-1] == '"':
        raw = path[1:-1].encode("utf-8").decode("unicode_escape")
        return raw.encode("latin-1").decode("utf-8", errors="replace")
    return path


def parse_porcelain_status(porcelain: str, **fields) -> WorkingTreeStatus:
    """Turn ``git status --porcelain`` (v1) output into a WorkingTreeStatus."""
    staged, modified, created, deleted = [], [], [], []
    renamed, not_added, conflicted = [], [], []

    for line in porcelain.splitlines():
        if len(line) < 4:
            continue
        code, path = line[:2], line[3:]
        if " -> " in path:
            path = path.split(" -> ", 1)[1]
        path = _unquote(path)
        x, y = code[0], code[1]

        if code == "??":
            not_added.append(path)
            continue
        if code in CONFLICT_CODES:
            conflicted.append(path)
            continue
        if x not in " ?":
            staged.append(path)
        if x == "A":
            created.append(path)
        if x == "R":
            renamed.append(path)
        if y == "M":
            modified.append(path)
        if x == "D" or y == "D":
            deleted.append(path)

    return WorkingTreeStatus(
        staged=tuple(staged),
        modified=tuple(modified),
        created=tuple(created),
        deleted=tuple(deleted),
        renamed=tuple(renamed),
        not_added=tuple(not_added),
        conflicted=tuple(conflicted),
        **fields,
    )
