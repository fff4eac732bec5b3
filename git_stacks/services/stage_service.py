"""Service for staging and unstaging working tree paths"""

from typing import Sequence

from git_stacks.services.git.backend import GitBackend
from git_stacks.logging_config import get_logger

logger = get_logger(__name__)


class StageController:
    """Applies stage/unstage operations through the git backend."""

    def __init__(self, backend: GitBackend):
        self.backend = backend

    def set_staged(self, paths: Sequence[str], staged: bool) -> None:
        """Stage or unstage ``paths``.

        Unstaging resets each path to HEAD. Before the initial commit there is
        no HEAD to reset against, so the paths are removed from the index
        instead, leaving them untracked as if never staged.

        Raises:
            GitOperationError: The backend failed for a reason other than a missing HEAD
        """
        paths = list(paths)
        if not paths:
            return

        if staged:
            logger.debug(f"Staging {len(paths)} path(s)")
            self.backend.add(paths)
            return

        if self.backend.has_head():
            logger.debug(f"Resetting {len(paths)} path(s) to HEAD")
            self.backend.reset_index(paths)
        else:
            logger.debug(f"No HEAD yet, removing {len(paths)} path(s) from the index")
            self.backend.remove_from_index(paths)
