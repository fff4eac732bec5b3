"""Orchestration of snapshot reading, stack building, staging and watching"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from rich.console import Console

from git_stacks.config import Config
from git_stacks.core.stack_builder import build_stacks
from git_stacks.formatters import build_stack_tree, format_working_tree
from git_stacks.models.repo import Repo
from git_stacks.models.stack import Stack
from git_stacks.services.git import GitBackend
from git_stacks.services.snapshot_service import SnapshotService
from git_stacks.services.stage_service import StageController
from git_stacks.services.watcher_service import ChangeCallback, RepoWatcher, WatchSubscription
from git_stacks.logging_config import get_logger

console = Console()
logger = get_logger(__name__)


@dataclass
class StackState:
    """Result of one load: the snapshot and the stacks derived from it."""
    repo: Optional[Repo] = None
    stacks: List[Stack] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def trunk(self) -> Optional[Stack]:
        return self.stacks[0] if self.stacks else None


class StackKeeper:
    """Main class tying the git backend to the stack view."""

    def __init__(self, repo_path: str, config: Union[Config, dict, None] = None, tui_mode: bool = False):
        """Initialize StackKeeper.

        Args:
            repo_path: Path to git repository
            config: Configuration dict or Config object
            tui_mode: If True, suppresses Rich console output (for TUI mode)

        Raises:
            RepositoryNotFoundError: ``repo_path`` is not a git repository
        """
        self.repo_path = repo_path
        self.tui_mode = tui_mode
        if config is None:
            self.config = Config()
        elif isinstance(config, dict):
            self.config = Config.from_dict(config)
        else:
            self.config = config

        self.backend = GitBackend(repo_path)
        # Fail early on a bad path rather than on the first refresh
        self.backend.validate()

        self.snapshot_service = SnapshotService(self.backend, self.config)
        self.stage_controller = StageController(self.backend)
        self.watcher = RepoWatcher(debounce_ms=self.config.debounce_ms)

    def snapshot(self) -> Repo:
        """Read a fresh snapshot. Backend failures propagate."""
        return self.snapshot_service.build_snapshot()

    def load(self) -> StackState:
        """Read a snapshot and build its stacks.

        Any failure yields an empty state with the error message, never a
        partial tree.
        """
        try:
            repo = self.snapshot()
            stacks = build_stacks(
                repo,
                remote_name=self.config.remote_name,
                declutter_trunk=self.config.declutter_trunk,
            )
        except Exception as e:
            logger.error(f"Error building stacks: {e}", exc_info=True)
            return StackState(error=str(e))
        return StackState(repo=repo, stacks=stacks)

    def set_staged(self, paths: Sequence[str], staged: bool) -> None:
        """Stage or unstage paths; the next load reflects the change."""
        self.stage_controller.set_staged(paths, staged)
        verb = "Staged" if staged else "Unstaged"
        self._console_print(f"[green]{verb} {len(paths)} path(s)[/green]")

    def start_watching(self, on_change: ChangeCallback) -> Optional[WatchSubscription]:
        """Watch the repository and call ``on_change`` after each burst of changes."""
        if not self.config.watch:
            logger.debug("Watching disabled by configuration")
            return None
        return self.watcher.watch(self.repo_path, on_change)

    def stop_watching(self) -> None:
        self.watcher.stop()

    def print_stacks(self, state: Optional[StackState] = None) -> StackState:
        """Print the working tree summary and the stack tree to the console."""
        state = state or self.load()
        if state.error:
            console.print(f"[red]Error: {state.error}[/red]")
        if state.repo is not None:
            for line in format_working_tree(state.repo.working_tree_status):
                console.print(line, highlight=False)
            console.print()
        console.print(build_stack_tree(state.stacks))
        return state

    def close(self) -> None:
        """Release the watcher."""
        self.stop_watching()

    def _console_print(self, message: str) -> None:
        if not self.tui_mode:
            console.print(message)
