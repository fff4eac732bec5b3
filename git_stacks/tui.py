"""Interactive TUI for git-stacks using Textual."""

import asyncio
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Vertical
from textual.events import Click
from textual.screen import ModalScreen
from textual.widgets import Button, Footer, Header, Static, Tree
from rich.text import Text

from .__version__ import __version__
from .constants import LEGEND_TEXT
from .core.stack_keeper import StackKeeper, StackState
from .formatters import format_change_counts, format_commit_label, format_stack_title
from .logging_config import get_logger

logger = get_logger(__name__)


class InfoScreen(ModalScreen):
    """Modal info display dialog for the legend and error messages."""

    DEFAULT_CSS = """
    InfoScreen {
        align: center middle;
    }

    #info-dialog {
        width: 80%;
        height: auto;
        border: thick $background 80%;
        background: $surface;
        padding: 1 2;
    }

    #info-content {
        width: 100%;
        height: auto;
        padding: 1 0;
    }

    #info-button-container {
        width: 100%;
        height: auto;
        align: center middle;
        padding: 1 0;
    }
    """

    BINDINGS = [Binding("escape", "close", "Close")]

    def __init__(self, info: str):
        super().__init__()
        self.info = info

    def compose(self) -> ComposeResult:
        with Vertical(id="info-dialog"):
            yield Static(self.info, id="info-content")
            with Container(id="info-button-container"):
                yield Button("Close", variant="primary", id="close")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button press."""
        self.dismiss()

    def action_close(self) -> None:
        self.dismiss()


class NonExpandingHeader(Header):
    """Header widget that doesn't expand/contract on click."""

    def on_click(self, event: Click) -> None:
        """Override to disable click-to-expand behavior."""
        event.stop()


class StacksApp(App):
    """Interactive TUI for git-stacks."""

    ENABLE_COMMAND_PALETTE = True
    TITLE = "Git Stacks"
    SUB_TITLE = f"v{__version__}"

    CSS = """
    Screen {
        background: $surface;
    }

    Tree {
        height: 1fr;
    }

    #status-bar {
        dock: bottom;
        height: auto;
        background: $panel;
        padding: 1;
    }

    ToastRack {
        offset: 0 -3;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("a", "stage_all", "Stage All"),
        Binding("u", "unstage_all", "Unstage All"),
        Binding("t", "toggle_time", "Toggle Time"),
        Binding("l", "show_legend", "Legend"),
    ]

    def __init__(self, keeper: StackKeeper):
        super().__init__()
        self.keeper = keeper
        self.state = StackState()
        self.show_time = True

    def compose(self) -> ComposeResult:
        """Create child widgets."""
        yield NonExpandingHeader(show_clock=False, icon="")
        yield Tree(Text("Stacks", style="bold"), id="stack-tree")
        yield Static(id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Load the first snapshot and start watching the repository."""
        tree = self.query_one(Tree)
        tree.show_root = False
        tree.loading = True
        self.refresh_data(notify=False)
        if self.keeper.start_watching(self._on_repo_change) is None and self.keeper.config.watch:
            self.notify("Could not watch repository, press r to refresh", severity="warning")

    def _on_repo_change(self) -> None:
        # Runs on the watcher's timer thread
        try:
            self.call_from_thread(self.refresh_data, False)
        except RuntimeError:
            # App is not running any more
            logger.debug("Dropping change notification, app is not running")

    def _populate_tree(self) -> None:
        """Rebuild the tree widget from the current stacks."""
        tree = self.query_one(Tree)
        tree.clear()

        if not self.state.stacks:
            tree.root.add_leaf(Text("(no stacks)", style="dim"))
            tree.root.expand()
            return

        pending = [
            (tree.root, stack, number)
            for number, stack in reversed(list(enumerate(self.state.stacks, 1)))
        ]
        while pending:
            parent, stack, number = pending.pop()
            stack_node = parent.add(format_stack_title(stack, number), expand=True)
            for commit in reversed(stack.commits):
                label = format_commit_label(commit, self.show_time)
                if not commit.spinoffs:
                    stack_node.add_leaf(label, data=commit.sha)
                    continue
                commit_node = stack_node.add(label, data=commit.sha, expand=True)
                for spinoff in reversed(commit.spinoffs):
                    pending.append((commit_node, spinoff, None))
        tree.root.expand()

    def _update_status(self) -> None:
        """Update status bar with the working tree summary."""
        status = self.query_one("#status-bar", Static)
        repo = self.state.repo
        if repo is None:
            status.update("No repository data")
            return

        wts = repo.working_tree_status
        branch = wts.current_branch or "(detached)"
        trunk = ", ".join(b.ref for b in repo.trunk_branches) or "(none)"
        parts = [
            f"Branch: {branch}",
            f"Trunk: {trunk}",
            f"Stacks: {len(self.state.stacks)}",
            f"Changes: {format_change_counts(wts)}",
        ]
        if wts.is_rebasing:
            parts.append("REBASING")
        status.update(" | ".join(parts))

    def action_refresh(self) -> None:
        """Trigger a refresh of the stack tree."""
        self.refresh_data()  # @work decorator handles Worker creation

    @work(exclusive=True, thread=False)
    async def refresh_data(self, notify: bool = True) -> None:
        """Read a new snapshot and rebuild the tree (runs in background)."""
        tree = self.query_one(Tree)
        try:
            # keeper.load is synchronous and talks to git
            state = await asyncio.to_thread(self.keeper.load)
            self.state = state
            self._populate_tree()
            self._update_status()

            if state.error:
                self.push_screen(
                    InfoScreen(
                        f"Error loading stacks:\n\n{state.error}\n\nCheck the logs for more details."
                    )
                )
            elif notify:
                self.notify("✓ Stacks refreshed", severity="information")
        finally:
            tree.loading = False

    def action_stage_all(self) -> None:
        """Stage every changed file."""
        repo = self.state.repo
        paths = list(repo.working_tree_status.all_changed_files) if repo else []
        if not paths:
            self.notify("Nothing to stage", severity="warning")
            return
        self.set_staged(paths, True)

    def action_unstage_all(self) -> None:
        """Unstage every staged file."""
        repo = self.state.repo
        paths = list(repo.working_tree_status.staged) if repo else []
        if not paths:
            self.notify("Nothing to unstage", severity="warning")
            return
        self.set_staged(paths, False)

    @work(exclusive=True, thread=False, group="stage")
    async def set_staged(self, paths, staged: bool) -> None:
        """Stage or unstage paths, then refresh."""
        try:
            await asyncio.to_thread(self.keeper.set_staged, paths, staged)
        except Exception as e:
            logger.error(f"Error changing index: {e}", exc_info=True)
            self.push_screen(InfoScreen(f"Error changing index:\n\n{str(e)}"))
            return
        verb = "Staged" if staged else "Unstaged"
        self.notify(f"{verb} {len(paths)} path(s)")
        # The watcher may refresh as well; exclusive workers collapse the two
        self.refresh_data(notify=False)

    def action_toggle_time(self) -> None:
        """Show or hide commit timestamps."""
        self.show_time = not self.show_time
        self._populate_tree()

    def action_show_legend(self) -> None:
        """Show legend explaining symbols and colors."""
        self.push_screen(InfoScreen(LEGEND_TEXT))

    async def action_quit(self) -> None:
        """Override quit action to clean up resources before exiting."""
        try:
            self.workers.cancel_all()
            self.keeper.close()
        except Exception as e:
            logger.debug(f"Error during shutdown: {e}")
        finally:
            self.exit()

