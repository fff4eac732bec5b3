"""Tests for StackKeeper"""
from pathlib import Path
from unittest.mock import patch

import pytest

from git_stacks.config import Config
from git_stacks.core import StackKeeper
from git_stacks.exceptions import GitOperationError, RepositoryNotFoundError


class TestStackKeeperInit:
    """Test StackKeeper initialization."""

    def test_init_with_dict_config(self, git_repo, mock_config):
        """Test a dictionary config is converted."""
        keeper = StackKeeper(git_repo.working_dir, mock_config)
        assert isinstance(keeper.config, Config)
        assert keeper.config.debounce_ms == 50
        assert keeper.watcher.debounce_ms == 50

    def test_init_without_config(self, git_repo):
        """Test defaults are used without a config."""
        keeper = StackKeeper(git_repo.working_dir)
        assert keeper.config.remote_name == "origin"

    def test_init_with_invalid_path(self, temp_dir):
        """Test a path that is not a repository fails early."""
        with pytest.raises(RepositoryNotFoundError):
            StackKeeper(str(temp_dir))


class TestStackKeeperLoad:
    """Test loading stacks."""

    def test_load_stack(self, git_repo_with_stack, mock_config):
        """Test the stacked branches hang off trunk."""
        keeper = StackKeeper(git_repo_with_stack.working_dir, mock_config)
        state = keeper.load()

        assert state.error is None
        assert len(state.stacks) == 1
        trunk = state.trunk
        # Initial commit has no branches, so it is decluttered away
        assert [c.name for c in trunk.commits] == ["Second commit"]
        assert trunk.head.is_current is True
        assert [(t.name, t.is_current) for t in trunk.head.branches] == [("main", True)]

        spinoff = trunk.head.spinoffs[0]
        assert [c.name for c in spinoff.commits] == ["Second commit", "Base work", "Top work"]
        assert spinoff.commits[1].tip_of_branches == ["feature/base"]
        assert spinoff.commits[2].tip_of_branches == ["feature/top"]

    def test_load_full_trunk(self, git_repo_with_stack, mock_config):
        """Test decluttering can be turned off through the config."""
        mock_config["declutter_trunk"] = False
        state = StackKeeper(git_repo_with_stack.working_dir, mock_config).load()

        assert [c.name for c in state.trunk.commits] == ["Initial commit", "Second commit"]
        assert [c.is_current for c in state.trunk.commits] == [False, True]

    def test_load_empty_repo(self, empty_repo, mock_config):
        """Test an empty repository loads without stacks or errors."""
        state = StackKeeper(empty_repo.working_dir, mock_config).load()
        assert state.error is None
        assert state.stacks == []
        assert state.trunk is None

    def test_load_failure_gives_empty_state(self, git_repo, mock_config):
        """Test snapshot failures become an empty state with the error."""
        keeper = StackKeeper(git_repo.working_dir, mock_config)
        with patch.object(
            keeper.snapshot_service, "build_snapshot", side_effect=GitOperationError("log")
        ):
            state = keeper.load()

        assert state.stacks == []
        assert state.repo is None
        assert "log" in state.error

    def test_set_staged_reflected_in_next_load(self, git_repo, mock_config, capsys):
        """Test staging shows up in the following snapshot."""
        (Path(git_repo.working_dir) / "new.txt").write_text("new\n")
        keeper = StackKeeper(git_repo.working_dir, mock_config)

        keeper.set_staged(["new.txt"], True)

        assert keeper.load().repo.working_tree_status.staged == ("new.txt",)
        assert "Staged 1 path(s)" in capsys.readouterr().out

    def test_set_staged_quiet_in_tui_mode(self, git_repo, mock_config, capsys):
        """Test TUI mode suppresses console output."""
        (Path(git_repo.working_dir) / "new.txt").write_text("new\n")
        keeper = StackKeeper(git_repo.working_dir, mock_config, tui_mode=True)
        keeper.set_staged(["new.txt"], True)
        assert capsys.readouterr().out == ""


class TestStackKeeperOutput:
    """Test printing and watching."""

    def test_print_stacks(self, git_repo_with_stack, mock_config, capsys):
        """Test the printed tree contains branches and status."""
        keeper = StackKeeper(git_repo_with_stack.working_dir, mock_config)
        state = keeper.print_stacks()

        out = capsys.readouterr().out
        assert state.error is None
        assert "Branch   : main" in out
        assert "trunk" in out
        assert "feature/top" in out

    def test_print_error(self, git_repo, mock_config, capsys):
        """Test load errors are printed."""
        keeper = StackKeeper(git_repo.working_dir, mock_config)
        with patch.object(
            keeper.snapshot_service, "build_snapshot", side_effect=GitOperationError("log")
        ):
            keeper.print_stacks()
        assert "Error:" in capsys.readouterr().out

    def test_watching_disabled(self, git_repo, mock_config):
        """Test no watch starts when disabled by config."""
        keeper = StackKeeper(git_repo.working_dir, mock_config)
        assert keeper.start_watching(lambda: None) is None
        assert not keeper.watcher.is_watching

    def test_watching_enabled(self, git_repo, mock_config):
        """Test watching starts and close stops it."""
        mock_config["watch"] = True
        keeper = StackKeeper(git_repo.working_dir, mock_config)

        subscription = keeper.start_watching(lambda: None)
        assert subscription is not None
        assert subscription.path == git_repo.working_dir

        keeper.close()
        assert not keeper.watcher.is_watching
