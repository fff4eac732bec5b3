"""Tests for the command-line interface"""
from pathlib import Path

from git_stacks.cli import main, parse_args


class TestParseArgs:
    """Test argument parsing."""

    def test_defaults(self):
        """Test default argument values."""
        args = parse_args([])
        assert args.path == "."
        assert args.trunk is None
        assert args.remote == "origin"
        assert args.stage is None
        assert args.no_watch is False
        assert args.debounce_ms == 100
        assert args.full_trunk is False

    def test_options(self):
        """Test all options are parsed."""
        args = parse_args([
            "/repo", "--trunk", "develop", "--remote", "upstream",
            "--stage", "a.txt", "b.txt", "--no-interactive", "--no-watch", "-v", "--full-trunk",
        ])
        assert args.path == "/repo"
        assert args.trunk == "develop"
        assert args.remote == "upstream"
        assert args.stage == ["a.txt", "b.txt"]
        assert args.no_interactive is True
        assert args.verbose is True
        assert args.full_trunk is True


class TestMain:
    """Test the main entry point in non-interactive mode."""

    def test_prints_stacks(self, git_repo_with_stack, capsys):
        """Test printing the stacks of a repository."""
        code = main([git_repo_with_stack.working_dir, "--no-interactive"])
        out = capsys.readouterr().out
        assert code == 0
        assert "feature/base" in out

    def test_full_trunk(self, git_repo_with_stack, capsys):
        """Test the whole trunk history is printed on request."""
        assert main([git_repo_with_stack.working_dir, "--no-interactive"]) == 0
        assert "Initial commit" not in capsys.readouterr().out

        assert main([git_repo_with_stack.working_dir, "--no-interactive", "--full-trunk"]) == 0
        assert "Initial commit" in capsys.readouterr().out

    def test_stage_and_unstage(self, git_repo, capsys):
        """Test staging paths from the command line."""
        (Path(git_repo.working_dir) / "new.txt").write_text("new\n")
        path = str(Path(git_repo.working_dir) / "new.txt")

        assert main([git_repo.working_dir, "--no-interactive", "--stage", path]) == 0
        assert "new.txt" in git_repo.git.diff("--cached", "--name-only")

        assert main([git_repo.working_dir, "--no-interactive", "--unstage", path]) == 0
        assert git_repo.git.diff("--cached", "--name-only") == ""

    def test_not_a_repository(self, temp_dir, capsys):
        """Test a bad path reports an error."""
        code = main([str(temp_dir), "--no-interactive"])
        assert code == 1
        assert "Not a git repository" in capsys.readouterr().out

    def test_invalid_config(self, git_repo, capsys):
        """Test invalid options report an error."""
        code = main([git_repo.working_dir, "--no-interactive", "--debounce-ms", "0"])
        assert code == 1
        assert "debounce_ms" in capsys.readouterr().out
