"""Tests for formatting utilities"""
from io import StringIO

from rich.console import Console

from git_stacks.formatters import (
    build_stack_tree,
    format_change_counts,
    format_commit_label,
    format_short_sha,
    format_stack_title,
    format_timestamp,
    format_tips,
    format_working_tree,
    get_tip_style_type,
)
from git_stacks.models.repo import WorkingTreeStatus
from git_stacks.models.stack import BranchTip, Stack, StackCommit


def render(renderable):
    console = Console(file=StringIO(), width=120, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


def sample_stacks():
    feature = StackCommit(sha="c" * 40, name="Add feature", branches=[BranchTip("feature", is_current=True)])
    anchor = StackCommit(sha="a" * 40, name="Base")
    trunk_a = StackCommit(
        sha="a" * 40, name="Base", spinoffs=[Stack(commits=[anchor, feature])]
    )
    trunk_b = StackCommit(
        sha="b" * 40, name="Next", branches=[BranchTip("main", is_trunk=True)]
    )
    return [Stack(commits=[trunk_a, trunk_b], is_trunk=True)]


class TestDateFormatters:
    """Test timestamp formatting."""

    def test_format_timestamp(self):
        """Test millisecond timestamps are shown in UTC."""
        assert format_timestamp(86_400_000) == "1970-01-02 00:00"

    def test_placeholder_timestamp(self):
        """Test placeholder timestamps are unknown."""
        assert format_timestamp(0) == "unknown"
        assert format_timestamp(-1) == "unknown"


class TestStackFormatters:
    """Test commit, tip and tree formatting."""

    def test_short_sha(self):
        """Test shas are abbreviated to seven characters."""
        assert format_short_sha("0123456789abcdef") == "0123456"

    def test_tip_style(self):
        """Test current beats trunk, and remote is distinguished from local."""
        assert get_tip_style_type(BranchTip("main", is_current=True, is_trunk=True)) == "current"
        assert get_tip_style_type(BranchTip("main", is_trunk=True)) == "trunk"
        assert get_tip_style_type(BranchTip("origin/x", is_remote=True)) == "remote"
        assert get_tip_style_type(BranchTip("x")) == "local"

    def test_format_tips(self):
        """Test tips are listed in parentheses with the current branch starred."""
        tips = [BranchTip("feature", is_current=True), BranchTip("origin/feature", is_remote=True)]
        assert format_tips(tips).plain == "(feature *, origin/feature)"
        assert format_tips([]).plain == ""

    def test_commit_label(self):
        """Test commit labels with and without time."""
        commit = StackCommit(sha="abcdef0123", name="Fix", timestamp_ms=0, branches=[BranchTip("x")])
        assert format_commit_label(commit).plain == "○ abcdef0 Fix (x)  unknown"
        assert format_commit_label(commit, show_time=False).plain == "○ abcdef0 Fix (x)"

    def test_current_commit_label(self):
        """Test the checked out commit gets the filled marker."""
        commit = StackCommit(sha="abcdef0123", name="Fix", is_current=True)
        assert format_commit_label(commit, show_time=False).plain == "● abcdef0 Fix"

    def test_stack_titles(self):
        """Test trunk, numbered and spinoff titles."""
        assert "trunk" in format_stack_title(Stack(is_trunk=True), 1).plain
        assert format_stack_title(Stack(), 2).plain.endswith("stack 2")
        assert format_stack_title(Stack()).plain.endswith("spinoff")

    def test_build_stack_tree(self):
        """Test the tree shows trunk newest first with the spinoff nested."""
        output = render(build_stack_tree(sample_stacks(), show_time=False))

        assert output.index("Next") < output.index("Base")
        assert "↳ spinoff" in output
        assert "Add feature (feature *)" in output
        assert output.index("Base") < output.index("Add feature")

    def test_build_stack_tree_empty(self):
        """Test an empty tree says so."""
        assert "(no stacks)" in render(build_stack_tree([]))


class TestStatusFormatters:
    """Test working tree formatting."""

    def test_change_counts(self):
        """Test change counts and the clean state."""
        status = WorkingTreeStatus(staged=("a", "b"), modified=("c",), not_added=("d",))
        assert format_change_counts(status) == "S2 M1 U1"
        assert format_change_counts(WorkingTreeStatus()) == "clean"

    def test_working_tree_lines(self):
        """Test the summary lines."""
        status = WorkingTreeStatus(
            current_branch="feature",
            current_commit_sha="0123456789",
            tracking="origin/feature",
            is_rebasing=True,
        )
        lines = format_working_tree(status)
        assert lines[0].endswith("feature")
        assert lines[1].endswith("0123456")
        assert lines[2].endswith("origin/feature")
        assert lines[3].endswith("yes")
        assert lines[4].endswith("clean")

    def test_detached_without_commits(self):
        """Test placeholders for detached and empty repositories."""
        lines = format_working_tree(WorkingTreeStatus(detached=True))
        assert "(detached)" in lines[0]
        assert "(no commits)" in lines[1]
        assert "[detached]" in lines[2]
