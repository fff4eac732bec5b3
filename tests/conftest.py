"""Pytest fixtures for git-stacks tests"""
import tempfile
from pathlib import Path
import pytest
import git

from git_stacks.core.snapshot import link_commits
from git_stacks.core.trunk_resolver import mark_trunk
from git_stacks.models.repo import Branch, Commit, Repo, WorkingTreeStatus


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_config():
    """Create a configuration dictionary for testing."""
    return {
        'remote_name': 'origin',
        'trunk_branch': None,
        'trunk_candidates': ['main', 'master', 'develop'],
        'watch': False,
        'debounce_ms': 50,
        'interactive': False,
        'verbose': False,
        'debug': False,
    }


def _commit_file(repo, name, content, message):
    """Write a file, stage it and commit it."""
    path = Path(repo.working_dir) / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    repo.index.add([name])
    return repo.index.commit(message)


@pytest.fixture
def commit_file():
    """Helper that writes, stages and commits a file."""
    return _commit_file


@pytest.fixture
def empty_repo(temp_dir):
    """Create a Git repository without any commits."""
    repo_path = temp_dir / "empty_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    yield repo

    repo.close()


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository for testing."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    # Initialize repository
    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    # Create initial commit on main branch
    _commit_file(repo, "README.md", "# Test Repository\n", "Initial commit")

    # Rename master to main if needed
    repo.git.branch('-M', 'main')

    yield repo

    # Cleanup
    repo.close()


@pytest.fixture
def git_repo_with_stack(git_repo):
    """Create a repository with a two-branch stack on top of main.

    main:           Initial commit -> Second commit
    feature/base:   Second commit -> Base work
    feature/top:    Base work -> Top work
    """
    repo = git_repo
    _commit_file(repo, "second.txt", "second\n", "Second commit")

    repo.git.checkout('-b', 'feature/base')
    _commit_file(repo, "base.txt", "base\n", "Base work")

    repo.git.checkout('-b', 'feature/top')
    _commit_file(repo, "top.txt", "top\n", "Top work")

    repo.git.checkout('main')

    yield repo


@pytest.fixture
def git_repo_with_origin(git_repo, temp_dir):
    """Create a repository whose main is pushed to a local bare origin.

    ``refs/remotes/origin/HEAD`` points at ``origin/main``.
    """
    repo = git_repo
    remote_path = temp_dir / "origin.git"
    git.Repo.init(remote_path, bare=True).close()

    repo.create_remote('origin', str(remote_path))
    repo.git.push('--set-upstream', 'origin', 'main')
    repo.git.fetch('origin')
    repo.git.remote('set-head', 'origin', 'main')

    yield repo


@pytest.fixture
def make_snapshot():
    """Factory building an in-memory Repo snapshot.

    Usage:
        make_snapshot(
            commits=[("R", ""), ("A", "R"), ("B", "A", 3000)],
            branches={"main": "B", "origin/main": "B"},
            trunk="main",
        )

    Commit tuples are ``(sha, parent_sha[, time_ms])``; the message is
    "commit <sha>". Branch refs starting with "origin/" or "upstream/" are remote.
    ``current_commit`` is the sha HEAD points at.
    """
    def _make(commits, branches, trunk="main", current_branch="", current_commit=""):
        records = []
        for entry in commits:
            sha, parent = entry[0], entry[1]
            time_ms = entry[2] if len(entry) > 2 else 1000
            records.append(Commit(sha=sha, message=f"commit {sha}", time_ms=time_ms, parent_sha=parent))

        raw_branches = [
            Branch(ref=ref, head_sha=sha, is_remote=ref.startswith(("origin/", "upstream/")))
            for ref, sha in branches.items()
        ]
        return Repo(
            path="/fake/repo",
            commits=tuple(link_commits(records)),
            branches=tuple(mark_trunk(raw_branches, trunk)),
            working_tree_status=WorkingTreeStatus(
                current_branch=current_branch, current_commit_sha=current_commit
            ),
        )

    return _make
