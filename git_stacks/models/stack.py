"""Stack tree models derived from a repository snapshot"""
from dataclasses import dataclass, field
from typing import Iterator, List


@dataclass
class BranchTip:
    """A branch ref pointing at a commit in the stack tree."""
    name: str
    is_current: bool = False
    is_remote: bool = False
    is_trunk: bool = False


@dataclass
class StackCommit:
    """A commit node inside a stack."""
    sha: str
    name: str
    timestamp_ms: int = 0
    is_current: bool = False  # Checked out, also when HEAD is detached
    branches: List[BranchTip] = field(default_factory=list)
    spinoffs: List["Stack"] = field(default_factory=list)

    @property
    def tip_of_branches(self) -> List[str]:
        """Refs whose head is this commit."""
        return [branch.name for branch in self.branches]


@dataclass
class Stack:
    """A linear run of commits, oldest first, with spinoffs hanging off its commits."""
    commits: List[StackCommit] = field(default_factory=list)
    is_trunk: bool = False

    @property
    def shas(self) -> List[str]:
        return [commit.sha for commit in self.commits]

    @property
    def head(self) -> StackCommit:
        return self.commits[-1]

    def walk(self) -> Iterator["Stack"]:
        """Yield this stack and every nested spinoff, depth first."""
        pending = [self]
        while pending:
            stack = pending.pop()
            yield stack
            for commit in reversed(stack.commits):
                pending.extend(reversed(commit.spinoffs))

    def find_commit(self, sha: str) -> Iterator[StackCommit]:
        """Yield every node for ``sha`` in the tree (a spinoff repeats its base commit)."""
        for stack in self.walk():
            for commit in stack.commits:
                if commit.sha == sha:
                    yield commit
