"""Custom exceptions for git-stacks"""

from typing import Optional


class GitStacksError(Exception):
    """Base exception for all git-stacks errors."""
    pass


class GitOperationError(GitStacksError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, ref: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.ref = ref
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if ref:
            error_msg += f" for ref '{ref}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class RefNotFoundError(GitOperationError):
    """Exception raised when a ref does not resolve to a commit."""

    def __init__(self, ref: str):
        super().__init__("resolve_ref", ref, "Ref not found")


class RepositoryNotFoundError(GitStacksError):
    """Exception raised when a path is not a git repository."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        error_msg = f"Not a git repository: {path}"
        if message:
            error_msg += f" ({message})"
        super().__init__(error_msg)


class WatcherError(GitStacksError):
    """Exception raised when the repository watcher cannot be started."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        self.message = message
        error_msg = f"Cannot watch '{path}'"
        if message:
            error_msg += f": {message}"
        super().__init__(error_msg)
