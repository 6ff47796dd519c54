"""Custom exceptions for git-worktree-keeper"""

from typing import Optional, Sequence


class GitWorktreeKeeperError(Exception):
    """Base exception for all git-worktree-keeper errors."""
    pass


class GitOperationError(GitWorktreeKeeperError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, branch: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.branch = branch
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if branch:
            error_msg += f" for branch '{branch}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class GitCommandFailed(GitOperationError):
    """Exception raised when the git executable exits non-zero or cannot be run.

    Carries the failing argument list, exit status and stderr text so callers
    can report exactly which query failed.
    """

    def __init__(self, args: Sequence[str], status=None, stderr: str = ""):
        self.args_list = list(args)
        self.status = status
        self.stderr = (stderr or "").strip()

        command = "git " + " ".join(self.args_list)
        detail = f"exit {status}" if status is not None else "could not run"
        if self.stderr:
            detail += f": {self.stderr}"
        super().__init__(command, message=detail)


class NotARepositoryError(GitOperationError):
    """Exception raised when the working directory is not inside a git repository."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        super().__init__("detect_repository", message=message or f"not a git repository: {path}")


class WorktreeNotFoundError(GitOperationError):
    """Exception raised when a worktree path does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__("find_worktree", message=f"Worktree not found: {path}")
