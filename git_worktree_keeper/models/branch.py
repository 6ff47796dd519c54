"""Branch and commit models"""
from dataclasses import dataclass


@dataclass
class Branch:
    """A local branch, remote branch or tag."""
    name: str
    is_remote: bool = False
    is_current: bool = False
    is_worktree: bool = False  # Branch is checked out in a worktree
    is_tag: bool = False


@dataclass
class CommitInfo:
    """Abbreviated hash and subject line of a commit."""
    hash: str
    message: str
