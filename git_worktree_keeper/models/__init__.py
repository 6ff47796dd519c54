"""Data models for git-worktree-keeper."""

from .branch import Branch, CommitInfo
from .repository import Repository
from .safety import SafetyInfo, SafetyLevel
from .worktree import Worktree

__all__ = [
    "Branch",
    "CommitInfo",
    "Repository",
    "SafetyInfo",
    "SafetyLevel",
    "Worktree",
]
