"""Formatting utilities for git-worktree-keeper.

This package provides formatting functions for displaying worktree information,
organized into logical modules:
- worktree: Branch label, changes, sync and merge columns
- safety: Deletion safety summaries
"""

from .worktree import (
    format_branch_name,
    format_changes,
    format_sync,
    format_merged,
    format_last_commit,
)

from .safety import (
    format_safety_level,
    format_safety_details,
)

__all__ = [
    # Worktree
    "format_branch_name",
    "format_changes",
    "format_sync",
    "format_merged",
    "format_last_commit",
    # Safety
    "format_safety_level",
    "format_safety_details",
]
