"""Shared constants for git-worktree-keeper."""

from dataclasses import dataclass
from typing import List

from git_worktree_keeper.models.safety import SafetyLevel


@dataclass
class ColumnDefinition:
    """Definition of a table column."""

    key: str
    label: str
    width: int = 0  # 0 means auto-width


COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("branch", "Branch", 30),
    ColumnDefinition("path", "Path", 30),
    ColumnDefinition("changes", "Changes", 8),
    ColumnDefinition("sync", "Sync", 10),
    ColumnDefinition("merged", "Merged", 7),
    ColumnDefinition("unique", "Unique", 7),
    ColumnDefinition("last_commit", "Last Commit", 40),
]


# Symbol constants
SYMBOL_CURRENT = "@"
SYMBOL_MAIN = "⌂"
SYMBOL_MERGED = "✓"
SYMBOL_NOT_MERGED = "✗"
SYMBOL_UNKNOWN = "?"
SYMBOL_AHEAD = "↑"
SYMBOL_BEHIND = "↓"


# CLI colors (Rich color names)
SAFETY_COLORS = {
    SafetyLevel.SAFE: "green",
    SafetyLevel.WARNING: "yellow",
    SafetyLevel.DANGER: "red",
}


LEGEND_TEXT = """
Legend:
@ = Current worktree      ⌂ = Main worktree
↑ = Unpushed commits      ↓ = Commits to pull
✓ = Merged into default   ✗ = Not merged   ? = Merge status unknown
Unique = commits found only on this branch
"""
