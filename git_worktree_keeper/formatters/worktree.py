"""Worktree field formatting utilities."""

from git_worktree_keeper.constants import (
    SYMBOL_AHEAD,
    SYMBOL_BEHIND,
    SYMBOL_CURRENT,
    SYMBOL_MAIN,
    SYMBOL_MERGED,
    SYMBOL_NOT_MERGED,
    SYMBOL_UNKNOWN,
)
from git_worktree_keeper.models.worktree import Worktree


def format_branch_name(worktree: Worktree) -> str:
    """
    Format the branch label with current/main markers.

    Args:
        worktree: Worktree to label

    Returns:
        e.g. "@ feature/auth" or "⌂ main"
    """
    markers = ""
    if worktree.is_current:
        markers += SYMBOL_CURRENT
    if worktree.is_main:
        markers += SYMBOL_MAIN
    name = worktree.branch or "(bare)"
    return f"{markers} {name}" if markers else name


def format_changes(worktree: Worktree) -> str:
    """Changed-file count, or empty for a clean worktree."""
    return f"+{worktree.dirty_files}" if worktree.is_dirty else ""


def format_sync(worktree: Worktree) -> str:
    """
    Format ahead/behind counts relative to upstream.

    Returns:
        "↑2 ↓1", "synced", or "local" when there is no upstream
    """
    if not worktree.has_upstream:
        return "" if worktree.is_detached or worktree.is_bare else "local"
    parts = []
    if worktree.ahead:
        parts.append(f"{SYMBOL_AHEAD}{worktree.ahead}")
    if worktree.behind:
        parts.append(f"{SYMBOL_BEHIND}{worktree.behind}")
    return " ".join(parts) if parts else "synced"


def format_merged(worktree: Worktree) -> str:
    """Merge symbol; unknown merge state is shown as such, never as merged."""
    if worktree.is_bare:
        return ""
    if not worktree.merge_known:
        return SYMBOL_UNKNOWN
    return SYMBOL_MERGED if worktree.is_merged else SYMBOL_NOT_MERGED


def format_last_commit(worktree: Worktree, max_message: int = 40) -> str:
    """Short hash, truncated subject and relative age of the last commit."""
    if not worktree.last_commit_hash:
        return ""
    message = worktree.last_commit_message
    if len(message) > max_message:
        message = message[: max_message - 1] + "…"
    return f"{worktree.last_commit_hash} {message} ({worktree.last_commit_time})"
