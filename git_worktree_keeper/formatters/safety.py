"""Safety classification formatting utilities."""

from typing import List

from git_worktree_keeper.models.safety import SafetyInfo, SafetyLevel

LEVEL_SUMMARY = {
    SafetyLevel.SAFE: "Safe to delete: clean, merged, nothing unique.",
    SafetyLevel.WARNING: "Deleting may lose work that is hard to recover.",
    SafetyLevel.DANGER: "Deleting will permanently lose work.",
}


def format_safety_level(level: SafetyLevel) -> str:
    """Upper-case level label for headings."""
    return str(level).upper()


def format_safety_details(info: SafetyInfo, max_commits: int = 10) -> List[str]:
    """
    Build the lines shown before a delete confirmation.

    Args:
        info: Safety classification
        max_commits: Unique commits to list before summarizing the rest

    Returns:
        Lines of plain text, most important first
    """
    lines = [LEVEL_SUMMARY[info.level]]
    for reason in info.reasons:
        lines.append(f"  • {reason}")
    for reason in info.unverified:
        lines.append(f"  ? {reason}")

    if info.has_unique_commits:
        lines.append("Commits that exist only on this branch:")
        for commit in info.unique_commits[:max_commits]:
            lines.append(f"    {commit.hash} {commit.message}")
        remaining = info.unique_commit_count - max_commits
        if remaining > 0:
            lines.append(f"    … and {remaining} more")
    return lines
